"""Tests for the namespace/module registry."""

from __future__ import annotations

import threading

import pytest

from typeforge.access import TypeAttributes
from typeforge.blueprint import TypeBlueprint
from typeforge.errors import DuplicateTypeError, EmptyNameError
from typeforge.registry import (
    DynamicAssembly,
    DynamicModule,
    ModuleRegistry,
    get_module_registry,
    reset_module_registry,
)


class TestModuleRegistry:
    """Tests for ModuleRegistry."""

    def test_creates_module_and_assembly(self, registry):
        module = registry.get_or_create_module("app.generated")

        assert isinstance(module, DynamicModule)
        assert isinstance(module.assembly, DynamicAssembly)
        assert module.name == "app.generated"
        assert registry.get_assembly("app.generated") is module.assembly
        assert module in module.assembly.modules

    def test_same_namespace_same_pair(self, registry):
        first = registry.get_or_create_module("app.generated")
        second = registry.get_or_create_module("app.generated")

        assert first is second
        assert first.assembly is second.assembly

    def test_distinct_namespaces(self, registry):
        a = registry.get_or_create_module("a")
        b = registry.get_or_create_module("b")

        assert a is not b
        assert a.assembly is not b.assembly
        assert registry.namespaces() == ["a", "b"]
        assert "a" in registry
        assert "c" not in registry

    @pytest.mark.parametrize("namespace", ["", None])
    def test_empty_namespace(self, registry, namespace):
        with pytest.raises(EmptyNameError):
            registry.get_or_create_module(namespace)

    def test_unknown_namespace(self, registry):
        assert registry.get_module("missing") is None
        assert registry.get_assembly("missing") is None

    def test_reset(self, registry):
        first = registry.get_or_create_module("app")
        registry.reset()

        assert registry.namespaces() == []
        assert registry.get_or_create_module("app") is not first

    def test_concurrent_creation_yields_one_module(self, registry):
        results: list[DynamicModule] = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(registry.get_or_create_module("shared"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(m is results[0] for m in results)
        assert all(m.assembly is results[0].assembly for m in results)


class TestGlobalRegistry:
    """Tests for the process-wide registry accessors."""

    def test_singleton(self):
        assert get_module_registry() is get_module_registry()

    def test_reset(self):
        first = get_module_registry()
        reset_module_registry()
        assert get_module_registry() is not first


class TestDynamicModule:
    """Tests for DynamicModule type bookkeeping."""

    def test_define_type(self, module):
        bp = module.define_type("tests.generated.Widget", TypeAttributes.PUBLIC, object)

        assert isinstance(bp, TypeBlueprint)
        assert bp.name == "Widget"
        assert bp.full_name == "tests.generated.Widget"
        assert module.get_blueprint("tests.generated.Widget") is bp

    def test_duplicate_type(self, module):
        module.define_type("tests.generated.Widget", TypeAttributes.PUBLIC, object)
        with pytest.raises(DuplicateTypeError) as exc_info:
            module.define_type("tests.generated.Widget", TypeAttributes.PUBLIC, object)
        assert exc_info.value.context["full_name"] == "tests.generated.Widget"

    def test_baked_types_are_listed(self, module):
        bp = module.define_type("tests.generated.Widget", TypeAttributes.PUBLIC, object)
        assert module.get_types() == []

        cls = bp.bake()

        assert module.get_types() == [cls]
        assert module.get_type("tests.generated.Widget") is cls
        assert module.assembly.get_types() == [cls]
