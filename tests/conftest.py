"""Shared fixtures for typeforge tests."""

from __future__ import annotations

import pytest

from typeforge.access import TypeAttributes
from typeforge.factory import TypeFactory
from typeforge.registry import ModuleRegistry, reset_module_registry


@pytest.fixture(autouse=True)
def _fresh_global_registry():
    """Every test starts with an empty process-wide registry."""
    reset_module_registry()
    yield
    reset_module_registry()


@pytest.fixture
def registry() -> ModuleRegistry:
    return ModuleRegistry()


@pytest.fixture
def module(registry):
    return registry.get_or_create_module("tests.generated")


@pytest.fixture
def blueprint(module):
    """Blueprint of an empty public class."""
    return module.define_type("tests.generated.Sample", TypeAttributes.PUBLIC, object)


@pytest.fixture
def factory(registry) -> TypeFactory:
    return TypeFactory("tests.generated", registry=registry)
