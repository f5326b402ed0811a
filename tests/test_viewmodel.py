"""Tests for notifying properties and view model generation."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from typeforge.access import TypeAttributes
from typeforge.errors import DuplicateMemberError, InterfaceNotImplementedError
from typeforge.npc import NotifyPropertyChanged, notify_invocator
from typeforge.reflection import public_properties
from typeforge.viewmodel import add_entity_property, add_npc_property


class Model:
    def __init__(self):
        self._name = ""
        self._id = 0

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def id(self) -> int:
        return self._id


@dataclass
class Customer:
    name: str = ""
    age: int = 0


class CustomNotifier:
    def __init__(self):
        self.notified: list[str] = []

    @notify_invocator
    def on_property_changed(self, name: str) -> None:
        self.notified.append(name)


class TestAddNpcProperty:
    def test_uses_change_invocator(self, module):
        bp = module.define_type("tests.generated.Vm", TypeAttributes.PUBLIC, NotifyPropertyChanged)
        info = add_npc_property(bp, "Count", int)

        assert info.field().name == "_count"
        obj = bp.new()
        received = []
        obj.add_property_changed(lambda sender, e: received.append(e.property_name))

        assert obj.Count == 0
        obj.Count = 3
        obj.Count = 3

        assert obj.Count == 3
        assert received == ["Count"]

    def test_uses_notify_invocator(self, module):
        bp = module.define_type("tests.generated.Custom", TypeAttributes.PUBLIC, CustomNotifier)
        add_npc_property(bp, "title", str)
        obj = bp.new()

        obj.title = "a"
        obj.title = "a"
        obj.title = "b"

        assert obj.title == "b"
        assert obj.notified == ["title", "title"]

    def test_base_without_invocator(self, blueprint):
        with pytest.raises(InterfaceNotImplementedError):
            add_npc_property(blueprint, "title", str)

    def test_rejects_backing_field_of_base_state(self, module):
        bp = module.define_type("tests.generated.Vm", TypeAttributes.PUBLIC, NotifyPropertyChanged)

        with pytest.raises(DuplicateMemberError) as exc_info:
            add_npc_property(bp, "observers", int)

        assert exc_info.value.context["member"] == "_observers"
        assert "observers" not in bp

    def test_rejects_shadowing_change_invocator(self, module):
        bp = module.define_type("tests.generated.Vm", TypeAttributes.PUBLIC, NotifyPropertyChanged)

        with pytest.raises(DuplicateMemberError):
            add_npc_property(bp, "change", str)

        obj = bp.new()
        obj.subscribe(lambda sender, name, kind: None)
        assert callable(obj.change)

    def test_rejects_shadowing_notify_invocator(self, module):
        bp = module.define_type("tests.generated.Custom", TypeAttributes.PUBLIC, CustomNotifier)

        with pytest.raises(DuplicateMemberError):
            add_npc_property(bp, "on_property_changed", str)

    def test_entity_property_requires_entity_view_model(self, blueprint):
        with pytest.raises(InterfaceNotImplementedError):
            add_entity_property(blueprint, "name", str)


class TestCreateNpcClass:
    def test_mirrors_read_write_properties(self, factory):
        cls = factory.create_npc_class(Model).bake()
        props = public_properties(cls)

        assert [(p.name, p.property_type) for p in props] == [("name", str)]
        assert issubclass(cls, NotifyPropertyChanged)
        assert cls.__name__.startswith("ModelNpc_")

    def test_generated_property_notifies(self, factory):
        obj = factory.create_npc_class(Model).new()
        received = []
        obj.add_property_changed(lambda sender, e: received.append(e.property_name))

        obj.name = "Ada"

        assert obj.name == "Ada"
        assert received == ["name"]

    def test_property_count_matches_model(self, factory):
        builder = factory.create_npc_class(Customer)

        assert [d.name for d in builder.descriptors] == ["name", "age"]
        assert len(public_properties(builder.bake())) == 2

    def test_left_unbaked(self, factory):
        builder = factory.create_npc_class(Model)

        assert not builder.blueprint.is_baked
        builder.add_constant_property("kind", str, "model")
        assert builder.new().kind == "model"

    def test_repeated_generation_does_not_collide(self, factory):
        first = factory.create_npc_class(Model).bake()
        second = factory.create_npc_class(Model).bake()

        assert first is not second
        assert first.__name__ != second.__name__


    def test_model_clashing_with_base_is_rejected(self, factory):
        @dataclass
        class Watched:
            observers: int = 0

        with pytest.raises(DuplicateMemberError):
            factory.create_npc_class(Watched)


class TestCreateEntityViewModelClass:
    def test_proxies_to_entity(self, factory):
        cls = factory.create_entity_view_model_class(Customer).bake()
        customer = Customer("Ada", 36)
        vm = cls(customer)
        received = []
        vm.add_property_changed(lambda sender, e: received.append(e.property_name))

        assert vm.name == "Ada"
        vm.age = 37

        assert customer.age == 37
        assert received == ["age"]
        assert cls.__name__.startswith("CustomerViewModel_")

    def test_without_entity_reads_none(self, factory):
        vm = factory.create_entity_view_model_class(Customer).new()
        assert vm.name is None
