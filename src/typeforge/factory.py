"""Type factory: the entry point for synthesizing classes.

A TypeFactory creates new types inside the dynamic module of its namespace.
Each type starts as a blueprint (or a typed builder wrapping one) to which
members are added before it is baked into a real class.

Usage:
    factory = TypeFactory("app.generated")

    builder = factory.new_class_builder("Point", object)
    builder.add_auto_property("x", int)
    builder.add_auto_property("y", int)
    point = builder.new()

    PersonNpc = factory.create_npc_class(Person).bake()
    vm = PersonNpc()
    vm.add_property_changed(lambda sender, e: print(e.property_name))
    vm.name = "Ada"  # prints "name"
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Any, TypeVar

from typeforge import viewmodel
from typeforge.access import TypeAttributes, attributes_of, is_interface
from typeforge.blueprint import TypeBlueprint
from typeforge.builder import TypeBuilder
from typeforge.config import DEFAULT_NAMESPACE, FactoryConfig
from typeforge.errors import (
    EmptyNameError,
    InvalidBaseTypeError,
    TypeForgeError,
    ValidationError,
)
from typeforge.logging import get_logger
from typeforge.naming import implementation_name, unique_type_name
from typeforge.npc import EntityViewModel, NotifyPropertyChanged
from typeforge.registry import DynamicAssembly, DynamicModule, ModuleRegistry, get_module_registry

T = TypeVar("T")

_VISIBILITY_AND_ABSTRACT = int(TypeAttributes.VISIBILITY_MASK) | int(TypeAttributes.ABSTRACT)


def _type_attributes(base_type: type) -> TypeAttributes:
    """Attributes of a new public concrete type derived from ``base_type``."""
    inherited = int(attributes_of(base_type)) & ~_VISIBILITY_AND_ABSTRACT
    return TypeAttributes(inherited | int(TypeAttributes.PUBLIC))


def _check_model(model: Any) -> None:
    if not isinstance(model, type):
        raise ValidationError(f"{model!r} is not a class", {"model": repr(model)})


class TypeFactory:
    """Creates types in the dynamic module of one namespace.

    Factories sharing a namespace (and registry) share the module, so type
    names are unique across them. With ``use_guid`` enabled every type name
    gets a random suffix and repeated requests never collide.
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        use_guid: bool = True,
        *,
        registry: ModuleRegistry | None = None,
    ):
        if not namespace:
            raise EmptyNameError("namespace")
        self._namespace = namespace
        self._use_guid = use_guid
        self._registry = registry if registry is not None else get_module_registry()
        self._module = self._registry.get_or_create_module(namespace)
        self._models: dict[type, type] = {}
        self._models_lock = threading.Lock()
        self._log = get_logger("factory").with_namespace(namespace)

    @classmethod
    def from_config(
        cls, config: FactoryConfig, *, registry: ModuleRegistry | None = None
    ) -> TypeFactory:
        """Create a factory from loaded settings."""
        return cls(config.namespace, config.use_guid, registry=registry)

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def use_guid(self) -> bool:
        return self._use_guid

    @property
    def module(self) -> DynamicModule:
        return self._module

    @property
    def assembly(self) -> DynamicAssembly:
        """The dynamic assembly owning every type created by this factory."""
        return self._module.assembly

    def __repr__(self) -> str:
        return f"<TypeFactory {self._namespace} use_guid={self._use_guid}>"

    # -------------------------------------------------------------------------
    # Types
    # -------------------------------------------------------------------------

    def new_type(
        self,
        name: str,
        base_type: type = object,
        interfaces: Iterable[type] | None = None,
    ) -> TypeBlueprint:
        """Start a new public type deriving from ``base_type``.

        Args:
            name: Requested type name
            base_type: Base class (interfaces go in ``interfaces``)
            interfaces: Interfaces the type implements

        Raises:
            EmptyNameError: If ``name`` is empty
            InvalidBaseTypeError: If ``base_type`` is not a class or is an interface
            DuplicateTypeError: If the name is taken and ``use_guid`` is off
        """
        if not name:
            raise EmptyNameError("name")
        if not isinstance(base_type, type):
            raise InvalidBaseTypeError(base_type, "not a class")
        if is_interface(base_type):
            raise InvalidBaseTypeError(base_type, "interfaces can only be implemented")

        implemented = tuple(interfaces or ())
        for iface in implemented:
            if not isinstance(iface, type):
                raise ValidationError(
                    f"Interface {iface!r} is not a class", {"interface": repr(iface)}
                )

        full_name = unique_type_name(self._namespace, name, self._use_guid)
        log = self._log.with_operation("new_type")
        try:
            blueprint = self._module.define_type(
                full_name, _type_attributes(base_type), base_type, implemented
            )
        except TypeForgeError as e:
            log.error(f"Cannot define type {full_name}", **e.to_dict())
            raise

        log.debug(f"Defined type {full_name}", base=base_type.__qualname__)
        return blueprint

    def new_type_builder(
        self,
        name: str,
        base_type: type[T],
        interfaces: Iterable[type] | None = None,
    ) -> TypeBuilder[T]:
        """Start a new type deriving from ``base_type``, wrapped in a typed builder."""
        return TypeBuilder(self.new_type(name, base_type, interfaces), base_type)

    def new_class(self, name: str, interfaces: Iterable[type] | None = None) -> TypeBlueprint:
        """Start a new class deriving directly from ``object``."""
        return self.new_type(name, object, interfaces)

    def new_class_builder(self, name: str, base_type: type[T]) -> TypeBuilder[T]:
        """Start a new class known to be a ``T``.

        An interface ``T`` becomes the single implemented interface of a class
        deriving from ``object``; any other class is used as the base.
        """
        if is_interface(base_type):
            return TypeBuilder(self.new_type(name, object, [base_type]), base_type)
        return self.new_type_builder(name, base_type)

    # -------------------------------------------------------------------------
    # View models
    # -------------------------------------------------------------------------

    def create_npc_class(
        self, model: type, interfaces: Iterable[type] | None = None
    ) -> TypeBuilder[NotifyPropertyChanged]:
        """Create an unbaked ``<Model>Npc`` type with notifying properties.

        Errors raised while reflecting ``model`` propagate unchanged.

        Raises:
            ValidationError: If ``model`` is not a class
        """
        _check_model(model)
        log = self._log.with_operation("create_npc_class")
        with log.timed("create_npc_class", model=model.__name__):
            builder = viewmodel.create_npc_class(self, model, list(interfaces or ()))
        log.debug(
            f"Generated {len(builder.descriptors)} notifying properties",
            type=builder.blueprint.full_name,
        )
        return builder

    def create_entity_view_model_class(
        self, model: type, interfaces: Iterable[type] | None = None
    ) -> TypeBuilder[EntityViewModel]:
        """Create an unbaked ``<Model>ViewModel`` type wrapping ``model`` instances."""
        _check_model(model)
        log = self._log.with_operation("create_entity_view_model_class")
        with log.timed("create_entity_view_model_class", model=model.__name__):
            return viewmodel.create_entity_view_model_class(self, model, list(interfaces or ()))

    def build_model(self, interface: type[T]) -> type[T]:
        """Get a concrete class implementing the properties of ``interface``.

        The class is built on first request and reused afterwards.

        Raises:
            ValidationError: If ``interface`` is not an interface
        """
        if not is_interface(interface):
            raise ValidationError(
                f"{interface!r} is not an interface", {"interface": repr(interface)}
            )
        with self._models_lock:
            cached = self._models.get(interface)
            if cached is not None:
                return cached
            builder = self.new_class_builder(implementation_name(interface.__name__), interface)
            viewmodel.implement_model(builder, interface)
            cls = builder.bake()
            self._models[interface] = cls
        self._log.with_operation("build_model").debug(
            f"Built model {cls.__qualname__}", interface=interface.__qualname__
        )
        return cls


__all__ = [
    "DEFAULT_NAMESPACE",
    "TypeFactory",
]
