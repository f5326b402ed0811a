"""Typed wrapper around a TypeBlueprint.

TypeBuilder[T] pairs a blueprint with the type ``T`` the generated class is
known to satisfy, either because ``T`` is its base class or because ``T`` is
an interface it implements. ``bake()`` and ``new()`` are typed accordingly.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from typeforge import definitions, viewmodel
from typeforge.access import AccessLevel
from typeforge.blueprint import TypeBlueprint
from typeforge.errors import ValidationError
from typeforge.members import EventBuildInfo, MethodBuildInfo, PropertyBuildInfo

T = TypeVar("T")


class TypeBuilder(Generic[T]):
    """A blueprint whose result is known to be a ``T``.

    Every member definition returns its build record, which is also kept in
    ``descriptors`` in definition order.
    """

    def __init__(self, blueprint: TypeBlueprint, declared_base: type[T]) -> None:
        if blueprint is None:
            raise ValidationError("blueprint must not be None")
        self._blueprint = blueprint
        self._declared_base = declared_base
        self._descriptors: list[PropertyBuildInfo | MethodBuildInfo | EventBuildInfo] = []

    @property
    def blueprint(self) -> TypeBlueprint:
        return self._blueprint

    @property
    def declared_base(self) -> type[T]:
        """The type ``T`` this builder was created for."""
        return self._declared_base

    @property
    def actual_base(self) -> type:
        """The base class the generated type will derive from."""
        return self._blueprint.base or self._declared_base

    @property
    def is_base_type(self) -> bool:
        """False when ``T`` is an implemented interface rather than the base class."""
        return self._declared_base not in self._blueprint.interfaces

    @property
    def descriptors(self) -> list[PropertyBuildInfo | MethodBuildInfo | EventBuildInfo]:
        return list(self._descriptors)

    def _record(self, info: Any) -> Any:
        self._descriptors.append(info)
        return info

    def __repr__(self) -> str:
        base = getattr(self._declared_base, "__name__", repr(self._declared_base))
        return f"<TypeBuilder[{base}] {self._blueprint.full_name}>"

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    def add_property(
        self,
        name: str,
        property_type: Any,
        writable: bool = True,
        access_level: AccessLevel = AccessLevel.PUBLIC,
        virtual: bool = False,
    ) -> PropertyBuildInfo:
        return self._record(
            definitions.add_property(
                self._blueprint, name, property_type, writable, access_level, virtual
            )
        )

    def add_write_only_property(
        self,
        name: str,
        property_type: Any,
        access_level: AccessLevel = AccessLevel.PUBLIC,
    ) -> PropertyBuildInfo:
        return self._record(
            definitions.add_write_only_property(self._blueprint, name, property_type, access_level)
        )

    def add_auto_property(
        self,
        name: str,
        property_type: Any,
        access_level: AccessLevel = AccessLevel.PUBLIC,
    ) -> PropertyBuildInfo:
        return self._record(
            definitions.add_auto_property(self._blueprint, name, property_type, access_level)
        )

    def add_computed_property(
        self, name: str, property_type: Any, getter: Callable[[Any], Any]
    ) -> PropertyBuildInfo:
        return self._record(
            definitions.add_computed_property(self._blueprint, name, property_type, getter)
        )

    def add_constant_property(self, name: str, property_type: Any, value: Any) -> PropertyBuildInfo:
        return self._record(
            definitions.add_constant_property(self._blueprint, name, property_type, value)
        )

    def add_npc_property(self, name: str, property_type: Any) -> PropertyBuildInfo:
        """Define a property notifying its changes through the base type."""
        return self._record(viewmodel.add_npc_property(self._blueprint, name, property_type))

    def add_entity_property(self, name: str, property_type: Any) -> PropertyBuildInfo:
        return self._record(viewmodel.add_entity_property(self._blueprint, name, property_type))

    def add_method(
        self,
        name: str,
        implementation: Callable[..., Any] | None = None,
        access_level: AccessLevel = AccessLevel.PUBLIC,
        virtual: bool = False,
    ) -> MethodBuildInfo:
        return self._record(
            definitions.add_method(self._blueprint, name, implementation, access_level, virtual)
        )

    def add_override(
        self, name: str, implementation: Callable[..., Any] | None = None
    ) -> MethodBuildInfo:
        return self._record(definitions.add_override(self._blueprint, name, implementation))

    def add_event(self, name: str) -> EventBuildInfo:
        return self._record(definitions.add_event(self._blueprint, name))

    # -------------------------------------------------------------------------
    # Finalization
    # -------------------------------------------------------------------------

    def bake(self) -> type[T]:
        """Build the class. Baking again returns the same class."""
        return self._blueprint.bake()

    def new(self, *args: Any, **kwargs: Any) -> T:
        """Bake the type if needed and create an instance of it."""
        return self.bake()(*args, **kwargs)


__all__ = ["TypeBuilder"]
