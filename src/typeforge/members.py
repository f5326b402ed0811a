"""Records describing members created on a blueprint.

Each definition helper returns one of these records. They pair the finished
member with the blueprint it belongs to and, for properties, with the
backing field or the accessor bodies that still need an implementation.
The finished member is obtained explicitly with ``member()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from typeforge.blueprint import AccessorBody, GeneratedField, GeneratedProperty, TypeBlueprint
from typeforge.errors import ValidationError

M = TypeVar("M")


class MemberBuildInfo(Generic[M]):
    """A member together with the blueprint that defines it."""

    __slots__ = ("_blueprint", "_member")

    def __init__(self, blueprint: TypeBlueprint, member: M) -> None:
        if blueprint is None:
            raise ValidationError("blueprint must not be None")
        if member is None:
            raise ValidationError("member must not be None")
        self._blueprint = blueprint
        self._member = member

    @property
    def blueprint(self) -> TypeBlueprint:
        return self._blueprint

    def member(self) -> M:
        """Get the member that was built."""
        return self._member

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._member!r} on {self._blueprint.full_name}>"


class PropertyBuildInfo(MemberBuildInfo[GeneratedProperty]):
    """Build information of a property.

    A field-backed property exposes its storage through ``field()``. A
    property with custom accessors exposes the bodies through ``getter``
    and ``setter``; either may be None when the property lacks that
    accessor or when it is field-backed.
    """

    __slots__ = ("_field", "_getter", "_setter")

    def __init__(
        self,
        blueprint: TypeBlueprint,
        prop: GeneratedProperty,
        field: GeneratedField | None = None,
        getter: AccessorBody | None = None,
        setter: AccessorBody | None = None,
    ) -> None:
        super().__init__(blueprint, prop)
        self._field = field
        self._getter = getter
        self._setter = setter

    @property
    def name(self) -> str:
        return self._member.property_name

    @property
    def property_type(self) -> Any:
        return self._member.property_type

    @property
    def getter(self) -> AccessorBody | None:
        return self._getter

    @property
    def setter(self) -> AccessorBody | None:
        return self._setter

    def field(self) -> GeneratedField | None:
        """Get the backing field, or None for a property without one."""
        return self._field


class MethodBuildInfo(MemberBuildInfo[AccessorBody]):
    """Build information of a method."""

    __slots__ = ()

    @property
    def name(self) -> str:
        return self._member.name

    def implement(self, implementation: Any) -> MethodBuildInfo:
        self._member.implement(implementation)
        return self


class FieldBuildInfo(MemberBuildInfo[GeneratedField]):
    """Build information of a storage field."""

    __slots__ = ()

    @property
    def name(self) -> str:
        return self._member.name


@dataclass(frozen=True)
class EventBuildInfo:
    """Build information of an event.

    Attributes:
        name: Event name
        handler_field: Field holding the subscribed handlers
        add_method: Method subscribing a handler (``add_<name>``)
        remove_method: Method unsubscribing a handler (``remove_<name>``)
        raise_method: Method invoking every handler (``raise_<name>``)
    """

    name: str
    handler_field: GeneratedField
    add_method: AccessorBody
    remove_method: AccessorBody
    raise_method: AccessorBody


__all__ = [
    "EventBuildInfo",
    "FieldBuildInfo",
    "MemberBuildInfo",
    "MethodBuildInfo",
    "PropertyBuildInfo",
]
