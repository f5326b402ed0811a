"""Helpers defining common members on a blueprint.

These functions cover the usual member shapes: properties with custom
accessors, auto-properties backed by a field, computed and constant
properties, write-only properties, methods, overrides and events.
Each returns a build record from typeforge.members.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from typeforge.access import AccessLevel, MethodAttributes, access
from typeforge.blueprint import GeneratedField, TypeBlueprint
from typeforge.errors import MissingMemberError, SealedMemberError
from typeforge.members import EventBuildInfo, MethodBuildInfo, PropertyBuildInfo
from typeforge.naming import backing_name

# Types whose fields start at their zero value rather than None
_VALUE_TYPES: tuple[type, ...] = (bool, int, float, complex)


def default_value(value_type: Any) -> Any:
    """Initial value of a backing field of the given type."""
    return value_type() if value_type in _VALUE_TYPES else None


def overridable(blueprint: TypeBlueprint, name: str) -> bool | None:
    """Check whether an inherited member can be overridden.

    Returns:
        None if no base type defines ``name``, False if it is marked with
        ``typing.final``, True otherwise
    """
    member = blueprint.get_base_member(name)
    if member is None:
        return None
    if isinstance(member, property):
        target = member.fget
    else:
        target = getattr(member, "__func__", member)
    return not (getattr(member, "__final__", False) or getattr(target, "__final__", False))


def _accessor_attributes(
    blueprint: TypeBlueprint, name: str, level: AccessLevel, virtual: bool
) -> MethodAttributes:
    flags = access(level) | MethodAttributes.SPECIAL_NAME | MethodAttributes.HIDE_BY_SIG
    inherited = overridable(blueprint, name)
    if inherited if inherited is not None else virtual:
        flags |= MethodAttributes.VIRTUAL
    return flags


# =============================================================================
# Properties
# =============================================================================


def add_property(
    blueprint: TypeBlueprint,
    name: str,
    property_type: Any,
    writable: bool = True,
    access_level: AccessLevel = AccessLevel.PUBLIC,
    virtual: bool = False,
) -> PropertyBuildInfo:
    """Define a property whose accessors must be implemented by the caller.

    Args:
        blueprint: Type receiving the property
        name: Property name
        property_type: Declared type of the property
        writable: Whether to create a setter
        access_level: Access level of the accessors
        virtual: Mark accessors as overridable when no base defines them

    Returns:
        PropertyBuildInfo with empty ``getter`` and ``setter`` bodies
    """
    blueprint.ensure_definable(name)
    flags = _accessor_attributes(blueprint, name, access_level, virtual)
    getter = blueprint.create_body(f"get_{name}", flags)
    setter = blueprint.create_body(f"set_{name}", flags) if writable else None
    prop = blueprint.define_property(name, property_type, getter, setter)
    return PropertyBuildInfo(blueprint, prop, getter=getter, setter=setter)


def add_write_only_property(
    blueprint: TypeBlueprint,
    name: str,
    property_type: Any,
    access_level: AccessLevel = AccessLevel.PUBLIC,
    virtual: bool = False,
) -> PropertyBuildInfo:
    """Define a property that only has a setter."""
    blueprint.ensure_definable(name)
    flags = _accessor_attributes(blueprint, name, access_level, virtual)
    setter = blueprint.create_body(f"set_{name}", flags)
    prop = blueprint.define_property(name, property_type, None, setter)
    return PropertyBuildInfo(blueprint, prop, setter=setter)


def with_backing_field(info: PropertyBuildInfo) -> GeneratedField:
    """Give a property a private storage field and a getter reading it.

    The setter, if any, is left for the caller to implement.
    """
    info.blueprint.ensure_definable(backing_name(info.name))
    field = info.blueprint.define_field(
        backing_name(info.name), info.property_type, default_value(info.property_type)
    )
    field_name = field.name

    def getter(self: Any) -> Any:
        return getattr(self, field_name)

    if info.getter is not None:
        info.getter.implement(getter)
    return field


def add_auto_property(
    blueprint: TypeBlueprint,
    name: str,
    property_type: Any,
    access_level: AccessLevel = AccessLevel.PUBLIC,
    virtual: bool = False,
) -> PropertyBuildInfo:
    """Define a read/write property stored in a backing field."""
    blueprint.ensure_definable(name, backing_name(name))
    info = add_property(blueprint, name, property_type, True, access_level, virtual)
    field = with_backing_field(info)
    field_name = field.name

    def setter(self: Any, value: Any) -> None:
        setattr(self, field_name, value)

    info.setter.implement(setter)
    return PropertyBuildInfo(blueprint, info.member(), field)


def add_computed_property(
    blueprint: TypeBlueprint,
    name: str,
    property_type: Any,
    getter: Callable[[Any], Any],
) -> PropertyBuildInfo:
    """Define a read-only property whose value is computed by ``getter``."""
    info = add_property(blueprint, name, property_type, writable=False)
    info.getter.implement(getter)
    return info


def add_constant_property(
    blueprint: TypeBlueprint,
    name: str,
    property_type: Any,
    value: Any,
) -> PropertyBuildInfo:
    """Define a read-only property that always returns ``value``."""
    return add_computed_property(blueprint, name, property_type, lambda self: value)


# =============================================================================
# Methods
# =============================================================================


def add_method(
    blueprint: TypeBlueprint,
    name: str,
    implementation: Callable[..., Any] | None = None,
    access_level: AccessLevel = AccessLevel.PUBLIC,
    virtual: bool = False,
) -> MethodBuildInfo:
    """Define a new method, optionally with its implementation."""
    flags = access(access_level) | MethodAttributes.HIDE_BY_SIG
    if virtual:
        flags |= MethodAttributes.VIRTUAL | MethodAttributes.NEW_SLOT
    body = blueprint.define_method(name, flags, implementation)
    return MethodBuildInfo(blueprint, body)


def add_override(
    blueprint: TypeBlueprint,
    name: str,
    implementation: Callable[..., Any] | None = None,
) -> MethodBuildInfo:
    """Define a method replacing one inherited from the base type.

    Raises:
        MissingMemberError: If no base type defines a method ``name``
        SealedMemberError: If the inherited method is marked ``typing.final``
    """
    owner = blueprint.base or object
    inherited = blueprint.get_base_member(name)
    target = getattr(inherited, "__func__", inherited)
    if inherited is None or not inspect.isfunction(target):
        raise MissingMemberError(owner, name)
    if not overridable(blueprint, name):
        raise SealedMemberError(owner, name)
    flags = MethodAttributes.PUBLIC | MethodAttributes.VIRTUAL | MethodAttributes.HIDE_BY_SIG
    body = blueprint.define_method(name, flags, implementation)
    return MethodBuildInfo(blueprint, body)


# =============================================================================
# Events
# =============================================================================


def add_event(blueprint: TypeBlueprint, name: str) -> EventBuildInfo:
    """Define an event with subscribe, unsubscribe and raise methods.

    The generated type gets ``add_<name>(handler)``,
    ``remove_<name>(handler)`` and ``raise_<name>(sender, args)``. Handlers
    are kept per instance, in subscription order.
    """
    blueprint.ensure_definable(
        f"_{name}_handlers", f"add_{name}", f"remove_{name}", f"raise_{name}"
    )
    handler_field = blueprint.define_field(f"_{name}_handlers", list, None)
    field_name = handler_field.name

    def add(self: Any, handler: Callable[[Any, Any], None]) -> None:
        handlers = getattr(self, field_name)
        if handlers is None:
            handlers = []
            setattr(self, field_name, handlers)
        handlers.append(handler)

    def remove(self: Any, handler: Callable[[Any, Any], None]) -> None:
        handlers = getattr(self, field_name)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def raise_(self: Any, sender: Any, args: Any) -> None:
        for handler in list(getattr(self, field_name) or ()):
            handler(sender, args)

    flags = MethodAttributes.PUBLIC | MethodAttributes.SPECIAL_NAME | MethodAttributes.HIDE_BY_SIG
    return EventBuildInfo(
        name=name,
        handler_field=handler_field,
        add_method=blueprint.define_method(f"add_{name}", flags, add),
        remove_method=blueprint.define_method(f"remove_{name}", flags, remove),
        raise_method=blueprint.define_method(f"raise_{name}", MethodAttributes.PUBLIC, raise_),
    )


__all__ = [
    "add_auto_property",
    "add_computed_property",
    "add_constant_property",
    "add_event",
    "add_method",
    "add_override",
    "add_property",
    "add_write_only_property",
    "default_value",
    "overridable",
    "with_backing_field",
]
