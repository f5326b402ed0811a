"""Notifying properties and view model generation.

``add_npc_property`` defines a property whose setter raises a change
notification. The notification mechanism is looked up on the base type of
the blueprint:

1. a method marked ``@change_invocator`` (NotifyPropertyChangeBase.change)
   receives the backing field name, the value and the property name and
   takes care of storing and notifying;
2. otherwise a method marked ``@notify_invocator`` is called with the
   property name after the setter stored a different value.

The generators at the bottom of the module mirror the read/write properties
of a model class on a new type.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from typeforge.access import AccessLevel
from typeforge.blueprint import TypeBlueprint
from typeforge.definitions import add_property, with_backing_field
from typeforge.errors import DuplicateMemberError, InterfaceNotImplementedError
from typeforge.members import PropertyBuildInfo
from typeforge.naming import backing_name
from typeforge.npc import (
    CHANGE_INVOCATOR_MARK,
    NOTIFY_INVOCATOR_MARK,
    EntityViewModel,
    NotifyPropertyChanged,
    SupportsPropertyChanged,
    find_invocator,
)
from typeforge.reflection import public_properties, read_write_properties

if TYPE_CHECKING:
    from typeforge.builder import TypeBuilder
    from typeforge.factory import TypeFactory


def _inherits_attribute(cls: type, name: str) -> bool:
    """Check for a class member or declared instance attribute along the MRO."""
    return any(
        name in vars(klass) or name in inspect.get_annotations(klass) for klass in cls.__mro__
    )


def add_npc_property(
    blueprint: TypeBlueprint,
    name: str,
    property_type: Any,
    access_level: AccessLevel = AccessLevel.PUBLIC,
) -> PropertyBuildInfo:
    """Define a field-backed property that notifies when its value changes.

    Raises:
        InterfaceNotImplementedError: If the base type offers no change or
            notify invocator
        DuplicateMemberError: If the property or its backing field would
            replace a member of the base type
    """
    base = blueprint.base or object
    change_name = find_invocator(base, CHANGE_INVOCATOR_MARK)
    notify_name = None if change_name else find_invocator(base, NOTIFY_INVOCATOR_MARK)
    if change_name is None and notify_name is None:
        raise InterfaceNotImplementedError(base, SupportsPropertyChanged)

    for member in (name, backing_name(name)):
        if _inherits_attribute(base, member):
            raise DuplicateMemberError(blueprint.full_name, member)
    blueprint.ensure_definable(name, backing_name(name))

    info = add_property(blueprint, name, property_type, True, access_level)
    field = with_backing_field(info)
    field_name = field.name

    if change_name is not None:

        def setter(self: Any, value: Any) -> None:
            getattr(self, change_name)(field_name, value, name)

    else:

        def setter(self: Any, value: Any) -> None:
            if getattr(self, field_name) == value:
                return
            setattr(self, field_name, value)
            getattr(self, notify_name)(name)

    info.setter.implement(setter)
    return PropertyBuildInfo(blueprint, info.member(), field)


def add_entity_property(
    blueprint: TypeBlueprint,
    name: str,
    property_type: Any,
) -> PropertyBuildInfo:
    """Define a property reading and writing through to the wrapped entity.

    Raises:
        InterfaceNotImplementedError: If the base type is not an EntityViewModel
    """
    base = blueprint.base or object
    if EntityViewModel not in base.__mro__:
        raise InterfaceNotImplementedError(base, EntityViewModel)

    info = add_property(blueprint, name, property_type)

    def getter(self: EntityViewModel) -> Any:
        return getattr(self.entity, name) if self.entity is not None else None

    def setter(self: EntityViewModel, value: Any) -> None:
        self.change_entity(name, value)

    info.getter.implement(getter)
    info.setter.implement(setter)
    return info


# =============================================================================
# Generators
# =============================================================================


def create_npc_class(
    factory: TypeFactory,
    model: type,
    interfaces: list[type] | None = None,
) -> TypeBuilder[NotifyPropertyChanged]:
    """Create an unbaked type mirroring ``model`` with notifying properties.

    The type is named ``<Model>Npc`` and derives from NotifyPropertyChanged.
    One property is defined per readable and writable model property, in
    declaration order.
    """
    builder = factory.new_type_builder(f"{model.__name__}Npc", NotifyPropertyChanged, interfaces)
    for prop in read_write_properties(model):
        builder.add_npc_property(prop.name, prop.property_type)
    return builder


def create_entity_view_model_class(
    factory: TypeFactory,
    model: type,
    interfaces: list[type] | None = None,
) -> TypeBuilder[EntityViewModel]:
    """Create an unbaked view model type wrapping instances of ``model``.

    The type is named ``<Model>ViewModel``; each readable and writable model
    property is proxied to the wrapped entity and notifies on change.
    """
    builder = factory.new_type_builder(f"{model.__name__}ViewModel", EntityViewModel, interfaces)
    for prop in read_write_properties(model):
        builder.add_entity_property(prop.name, prop.property_type)
    return builder


def implement_model(builder: TypeBuilder[Any], interface: type) -> None:
    """Implement every property of ``interface`` as an auto-property."""
    for prop in public_properties(interface):
        builder.add_auto_property(prop.name, prop.property_type)


__all__ = [
    "add_entity_property",
    "add_npc_property",
    "create_entity_view_model_class",
    "create_npc_class",
    "implement_model",
]
