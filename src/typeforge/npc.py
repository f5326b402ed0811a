"""Property change notification base classes.

Generated view models derive from these classes. Two families exist:

- NotifyPropertyChangeBase: the abstract base exposing ``change()``, the
  helper generated setters call to store a value and notify, plus
  observer subscriptions and broadcast registration.
- NotifyPropertyChanged: the concrete base raising a ``property_changed``
  event to registered handlers.

Custom bases that do not derive from NotifyPropertyChangeBase can mark a
``(property_name)`` method with ``@notify_invocator``; generated setters then
store the value themselves and call that method.

Example:
    class Person(NotifyPropertyChanged):
        def __init__(self):
            super().__init__()
            self._name = None

        @property
        def name(self):
            return self._name

        @name.setter
        def name(self, value):
            self.change("_name", value, "name")
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TypeVar, runtime_checkable

from typeforge.errors import MissingMemberError, ValidationError

F = TypeVar("F", bound=Callable[..., Any])

CHANGE_INVOCATOR_MARK = "__typeforge_change_invocator__"
NOTIFY_INVOCATOR_MARK = "__typeforge_notify_invocator__"


def change_invocator(func: F) -> F:
    """Mark a ``(field, value, property_name)`` method as the change helper."""
    setattr(func, CHANGE_INVOCATOR_MARK, True)
    return func


def notify_invocator(func: F) -> F:
    """Mark a ``(property_name)`` method as the notification helper."""
    setattr(func, NOTIFY_INVOCATOR_MARK, True)
    return func


def find_invocator(cls: type, mark: str) -> str | None:
    """Find the name of the first method of ``cls`` carrying ``mark``.

    The class hierarchy is searched in method resolution order.
    """
    for klass in cls.__mro__:
        for name, value in vars(klass).items():
            if getattr(value, mark, False):
                return name
    return None


class PropertyChangeNotificationType(Enum):
    """Reason a change notification was raised."""

    VALUE_CHANGE = "value_change"
    NO_CHANGE = "no_change"


@dataclass(frozen=True)
class PropertyChangedEventArgs:
    """Arguments of a property changed event."""

    property_name: str
    notification_type: PropertyChangeNotificationType = PropertyChangeNotificationType.VALUE_CHANGE


PropertyChangedHandler = Callable[[Any, PropertyChangedEventArgs], None]
PropertyChangeObserver = Callable[[Any, str, PropertyChangeNotificationType], None]


@runtime_checkable
class SupportsPropertyChanged(Protocol):
    """Objects raising an event when one of their properties changes."""

    def add_property_changed(self, handler: PropertyChangedHandler) -> None: ...

    def remove_property_changed(self, handler: PropertyChangedHandler) -> None: ...


def _readable_properties(cls: type) -> list[str]:
    names: dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if not name.startswith("_") and isinstance(value, property) and value.fget:
                names[name] = None
    return list(names)


def _reaches(start: str, target: str, tree: dict[str, set[str]], checked: set[str]) -> bool:
    """Check whether ``target`` is reachable from ``start`` in the notify tree."""
    for child in tree.get(start, ()):
        if child in checked:
            continue
        checked.add(child)
        if child == target or _reaches(child, target, tree, checked):
            return True
    return False


# =============================================================================
# Base classes
# =============================================================================


class NotifyPropertyChangeBase(ABC):
    """Base class for objects notifying property changes.

    Subclasses decide how notifications are delivered by implementing
    ``raise_property_change_event``.
    """

    _observers: list[tuple[str | None, PropertyChangeObserver]]
    _notify_tree: dict[str, set[str]]

    def __init__(self) -> None:
        self._observers = []
        self._notify_tree = {}

    @abstractmethod
    def raise_property_change_event(
        self, property_name: str, notification_type: PropertyChangeNotificationType
    ) -> None:
        """Deliver a notification for one property."""

    # -------------------------------------------------------------------------
    # Changing values
    # -------------------------------------------------------------------------

    @change_invocator
    def change(self, field: str, value: Any, property_name: str) -> bool:
        """Store ``value`` in ``field`` and notify if it differs.

        Args:
            field: Attribute holding the property value
            value: New value
            property_name: Property to notify

        Returns:
            True if the value changed, False if it was equal to the old one
        """
        if not property_name or not property_name.strip():
            raise ValidationError("property_name must be a non-empty string")
        if getattr(self, field, None) == value:
            return False
        setattr(self, field, value)
        self._notify_change(property_name, PropertyChangeNotificationType.VALUE_CHANGE)
        return True

    def _notify_change(
        self, property_name: str, notification_type: PropertyChangeNotificationType
    ) -> None:
        for prop, observer in list(self._observers):
            if prop is None or prop == property_name:
                observer(self, property_name, notification_type)
        self.raise_property_change_event(property_name, notification_type)
        for affected in self._notify_tree.get(property_name, ()):
            self.raise_property_change_event(affected, notification_type)

    def notify(self, *property_names: str) -> None:
        """Raise a value change notification for each given property."""
        for name in property_names:
            self.raise_property_change_event(name, PropertyChangeNotificationType.VALUE_CHANGE)

    def refresh(self) -> None:
        """Notify every readable public property without a value change."""
        for name in _readable_properties(type(self)):
            self.raise_property_change_event(name, PropertyChangeNotificationType.NO_CHANGE)

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def _validate_property(self, property_name: str) -> None:
        if not isinstance(getattr(type(self), property_name, None), property):
            raise MissingMemberError(type(self), property_name)

    def subscribe(self, observer: PropertyChangeObserver, property_name: str | None = None) -> None:
        """Call ``observer`` when ``property_name`` (or any property) changes."""
        if property_name is not None:
            self._validate_property(property_name)
        self._observers.append((property_name, observer))

    def unsubscribe(self, observer: PropertyChangeObserver) -> bool:
        """Remove every subscription of ``observer``.

        Returns:
            True if at least one subscription was removed
        """
        before = len(self._observers)
        self._observers = [(p, o) for p, o in self._observers if o != observer]
        return len(self._observers) < before

    # -------------------------------------------------------------------------
    # Broadcasts
    # -------------------------------------------------------------------------

    def register_broadcast(self, property_name: str, *affected: str) -> None:
        """Also notify ``affected`` properties whenever ``property_name`` changes.

        Raises:
            ValidationError: If no affected property is given or the
                registration would create a notification cycle
            MissingMemberError: If a property does not exist on this type
        """
        if not affected:
            raise ValidationError("At least one affected property is required")
        for name in (property_name, *affected):
            self._validate_property(name)
        for name in affected:
            if name == property_name or _reaches(name, property_name, self._notify_tree, set()):
                raise ValidationError(
                    f"Broadcasting '{property_name}' to '{name}' creates a cycle",
                    {"property": property_name, "affected": name},
                )
        self._notify_tree.setdefault(property_name, set()).update(affected)

    def register_trigger(self, property_name: str, *listened: str) -> None:
        """Notify ``property_name`` whenever one of ``listened`` changes."""
        for name in listened:
            self.register_broadcast(name, property_name)

    def unregister_broadcast(self, property_name: str) -> None:
        self._notify_tree.pop(property_name, None)


class NotifyPropertyChanged(NotifyPropertyChangeBase):
    """Concrete notification base raising a ``property_changed`` event."""

    _property_changed_handlers: list[PropertyChangedHandler]

    def __init__(self) -> None:
        super().__init__()
        self._property_changed_handlers = []

    def add_property_changed(self, handler: PropertyChangedHandler) -> None:
        self._property_changed_handlers.append(handler)

    def remove_property_changed(self, handler: PropertyChangedHandler) -> None:
        if handler in self._property_changed_handlers:
            self._property_changed_handlers.remove(handler)

    def raise_property_change_event(
        self, property_name: str, notification_type: PropertyChangeNotificationType
    ) -> None:
        args = PropertyChangedEventArgs(property_name, notification_type)
        for handler in list(self._property_changed_handlers):
            handler(self, args)


class EntityViewModel(NotifyPropertyChanged):
    """View model wrapping an entity whose properties it exposes.

    Generated subclasses add one property per entity property, reading and
    writing through to ``entity``.
    """

    _entity: Any

    def __init__(self, entity: Any = None) -> None:
        super().__init__()
        self._entity = entity

    @property
    def entity(self) -> Any:
        return self._entity

    @entity.setter
    def entity(self, value: Any) -> None:
        self._entity = value
        self.refresh()

    def change_entity(self, name: str, value: Any) -> bool:
        """Write ``value`` to the entity attribute ``name`` and notify if it differs."""
        if self._entity is None:
            raise ValidationError(f"Cannot set '{name}' without an entity")
        if getattr(self._entity, name) == value:
            return False
        setattr(self._entity, name, value)
        self._notify_change(name, PropertyChangeNotificationType.VALUE_CHANGE)
        return True


__all__ = [
    "CHANGE_INVOCATOR_MARK",
    "NOTIFY_INVOCATOR_MARK",
    "EntityViewModel",
    "NotifyPropertyChangeBase",
    "NotifyPropertyChanged",
    "PropertyChangeNotificationType",
    "PropertyChangedEventArgs",
    "PropertyChangedHandler",
    "PropertyChangeObserver",
    "SupportsPropertyChanged",
    "change_invocator",
    "find_invocator",
    "notify_invocator",
]
