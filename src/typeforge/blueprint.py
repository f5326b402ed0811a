"""In-progress type definitions.

A TypeBlueprint collects the members of a type that does not exist yet.
Members are appended with the ``define_*`` methods; ``bake()`` then builds
the real class with ``types.new_class``. Getters, setters and methods are
represented by AccessorBody objects whose implementation may be supplied
after the member was defined, but before the blueprint is baked.
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from typeforge.access import AccessLevel, MethodAttributes, TypeAttributes
from typeforge.errors import (
    DuplicateMemberError,
    EmptyNameError,
    IncompleteMemberError,
    TypeBakedError,
    TypeLoadError,
    ValidationError,
)

if TYPE_CHECKING:
    from typeforge.registry import DynamicModule

logger = logging.getLogger(__name__)


class AccessorBody:
    """Body of a generated getter, setter or method.

    The body is callable as soon as it exists; calling it before an
    implementation was supplied raises IncompleteMemberError. Bodies behave
    like functions when stored on a class, binding to the instance.
    """

    def __init__(
        self,
        owner: str,
        name: str,
        attributes: MethodAttributes = MethodAttributes.PUBLIC,
        implementation: Callable[..., Any] | None = None,
    ) -> None:
        self.owner = owner
        self.name = name
        self.attributes = attributes
        self.__name__ = name
        self.__qualname__ = f"{owner.rsplit('.', 1)[-1]}.{name}"
        self.__doc__ = None
        self._implementation = implementation
        self._sealed = False

    @property
    def implementation(self) -> Callable[..., Any] | None:
        return self._implementation

    @property
    def is_implemented(self) -> bool:
        return self._implementation is not None

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def implement(self, implementation: Callable[..., Any]) -> AccessorBody:
        """Supply the code executed by this body.

        Can be used as a decorator. The implementation receives the instance
        as its first argument.
        """
        if self._sealed:
            raise TypeBakedError(self.owner)
        if not callable(implementation):
            raise ValidationError(f"Implementation of '{self.name}' must be callable")
        self._implementation = implementation
        self.__doc__ = getattr(implementation, "__doc__", None)
        return self

    def seal(self) -> None:
        self._sealed = True

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        if self._implementation is None:
            raise IncompleteMemberError(self.owner, self.name)
        return self._implementation(*args, **kwargs)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __repr__(self) -> str:
        state = "implemented" if self.is_implemented else "empty"
        return f"<AccessorBody {self.__qualname__} ({state})>"


@dataclass(frozen=True)
class GeneratedField:
    """A storage field on a generated type."""

    name: str
    field_type: Any
    default: Any = None
    access: AccessLevel = AccessLevel.PRIVATE


class GeneratedProperty(property):
    """A property created on a generated type, aware of its declared type."""

    def __init__(
        self,
        fget: Callable[[Any], Any] | None = None,
        fset: Callable[[Any, Any], None] | None = None,
        *,
        name: str,
        property_type: Any,
        doc: str | None = None,
    ) -> None:
        super().__init__(fget, fset, None, doc)
        self.property_name = name
        self.property_type = property_type

    def __repr__(self) -> str:
        type_name = getattr(self.property_type, "__name__", repr(self.property_type))
        return f"<GeneratedProperty {self.property_name}: {type_name}>"


class TypeBlueprint:
    """A type under construction inside a DynamicModule."""

    def __init__(
        self,
        module: DynamicModule,
        name: str,
        full_name: str,
        attributes: TypeAttributes,
        base: type | None,
        interfaces: tuple[type, ...] = (),
    ) -> None:
        self._module = module
        self._name = name
        self._full_name = full_name
        self._attributes = attributes
        self._base = base
        self._interfaces = interfaces
        self._members: dict[str, Any] = {}
        self._bodies: list[AccessorBody] = []
        self._type: type | None = None

    @property
    def module(self) -> DynamicModule:
        return self._module

    @property
    def name(self) -> str:
        """Class name of the type, without namespace."""
        return self._name

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def attributes(self) -> TypeAttributes:
        return self._attributes

    @property
    def base(self) -> type | None:
        return self._base

    @property
    def interfaces(self) -> tuple[type, ...]:
        return self._interfaces

    @property
    def is_baked(self) -> bool:
        return self._type is not None

    @property
    def baked_type(self) -> type | None:
        """The class built by bake(), or None while still in progress."""
        return self._type

    @property
    def members(self) -> types.MappingProxyType[str, Any]:
        return types.MappingProxyType(self._members)

    def __contains__(self, name: str) -> bool:
        return name in self._members

    def __repr__(self) -> str:
        state = "baked" if self.is_baked else "in progress"
        return f"<TypeBlueprint {self._full_name} ({state})>"

    # -------------------------------------------------------------------------
    # Member definition
    # -------------------------------------------------------------------------

    def _check_definable(self, name: str) -> None:
        if self._type is not None:
            raise TypeBakedError(self._full_name)
        if not name:
            raise EmptyNameError("name")
        if not name.isidentifier():
            raise ValidationError(f"'{name}' is not a valid member name", {"name": name})
        if name in self._members:
            raise DuplicateMemberError(self._full_name, name)

    def ensure_definable(self, *names: str) -> None:
        """Check that every name can still be defined as a member.

        Helpers defining several members at once call this first so that a
        rejected request leaves the blueprint untouched.
        """
        for index, name in enumerate(names):
            self._check_definable(name)
            if name in names[:index]:
                raise DuplicateMemberError(self._full_name, name)

    def create_body(
        self,
        name: str,
        attributes: MethodAttributes = MethodAttributes.PUBLIC,
        implementation: Callable[..., Any] | None = None,
    ) -> AccessorBody:
        """Create a body that must be implemented before baking.

        The body is not added to the type's members; it is meant to back an
        accessor of a property or event.
        """
        if self._type is not None:
            raise TypeBakedError(self._full_name)
        body = AccessorBody(self._full_name, name, attributes, implementation)
        self._bodies.append(body)
        return body

    def define_field(
        self,
        name: str,
        field_type: Any = object,
        default: Any = None,
        access: AccessLevel = AccessLevel.PRIVATE,
    ) -> GeneratedField:
        self._check_definable(name)
        field = GeneratedField(name, field_type, default, access)
        self._members[name] = field
        return field

    def define_method(
        self,
        name: str,
        attributes: MethodAttributes = MethodAttributes.PUBLIC,
        implementation: Callable[..., Any] | None = None,
    ) -> AccessorBody:
        self._check_definable(name)
        body = self.create_body(name, attributes, implementation)
        self._members[name] = body
        return body

    def define_property(
        self,
        name: str,
        property_type: Any,
        getter: AccessorBody | None = None,
        setter: AccessorBody | None = None,
        doc: str | None = None,
    ) -> GeneratedProperty:
        self._check_definable(name)
        if getter is None and setter is None:
            raise ValidationError(f"Property '{name}' needs a getter or a setter")
        prop = GeneratedProperty(getter, setter, name=name, property_type=property_type, doc=doc)
        self._members[name] = prop
        return prop

    # -------------------------------------------------------------------------
    # Base type inspection
    # -------------------------------------------------------------------------

    def _ancestors(self) -> Iterator[type]:
        seen: set[type] = set()
        roots = ([self._base] if self._base is not None else []) + list(self._interfaces)
        for root in roots:
            for klass in root.__mro__:
                if klass not in seen:
                    seen.add(klass)
                    yield klass

    def get_base_member(self, name: str) -> Any | None:
        """Find a member inherited from the base type or the interfaces."""
        for klass in self._ancestors():
            if name in vars(klass):
                return vars(klass)[name]
        return None

    # -------------------------------------------------------------------------
    # Baking
    # -------------------------------------------------------------------------

    def _bases(self) -> tuple[type, ...]:
        bases: list[type] = []
        if self._base is not None and self._base is not object:
            bases.append(self._base)
        for iface in self._interfaces:
            if any(iface in b.__mro__ for b in bases):
                continue
            bases.append(iface)
        return tuple(bases) or (object,)

    def _namespace(self) -> dict[str, Any]:
        namespace: dict[str, Any] = {
            "__module__": self._module.name,
            "__qualname__": self._name,
        }
        annotations: dict[str, Any] = {}
        for name, member in self._members.items():
            if isinstance(member, GeneratedField):
                namespace[name] = member.default
                annotations[name] = member.field_type
            else:
                namespace[name] = member
        namespace["__annotations__"] = annotations
        return namespace

    def bake(self) -> type:
        """Build the class described by this blueprint.

        Baking an already baked blueprint returns the same class.

        Raises:
            IncompleteMemberError: If a getter, setter or method has no body
            TypeLoadError: If the base is sealed or abstract members remain
        """
        if self._type is not None:
            return self._type

        for body in self._bodies:
            if not body.is_implemented:
                raise IncompleteMemberError(self._full_name, body.name)

        if self._base is not None and getattr(self._base, "__final__", False):
            raise TypeLoadError(self._full_name, f"base '{self._base.__qualname__}' is sealed")

        namespace = self._namespace()
        cls = types.new_class(self._name, self._bases(), exec_body=lambda ns: ns.update(namespace))

        if inspect.isabstract(cls):
            missing = ", ".join(sorted(cls.__abstractmethods__))
            raise TypeLoadError(self._full_name, f"abstract members not implemented: {missing}")

        for body in self._bodies:
            body.seal()
        self._type = cls
        self._module.register_type(self._full_name, cls)
        logger.debug("Baked type %s (%d members)", self._full_name, len(self._members))
        return cls

    def new(self, *args: Any, **kwargs: Any) -> Any:
        """Bake the type if needed and create an instance of it."""
        return self.bake()(*args, **kwargs)


__all__ = [
    "AccessorBody",
    "GeneratedField",
    "GeneratedProperty",
    "TypeBlueprint",
]
