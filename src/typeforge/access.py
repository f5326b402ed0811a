"""Accessibility mapping between access levels and type-system flags.

Generated members and types carry attribute flags modelled on a classic
managed type system: method visibility (private, family, assembly, public)
and type visibility (top-level or nested). This module translates the
abstract AccessLevel into those flags and infers the access level and
attributes of existing Python classes.
"""

from __future__ import annotations

import inspect
from enum import Enum, IntFlag
from typing import Any

from typeforge.errors import UnmappedAccessError


class AccessLevel(Enum):
    """Access level of a generated member or type."""

    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PUBLIC = "public"


class MethodAttributes(IntFlag):
    """Flags describing a generated method or accessor."""

    NONE = 0
    PRIVATE = 0x0001
    ASSEMBLY = 0x0003
    FAMILY = 0x0004
    PUBLIC = 0x0006
    MEMBER_ACCESS_MASK = 0x0007
    FINAL = 0x0020
    VIRTUAL = 0x0040
    HIDE_BY_SIG = 0x0080
    NEW_SLOT = 0x0100
    ABSTRACT = 0x0400
    SPECIAL_NAME = 0x0800


class TypeAttributes(IntFlag):
    """Flags describing a generated or existing type."""

    CLASS = 0
    NOT_PUBLIC = 0
    PUBLIC = 0x0001
    NESTED_PUBLIC = 0x0002
    NESTED_PRIVATE = 0x0003
    NESTED_FAMILY = 0x0004
    NESTED_ASSEMBLY = 0x0005
    VISIBILITY_MASK = 0x0007
    INTERFACE = 0x0020
    CLASS_SEMANTICS_MASK = 0x0020
    ABSTRACT = 0x0080
    SEALED = 0x0100


_METHOD_ACCESS: dict[AccessLevel, MethodAttributes] = {
    AccessLevel.PRIVATE: MethodAttributes.PRIVATE,
    AccessLevel.PROTECTED: MethodAttributes.FAMILY,
    AccessLevel.INTERNAL: MethodAttributes.ASSEMBLY,
    AccessLevel.PUBLIC: MethodAttributes.PUBLIC,
}

_TOP_LEVEL_ACCESS: dict[AccessLevel, TypeAttributes] = {
    AccessLevel.PRIVATE: TypeAttributes.NOT_PUBLIC,
    AccessLevel.PROTECTED: TypeAttributes.NOT_PUBLIC,
    AccessLevel.INTERNAL: TypeAttributes.NOT_PUBLIC,
    AccessLevel.PUBLIC: TypeAttributes.PUBLIC,
}

_NESTED_ACCESS: dict[AccessLevel, TypeAttributes] = {
    AccessLevel.PRIVATE: TypeAttributes.NESTED_PRIVATE,
    AccessLevel.PROTECTED: TypeAttributes.NESTED_FAMILY,
    AccessLevel.INTERNAL: TypeAttributes.NESTED_ASSEMBLY,
    AccessLevel.PUBLIC: TypeAttributes.NESTED_PUBLIC,
}


def _lookup(table: dict[AccessLevel, Any], level: Any, mapping: str) -> Any:
    if not isinstance(level, AccessLevel) or level not in table:
        raise UnmappedAccessError(level, mapping)
    return table[level]


def access(level: AccessLevel) -> MethodAttributes:
    """Map an access level to method visibility flags.

    Raises:
        UnmappedAccessError: If ``level`` is not an AccessLevel member
    """
    return _lookup(_METHOD_ACCESS, level, "method")


def type_access(level: AccessLevel, nested: bool = False) -> TypeAttributes:
    """Map an access level to type visibility flags.

    Top-level types are either public or not public; nested types get one
    flag per access level, PROTECTED mapping to NESTED_FAMILY.

    Raises:
        UnmappedAccessError: If ``level`` is not an AccessLevel member
    """
    if nested:
        return _lookup(_NESTED_ACCESS, level, "nested type")
    return _lookup(_TOP_LEVEL_ACCESS, level, "type")


def _qualname_parts(cls: type) -> list[str]:
    return cls.__qualname__.split(".")


def is_nested(cls: type) -> bool:
    """Check whether a class is declared inside another class."""
    parts = _qualname_parts(cls)
    return len(parts) > 1 and parts[-2] != "<locals>"


def is_interface(cls: Any) -> bool:
    """Check whether a class is an interface (a typing.Protocol class)."""
    return isinstance(cls, type) and bool(getattr(cls, "_is_protocol", False))


def is_public(cls: type) -> bool:
    """Check whether a class is reachable by public name from its module."""
    parts = _qualname_parts(cls)
    if "<locals>" in parts:
        return False
    if any(part.startswith("_") for part in parts):
        return False
    module = getattr(cls, "__module__", "") or ""
    return not any(part.startswith("_") for part in module.split(".") if part)


def infer_access(cls: type) -> AccessLevel:
    """Infer the access level of a finished type.

    Only PUBLIC or INTERNAL can be inferred; finer levels collapse to
    INTERNAL.
    """
    return AccessLevel.PUBLIC if is_public(cls) else AccessLevel.INTERNAL


def infer_attributes(cls: type) -> TypeAttributes:
    """Infer class semantics and visibility flags of an existing type."""
    semantics = TypeAttributes.INTERFACE if is_interface(cls) else TypeAttributes.CLASS
    return semantics | type_access(infer_access(cls), nested=is_nested(cls))


def attributes_of(cls: type) -> TypeAttributes:
    """Get the full attribute set of an existing type.

    Extends infer_attributes() with ABSTRACT for classes with unimplemented
    abstract methods and SEALED for classes decorated with typing.final.
    """
    attributes = infer_attributes(cls)
    if inspect.isabstract(cls):
        attributes |= TypeAttributes.ABSTRACT
    if getattr(cls, "__final__", False):
        attributes |= TypeAttributes.SEALED
    return attributes


__all__ = [
    "AccessLevel",
    "MethodAttributes",
    "TypeAttributes",
    "access",
    "attributes_of",
    "infer_access",
    "infer_attributes",
    "is_interface",
    "is_nested",
    "is_public",
    "type_access",
]
