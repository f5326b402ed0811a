"""Categorized errors for type synthesis.

Every error raised by typeforge derives from TypeForgeError, which carries a
category, an optional recovery suggestion and structured context. Precondition
failures also derive from ValueError and unmapped enumeration values from
NotImplementedError, so callers can catch them with the builtin types.

Usage:
    from typeforge.errors import TypeForgeError

    try:
        factory.new_class("")
    except TypeForgeError as e:
        print(e.to_dict())
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling."""

    VALIDATION = auto()  # Invalid argument passed by the caller
    NOT_IMPLEMENTED = auto()  # Value outside a closed enumeration
    DEFINITION = auto()  # Illegal member or type definition
    TYPE_LOAD = auto()  # A blueprint could not be baked
    CONFIG = auto()  # Configuration problems


class TypeForgeError(Exception):
    """Base exception for typeforge with structured error handling."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.DEFINITION,
        suggestion: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.category = category
        self.suggestion = suggestion
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "category": self.category.name,
            "message": str(self),
            "suggestion": self.suggestion,
            "context": self.context,
        }


class ValidationError(TypeForgeError, ValueError):
    """Invalid input."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, category=ErrorCategory.VALIDATION, context=context)


class EmptyNameError(ValidationError):
    """A name argument was empty or None."""

    def __init__(self, argument: str = "name"):
        super().__init__(
            f"Argument '{argument}' must be a non-empty string",
            context={"argument": argument},
        )


class InvalidBaseTypeError(ValidationError):
    """A type cannot be used as the base of a generated class."""

    def __init__(self, base: Any, reason: str):
        super().__init__(
            f"Cannot derive from {base!r}: {reason}",
            context={"base": getattr(base, "__qualname__", repr(base))},
        )


class UnmappedAccessError(TypeForgeError, NotImplementedError):
    """An access level outside the AccessLevel enumeration reached a mapper."""

    def __init__(self, value: Any, mapping: str):
        super().__init__(
            f"No {mapping} mapping for access level {value!r}",
            category=ErrorCategory.NOT_IMPLEMENTED,
            context={"value": repr(value), "mapping": mapping},
        )


class DuplicateTypeError(TypeForgeError):
    """A type with the same full name already exists in the module."""

    def __init__(self, full_name: str, module: str):
        super().__init__(
            f"Type '{full_name}' is already defined in module '{module}'",
            suggestion="Enable use_guid on the factory or pick another name",
            context={"full_name": full_name, "module": module},
        )


class DuplicateMemberError(TypeForgeError):
    """A member with the same name already exists on the blueprint."""

    def __init__(self, type_name: str, member: str):
        super().__init__(
            f"Member '{member}' is already defined on '{type_name}'",
            context={"type": type_name, "member": member},
        )


class TypeBakedError(TypeForgeError):
    """A blueprint was modified after it was baked."""

    def __init__(self, type_name: str):
        super().__init__(
            f"Type '{type_name}' has already been baked",
            suggestion="Define every member before calling bake()",
            context={"type": type_name},
        )


class MissingMemberError(TypeForgeError):
    """A required member was not found on a type."""

    def __init__(self, owner: Any, member: str):
        owner_name = getattr(owner, "__qualname__", str(owner))
        super().__init__(
            f"'{owner_name}' has no member '{member}'",
            context={"owner": owner_name, "member": member},
        )


class SealedMemberError(TypeForgeError):
    """An inherited member cannot be overridden."""

    def __init__(self, owner: Any, member: str):
        owner_name = getattr(owner, "__qualname__", str(owner))
        super().__init__(
            f"'{owner_name}.{member}' is final and cannot be overridden",
            context={"owner": owner_name, "member": member},
        )


class InterfaceNotImplementedError(TypeForgeError):
    """A type does not implement a required interface or base class."""

    def __init__(self, type_: Any, interface: Any):
        type_name = getattr(type_, "__qualname__", str(type_))
        iface_name = getattr(interface, "__qualname__", str(interface))
        super().__init__(
            f"'{type_name}' does not implement '{iface_name}'",
            context={"type": type_name, "interface": iface_name},
        )


class IncompleteMemberError(TypeForgeError):
    """An accessor or method body was never implemented."""

    def __init__(self, type_name: str, member: str):
        super().__init__(
            f"Body of '{member}' on '{type_name}' has no implementation",
            category=ErrorCategory.TYPE_LOAD,
            suggestion="Call implement() on every getter, setter and method body",
            context={"type": type_name, "member": member},
        )


class TypeLoadError(TypeForgeError):
    """A blueprint produced an unusable type."""

    def __init__(self, type_name: str, detail: str):
        super().__init__(
            f"Cannot load type '{type_name}': {detail}",
            category=ErrorCategory.TYPE_LOAD,
            context={"type": type_name},
        )


class ConfigError(TypeForgeError):
    """Configuration file or setting issue."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            category=ErrorCategory.CONFIG,
            suggestion="Check typeforge.toml or pyproject.toml [tool.typeforge]",
            context={"file": file, **(context or {})},
        )


__all__ = [
    "ConfigError",
    "DuplicateMemberError",
    "DuplicateTypeError",
    "EmptyNameError",
    "ErrorCategory",
    "IncompleteMemberError",
    "InterfaceNotImplementedError",
    "InvalidBaseTypeError",
    "MissingMemberError",
    "SealedMemberError",
    "TypeBakedError",
    "TypeForgeError",
    "TypeLoadError",
    "UnmappedAccessError",
    "ValidationError",
]
