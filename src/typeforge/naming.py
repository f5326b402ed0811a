"""Naming conventions for generated types and members."""

from __future__ import annotations

import uuid

from typeforge.errors import EmptyNameError


def backing_name(member_name: str) -> str:
    """Derive the backing field name for a member.

    Example:
        >>> backing_name("FirstName")
        '_firstName'
    """
    if not member_name:
        raise EmptyNameError("member_name")
    return f"_{member_name[0].lower()}{member_name[1:]}"


def implementation_name(interface_name: str) -> str:
    """Derive an implementation class name from an interface name.

    ``IPerson`` becomes ``Person``; names without the ``I`` prefix get an
    ``Implementation`` suffix.
    """
    if not interface_name:
        raise EmptyNameError("interface_name")
    if interface_name[0] == "I":
        return interface_name[1:]
    return f"{interface_name}Implementation"


def unique_type_name(namespace: str, requested_name: str, use_guid: bool) -> str:
    """Build the full name of a generated type.

    Args:
        namespace: Namespace hosting the type
        requested_name: Name requested by the caller
        use_guid: Append a random 32 hex digit suffix so that repeated
            requests for the same name yield distinct types

    Returns:
        ``"{namespace}.{requested_name}"``, optionally followed by ``_<hex>``
    """
    if not requested_name:
        raise EmptyNameError("name")
    name = f"{namespace}.{requested_name}"
    if use_guid:
        name = f"{name}_{uuid.uuid4().hex}"
    return name


__all__ = ["backing_name", "implementation_name", "unique_type_name"]
