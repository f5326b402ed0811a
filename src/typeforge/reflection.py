"""Property introspection for model types.

This module extracts the public instance properties of a class in a stable
order, together with their declared types and whether they can be read and
written. Three kinds of declarations are recognized:

- ``property`` objects (readable with a getter, writable with a setter)
- annotated class attributes (read/write, read-only when ``Final`` or part
  of a frozen dataclass; ``ClassVar`` is skipped)
- properties created by typeforge on generated types
"""

from __future__ import annotations

import ast
import dataclasses
import inspect
import textwrap
import typing
from dataclasses import dataclass
from typing import Any, ClassVar, Final, get_type_hints

from typeforge.blueprint import GeneratedProperty


@dataclass(frozen=True)
class ModelProperty:
    """A public property of a model type.

    Attributes:
        name: Property name
        property_type: Declared type (``typing.Any`` when undeclared)
        readable: Whether the property can be read
        writable: Whether the property can be assigned
        declaring_type: Class that declares the property
    """

    name: str
    property_type: Any
    readable: bool
    writable: bool
    declaring_type: type

    @property
    def is_read_write(self) -> bool:
        return self.readable and self.writable


def _unwrap_qualifier(hint: Any) -> tuple[Any, Any]:
    """Split ``ClassVar[X]``/``Final[X]`` into (qualifier, X)."""
    origin = typing.get_origin(hint)
    if origin in (ClassVar, Final):
        args = typing.get_args(hint)
        return origin, (args[0] if args else Any)
    if hint is Final or hint is ClassVar:
        return hint, Any
    return None, hint


def _is_frozen_dataclass(cls: type) -> bool:
    params = getattr(cls, "__dataclass_params__", None)
    return dataclasses.is_dataclass(cls) and bool(getattr(params, "frozen", False))


def _property_info(klass: type, name: str, prop: property) -> ModelProperty:
    if isinstance(prop, GeneratedProperty):
        prop_type = prop.property_type
    elif prop.fget is not None:
        prop_type = get_type_hints(prop.fget).get("return", Any)
    else:
        hints = get_type_hints(prop.fset)
        prop_type = next((v for k, v in hints.items() if k != "return"), Any)
    return ModelProperty(
        name=name,
        property_type=prop_type,
        readable=prop.fget is not None,
        writable=prop.fset is not None,
        declaring_type=klass,
    )


def _merged_order(klass: type, annotations: dict[str, Any]) -> list[str]:
    """Class body order from ``vars()`` with bare annotations slotted in.

    Annotations without a value are missing from the class namespace; each
    is placed before the next annotated name that has one.
    """
    own = vars(klass)
    pending = list(annotations)
    order: list[str] = []
    for name in own:
        if name in annotations:
            while pending and pending[0] != name:
                order.append(pending.pop(0))
            if pending:
                pending.pop(0)
        if name not in order:
            order.append(name)
    order.extend(pending)
    return order


def _source_positions(klass: type) -> dict[str, int]:
    """Position of each name bound in the class body, read from its source."""
    try:
        source = textwrap.dedent(inspect.getsource(klass))
        tree = ast.parse(source)
    except (OSError, TypeError, SyntaxError):
        return {}
    node = tree.body[0] if tree.body else None
    if not isinstance(node, ast.ClassDef) or node.name != klass.__name__:
        return {}

    positions: dict[str, int] = {}
    for index, stmt in enumerate(node.body):
        if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
            names = [stmt.target.id]
        elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            names = [stmt.name]
        elif isinstance(stmt, ast.Assign):
            names = [t.id for t in stmt.targets if isinstance(t, ast.Name)]
        else:
            continue
        for name in names:
            positions.setdefault(name, index)
    return positions


def _declaration_order(klass: type, names: list[str], annotations: dict[str, Any]) -> list[str]:
    """Sort ``names`` by their first appearance in the body of ``klass``."""
    merged = [name for name in _merged_order(klass, annotations) if name in names]
    positions = _source_positions(klass)
    if all(name in positions for name in merged):
        merged.sort(key=positions.__getitem__)
    return merged


def _declared_properties(klass: type) -> dict[str, ModelProperty]:
    """Properties declared directly on ``klass``, in declaration order."""
    found: dict[str, ModelProperty] = {}
    own = vars(klass)

    raw_annotations = inspect.get_annotations(klass)
    if raw_annotations:
        hints = get_type_hints(klass, include_extras=False)
        frozen = _is_frozen_dataclass(klass)
        for name in raw_annotations:
            if name.startswith("_") or isinstance(own.get(name), property):
                continue
            qualifier, prop_type = _unwrap_qualifier(hints.get(name, Any))
            if qualifier is ClassVar:
                continue
            found[name] = ModelProperty(
                name=name,
                property_type=prop_type,
                readable=True,
                writable=not frozen and qualifier is not Final,
                declaring_type=klass,
            )

    for name, value in own.items():
        if name.startswith("_") or not isinstance(value, property):
            continue
        found[name] = _property_info(klass, name, value)

    if len(found) < 2:
        return found
    order = _declaration_order(klass, list(found), raw_annotations)
    return {name: found[name] for name in order}


def public_properties(cls: type, declared_only: bool = False) -> list[ModelProperty]:
    """Get the public instance properties of a class.

    Base class properties come first; a property redeclared in a subclass
    keeps the position of its first declaration and takes the subclass
    definition.

    Args:
        cls: Class to inspect
        declared_only: Only return properties declared on ``cls`` itself

    Raises:
        NameError: If an annotation refers to an undefined name
    """
    if declared_only:
        return list(_declared_properties(cls).values())

    merged: dict[str, ModelProperty] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        merged.update(_declared_properties(klass))
    return list(merged.values())


def read_write_properties(cls: type) -> list[ModelProperty]:
    """Get the public properties of a class that are readable and writable."""
    return [p for p in public_properties(cls) if p.is_read_write]


__all__ = [
    "ModelProperty",
    "public_properties",
    "read_write_properties",
]
