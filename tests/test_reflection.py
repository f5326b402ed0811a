"""Tests for model property reflection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Final

import pytest

from typeforge.reflection import ModelProperty, public_properties, read_write_properties


class Person:
    def __init__(self):
        self._name = ""
        self._id = 0

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def id(self) -> int:
        return self._id


class Employee(Person):
    @property
    def salary(self) -> float:
        return 0.0

    @salary.setter
    def salary(self, value: float) -> None:
        pass


class Settings:
    theme: str = "dark"
    retries: int = 3
    kind: ClassVar[str] = "settings"
    version: Final[int] = 1
    _private: int = 0


@dataclass(frozen=True)
class FrozenPoint:
    x: int
    y: int


@dataclass
class MutablePoint:
    x: int
    y: int


class Contact:
    @property
    def name(self) -> str:
        return ""

    @name.setter
    def name(self, value: str) -> None:
        pass

    age: int = 0
    email: str

    @property
    def phone(self) -> str:
        return ""

    @phone.setter
    def phone(self, value: str) -> None:
        pass


class Broken:
    value: UndefinedName  # noqa: F821


class TestPublicProperties:
    def test_properties(self):
        props = public_properties(Person)

        assert props == [
            ModelProperty("name", str, True, True, Person),
            ModelProperty("id", int, True, False, Person),
        ]

    def test_inherited_first(self):
        names = [p.name for p in public_properties(Employee)]
        assert names == ["name", "id", "salary"]

    def test_declared_only(self):
        names = [p.name for p in public_properties(Employee, declared_only=True)]
        assert names == ["salary"]

    def test_annotations(self):
        props = {p.name: p for p in public_properties(Settings)}

        assert list(props) == ["theme", "retries", "version"]
        assert props["theme"].property_type is str
        assert props["theme"].writable
        assert props["version"].property_type is int
        assert not props["version"].writable

    def test_frozen_dataclass(self):
        assert all(not p.writable for p in public_properties(FrozenPoint))
        assert [p.name for p in public_properties(FrozenPoint)] == ["x", "y"]

    def test_mutable_dataclass(self):
        assert [p.name for p in read_write_properties(MutablePoint)] == ["x", "y"]

    def test_mixed_declarations_keep_body_order(self):
        names = [p.name for p in read_write_properties(Contact)]
        assert names == ["name", "age", "email", "phone"]

    def test_order_without_source(self):
        cls = type(
            "Dynamic",
            (),
            {
                "__annotations__": {"first": int, "second": str},
                "first": 0,
                "middle": property(lambda self: 0, lambda self, value: None),
                "second": "",
            },
        )

        assert [p.name for p in public_properties(cls)] == ["first", "middle", "second"]

    def test_unresolved_annotation_propagates(self):
        with pytest.raises(NameError):
            public_properties(Broken)


class TestReadWriteProperties:
    def test_filters_read_only(self):
        props = read_write_properties(Person)

        assert [(p.name, p.property_type) for p in props] == [("name", str)]

    def test_empty(self):
        class Empty:
            pass

        assert read_write_properties(Empty) == []
