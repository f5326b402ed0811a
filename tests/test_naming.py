"""Tests for naming conventions."""

import re

import pytest

from typeforge.errors import EmptyNameError
from typeforge.naming import backing_name, implementation_name, unique_type_name


class TestBackingName:
    @pytest.mark.parametrize(
        "name,expected",
        [("Name", "_name"), ("FirstName", "_firstName"), ("x", "_x"), ("URL", "_uRL")],
    )
    def test_backing_name(self, name, expected):
        assert backing_name(name) == expected

    @pytest.mark.parametrize("name", ["", None])
    def test_empty(self, name):
        with pytest.raises(EmptyNameError):
            backing_name(name)

    def test_empty_is_value_error(self):
        with pytest.raises(ValueError):
            backing_name("")


class TestImplementationName:
    def test_strips_interface_prefix(self):
        assert implementation_name("IPerson") == "Person"

    def test_appends_suffix(self):
        assert implementation_name("Person") == "PersonImplementation"

    def test_empty(self):
        with pytest.raises(EmptyNameError):
            implementation_name("")


class TestUniqueTypeName:
    def test_without_guid(self):
        assert unique_type_name("App.Generated", "Widget", False) == "App.Generated.Widget"

    def test_with_guid_is_unique(self):
        first = unique_type_name("App.Generated", "Widget", True)
        second = unique_type_name("App.Generated", "Widget", True)

        assert first != second
        assert first.startswith("App.Generated.Widget_")
        assert second.startswith("App.Generated.Widget_")

    def test_guid_suffix_format(self):
        name = unique_type_name("ns", "Widget", True)
        assert re.fullmatch(r"ns\.Widget_[0-9a-f]{32}", name)

    def test_empty_name(self):
        with pytest.raises(EmptyNameError):
            unique_type_name("ns", "", True)
