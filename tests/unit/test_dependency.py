"""Unit tests for the dependency resolver."""

import pytest

from collab_forms.runtime.dependency import (
    Dependency,
    check_dependency,
    is_visible,
    parse_dependency,
    visibility_map,
    visible_fields,
)
from collab_forms.runtime.schema_loader import parse_fields_set
from collab_forms.schemas.fields_set import FieldConfig


def _field(dependency=None, field_id="target"):
    return FieldConfig(id=field_id, component_type="text_input", dependency=dependency)


class TestParseDependency:
    """Tests for parse_dependency."""

    def test_splits_and_trims(self):
        """Both parts are trimmed."""
        assert parse_dependency(" country : AU ") == Dependency("country", "AU")

    @pytest.mark.parametrize("expression", ["country", "a:b:c", "url:http://x"])
    def test_requires_exactly_one_colon(self, expression):
        """Zero or several colons are malformed."""
        assert parse_dependency(expression) is None

    def test_empty_expected_value(self):
        """'A:' compares against the empty string."""
        assert parse_dependency("A:") == Dependency("A", "")


class TestCheckDependency:
    """Tests for check_dependency and is_visible."""

    def test_no_dependency_is_visible(self):
        """Fields without a dependency always render."""
        assert is_visible(_field(), {}) is True
        assert check_dependency("", {}) is True

    @pytest.mark.parametrize("stored,expected,visible", [
        ("x", "x", True),
        ("y", "x", False),
        (True, "true", True),
        (False, "false", True),
        (False, "true", False),
        (5, "5", True),
        (5.0, "5", True),
        (None, "null", True),
        ("", "", True),
    ])
    def test_string_equality(self, stored, expected, visible):
        """Visible iff the String() form of the stored value equals the expected text."""
        assert is_visible(_field(f"A:{expected}"), {"A": stored}) is visible

    def test_missing_key_is_undefined(self):
        """A key absent from the form data compares as 'undefined'."""
        assert is_visible(_field("A:undefined"), {}) is True
        assert is_visible(_field("A:x"), {}) is False

    def test_zero_false_and_string_zero_differ(self):
        """0, '0' and False are not interchangeable."""
        assert is_visible(_field("A:0"), {"A": 0}) is True
        assert is_visible(_field("A:0"), {"A": "0"}) is True
        assert is_visible(_field("A:0"), {"A": False}) is False
        assert is_visible(_field("A:false"), {"A": 0}) is False

    @pytest.mark.parametrize("expression", ["A", "A:x:y"])
    def test_malformed_fails_open(self, expression):
        """Malformed expressions leave the field visible whatever the data."""
        for data in ({}, {"A": "x"}, {"A": "nothing"}):
            assert is_visible(_field(expression), data) is True

    def test_reevaluated_each_call(self):
        """Visibility follows the data passed in, not an earlier result."""
        field = _field("A:x")
        data = {"A": "y"}
        assert is_visible(field, data) is False
        data["A"] = "x"
        assert is_visible(field, data) is True


class TestVisibleFields:
    """Tests for top-down visibility through groups."""

    @pytest.fixture
    def field_list(self):
        loaded = parse_fields_set({
            "field_list": [
                {"id": "toggle", "component_type": "checkbox"},
                {
                    "id": "details",
                    "field_type": "group",
                    "dependency": "toggle:true",
                    "sub_fields": [
                        {"id": "inner", "component_type": "text_input"},
                        {"id": "gated", "component_type": "text_input", "dependency": "inner:go"},
                    ],
                },
                {"id": "after", "component_type": "text_area"},
            ]
        })
        return loaded.fields_set.field_list

    def test_children_of_hidden_group_hidden(self, field_list):
        """A hidden group hides its whole subtree."""
        ids = [f.id for f in visible_fields(field_list, {"toggle": False, "inner": "go"})]
        assert ids == ["toggle", "after"]

    def test_visible_group_depth_first(self, field_list):
        """Visible groups come before their visible children."""
        ids = [f.id for f in visible_fields(field_list, {"toggle": True, "inner": "go"})]
        assert ids == ["toggle", "details", "inner", "gated", "after"]

    def test_visibility_map_ignores_ancestors(self, field_list):
        """Each node's own dependency is reported independently."""
        result = visibility_map(field_list, {"toggle": False, "inner": "go"})
        assert result["details"] is False
        assert result["gated"] is True
