"""Unit tests for component dispatch and value coercion."""

import logging
from datetime import date

import pytest

from collab_forms.runtime.field_dispatch import (
    FIELD_HANDLERS,
    coerce_value,
    display_value,
    is_empty_value,
    resolve_handler,
    selected_option,
)
from collab_forms.schemas.fields_set import ComponentType, FieldConfig


def _field(component_type, **kwargs):
    return FieldConfig(id="f", component_type=component_type, **kwargs)


class TestHandlerTable:
    """Tests for handler resolution."""

    def test_every_kind_has_a_handler(self):
        """The handler table is exhaustive over ComponentType."""
        assert set(FIELD_HANDLERS) == set(ComponentType)

    def test_unknown_tag_has_no_handler(self):
        """Unknown tags and groups resolve to None."""
        assert resolve_handler(_field("signature_pad")) is None
        assert resolve_handler(FieldConfig(id="g", field_type="group")) is None

    def test_table_without_config_has_no_handler(self):
        """A data table needs its table_config to render."""
        assert resolve_handler(_field("data_table")) is None

    def test_unrenderable_values_pass_through(self):
        """Coercion leaves values of unknown kinds untouched."""
        assert coerce_value(_field("signature_pad"), {"x": 1}) == {"x": 1}
        assert display_value(_field("signature_pad"), "x") is None


class TestTextAndCheckbox:
    """Tests for text and checkbox coercion."""

    @pytest.mark.parametrize("raw,expected", [(None, ""), ("abc", "abc"), (12, "12"), (True, "true")])
    def test_text(self, raw, expected):
        """Text inputs store strings."""
        assert coerce_value(_field("text_input"), raw) == expected
        assert coerce_value(_field("text_area"), raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        (True, True), ("true", True), ("TRUE", True), ("True", True),
        (False, False), ("false", False), ("yes", False), (1, False), (None, False),
    ])
    def test_checkbox(self, raw, expected):
        """Only True or a case-insensitive 'true' string is checked."""
        assert coerce_value(_field("checkbox"), raw) is expected


class TestChoice:
    """Tests for select and radio fields."""

    @pytest.fixture
    def select(self):
        return _field("select", input_options=[{"label": "One", "value": 1}, {"label": "Two", "value": "2"}])

    def test_membership_not_enforced(self, select):
        """Any value is stored as a string."""
        assert coerce_value(select, "9") == "9"
        assert coerce_value(select, 1) == "1"

    def test_unmatched_displays_unselected(self, select):
        """A value with no matching option displays as empty."""
        assert display_value(select, "9") == ""
        assert display_value(select, "1") == "1"

    def test_selected_option(self, select):
        """The matching option is returned, numeric values compared as strings."""
        assert selected_option(1, select).label == "One"
        assert selected_option(None, select) is None


class TestDate:
    """Tests for single dates and ranges."""

    def test_single_date(self):
        """Single dates normalize to ISO or empty string, never None."""
        field = _field("date")
        assert coerce_value(field, date(2026, 3, 4)) == "2026-03-04"
        assert coerce_value(field, "2026-03-04T09:00:00") == "2026-03-04"
        assert coerce_value(field, "garbage") == ""
        assert coerce_value(field, None) == ""

    def test_min_date_from_format_guide(self):
        """For single dates the format guide is the earliest selectable date."""
        field = _field("date", input_format={"format_guide": "2026-01-01"})
        assert field.min_date == "2026-01-01"
        assert field.is_date_range is False

    def test_range(self):
        """Range mode stores both ends independently."""
        field = _field("date", input_format={"format_guide": "range"})
        assert coerce_value(field, {"from": "2026-01-05", "to": "bad"}) == {"from": "2026-01-05", "to": ""}
        assert coerce_value(field, ["2026-01-05", "2026-02-01"]) == {"from": "2026-01-05", "to": "2026-02-01"}
        assert coerce_value(field, "2026-01-05") == {"from": "", "to": ""}

    def test_range_display(self):
        """Ranges display both ends, or an open end."""
        field = _field("date", input_format={"format_guide": "range"})
        assert display_value(field, {"from": "2026-01-05", "to": "2026-02-01"}) == "Jan 5, 2026 - Feb 1, 2026"
        assert display_value(field, {"from": "2026-01-05", "to": ""}) == "Jan 5, 2026 - ..."
        assert display_value(field, None) == ""


class TestTable:
    """Tests for data table values."""

    def test_non_list_becomes_empty(self, make_table_field):
        """Anything but a list is an empty table."""
        field = make_table_field([{"id": "a"}])
        assert coerce_value(field, "rows") == []
        assert coerce_value(field, None) == []

    def test_non_dict_rows_dropped(self, make_table_field, caplog):
        """Entries that are not row objects are dropped."""
        field = make_table_field([{"id": "a"}])
        with caplog.at_level(logging.DEBUG, logger="collab_forms.runtime.field_dispatch"):
            rows = coerce_value(field, [{"a": 1}, "junk", 3])
        assert rows == [{"a": 1}]
        assert "dropped 2" in caplog.text


class TestIsEmptyValue:
    """Tests for required-field emptiness."""

    def test_per_kind_emptiness(self, make_table_field):
        """Each kind has its own notion of empty."""
        assert is_empty_value(_field("text_input"), "") is True
        assert is_empty_value(_field("text_input"), "x") is False
        assert is_empty_value(_field("checkbox"), False) is True
        assert is_empty_value(_field("checkbox"), "true") is False
        assert is_empty_value(_field("select"), None) is True
        assert is_empty_value(make_table_field([{"id": "a"}]), []) is True

    def test_range_needs_both_ends(self):
        """A date range is filled only when both ends are set."""
        field = _field("date", input_format={"format_guide": "range"})
        assert is_empty_value(field, {"from": "2026-01-01", "to": ""}) is True
        assert is_empty_value(field, {"from": "2026-01-01", "to": "2026-01-02"}) is False
