"""Unit tests for JavaScript-style string coercion."""

import pytest

from collab_forms.utils.coercion import MISSING, js_string


class TestJsString:
    """Tests for js_string."""

    @pytest.mark.parametrize("value,expected", [
        (True, "true"),
        (False, "false"),
        (None, "null"),
        (MISSING, "undefined"),
        (3, "3"),
        (3.0, "3"),
        (2.5, "2.5"),
        ("yes", "yes"),
        ([1, "a", None], "1,a,"),
        ({"a": 1}, "[object Object]"),
    ])
    def test_matches_string_conversion(self, value, expected):
        """Values render the way String() renders them."""
        assert js_string(value) == expected

    def test_missing_is_singleton_and_falsy(self):
        """MISSING is a single falsy sentinel."""
        assert MISSING is type(MISSING)()
        assert not MISSING
