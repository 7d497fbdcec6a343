"""String coercion matching the semantics form schemas were written against.

Dependency expressions and text cells compare against the JavaScript
``String(value)`` rendering of stored values, so ``True`` becomes ``"true"``
and a missing key becomes ``"undefined"``.
"""

from typing import Any

from collab_forms.utils.number_parsing import format_js_number


class _Missing:
    """Sentinel for a key absent from the form data store."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def js_string(value: Any) -> str:
    """Coerce a value to its JavaScript ``String()`` form.

    Examples:
        True -> "true", None -> "null", MISSING -> "undefined",
        3.0 -> "3", [1, "a"] -> "1,a", {"a": 1} -> "[object Object]"
    """
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_js_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else js_string(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)
