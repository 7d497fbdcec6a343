"""Validation of cell and field values against declarative constraints.

Validation never raises and never blocks a write: it returns an error
message (or None) that is stored next to the value for display.

Cell rules are applied in order, stopping at the first failure:
1. Required and empty -> "Required"
2. Empty and not required -> no error
3. Numeric columns: finite number, then min/max bounds
4. Text columns: maximum length, then full-string regex match
5. Other column types: no declarative checks
"""

import logging
import re
from functools import lru_cache
from typing import Any, Optional, Pattern

from collab_forms.runtime.field_dispatch import coerce_value, is_empty_value
from collab_forms.schemas.data_table import ColumnFieldType, DataTableColumn
from collab_forms.schemas.fields_set import ComponentType, FieldConfig, InputType
from collab_forms.utils.coercion import js_string
from collab_forms.utils.number_parsing import format_js_number, parse_finite_number

logger = logging.getLogger(__name__)

REQUIRED = "Required"
INVALID_NUMBER = "Invalid number"
INVALID_FORMAT = "Invalid format"
INVALID_EMAIL = "Invalid email address"
ONLY_LETTERS = "Only letters allowed"

_RE_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_RE_ALPHA = re.compile(r"^[^\W\d_]+(?:[\s'-][^\W\d_]+)*$")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> Optional[Pattern[str]]:
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.warning(f"Ignoring invalid regex constraint '{pattern}': {e}")
        return None


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _check_bounds(number: float, minimum: Optional[float], maximum: Optional[float]) -> Optional[str]:
    if minimum is not None and number < minimum:
        return f"Minimum: {format_js_number(minimum)}"
    if maximum is not None and number > maximum:
        return f"Maximum: {format_js_number(maximum)}"
    return None


def _check_regex(text: str, pattern: Optional[str]) -> Optional[str]:
    if not pattern:
        return None
    compiled = _compile(pattern)
    if compiled is None:
        return None
    if compiled.fullmatch(text) is None:
        return INVALID_FORMAT
    return None


def validate_cell(value: Any, column: DataTableColumn) -> Optional[str]:
    """
    Validate one cell value against its column constraints.

    Args:
        value: Raw cell value (as typed or as stored)
        column: Column definition carrying the constraints

    Returns:
        Error message, or None if the value is acceptable
    """
    constraints = column.constraints
    if constraints is None:
        return None

    if constraints.required and _is_empty(value):
        return REQUIRED

    if _is_empty(value):
        return None

    if column.field_type == ColumnFieldType.NUMERIC:
        number = parse_finite_number(value)
        if number is None:
            return INVALID_NUMBER
        return _check_bounds(number, constraints.min, constraints.max)

    if column.field_type == ColumnFieldType.TEXT:
        text = js_string(value)
        if constraints.length is not None and len(text) > constraints.length:
            return f"Maximum {constraints.length} characters"
        return _check_regex(text, constraints.regex)

    # Dropdown, checkbox, radiobutton and files are constrained by their input
    return None


def _count_decimals(text: str) -> int:
    mantissa = text.strip().lower().split("e")[0]
    if "." not in mantissa:
        return 0
    return len(mantissa.split(".", 1)[1])


def validate_text_input(value: Any, field: FieldConfig) -> Optional[str]:
    """Input-format checks for a non-empty text input value."""
    text = js_string(value)
    input_format = field.input_format

    if field.input_type == InputType.NUMERIC:
        number = parse_finite_number(text)
        if number is None:
            return INVALID_NUMBER
        if input_format is not None:
            error = _check_bounds(number, input_format.num_min, input_format.num_max)
            if error:
                return error
            decimals = input_format.num_decimals
            if decimals is not None and _count_decimals(text) > decimals:
                return f"Maximum {decimals} decimal places"
    elif field.input_type == InputType.EMAIL:
        if not _RE_EMAIL.match(text):
            return INVALID_EMAIL
    elif field.input_type == InputType.ALPHA:
        if not _RE_ALPHA.match(text):
            return ONLY_LETTERS

    if input_format is None:
        return None

    if input_format.text_min_len is not None and len(text) < input_format.text_min_len:
        return f"Minimum {input_format.text_min_len} characters"
    if input_format.text_max_len is not None and len(text) > input_format.text_max_len:
        return f"Maximum {input_format.text_max_len} characters"
    return _check_regex(text, input_format.regex)


def validate_field_value(field: FieldConfig, value: Any, required: Optional[bool] = None) -> Optional[str]:
    """
    Validate a top-level field value.

    Args:
        field: Field definition
        value: Stored value
        required: Effective required flag; defaults to field.required. Callers
            pass False for fields whose dependency is unsatisfied.

    Returns:
        Error message, or None
    """
    is_required = field.required if required is None else required
    if field.kind is None or field.kind == ComponentType.DATA_TABLE:
        # Tables are validated per cell
        return None

    if is_empty_value(field, value):
        return REQUIRED if is_required else None

    if field.kind == ComponentType.TEXT_INPUT:
        return validate_text_input(coerce_value(field, value), field)

    return None
