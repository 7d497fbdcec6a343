"""Number parsing and formatting for cell values.

Cell values arrive as numbers or as the raw text typed into an input. Only
plain decimal notation counts as a number; NaN and infinities never do.
"""

import math
import re
from typing import Any, Optional, Union

Number = Union[int, float]

# Optional sign, digits with optional fraction (or a bare fraction), optional exponent
_RE_DECIMAL = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_finite_number(value: Any) -> Optional[Number]:
    """Parse a cell value as a finite number.

    Handles:
    - ints and floats (booleans are not numbers here)
    - decimal strings with surrounding whitespace: " 12.5 " -> 12.5
    - integer strings keep int type: "20" -> 20

    Args:
        value: Raw cell value

    Returns:
        The number, or None if the value is not a finite number
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        return value if math.isfinite(value) else None

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or not _RE_DECIMAL.match(text):
        return None

    if re.match(r"^[+-]?\d+$", text):
        try:
            return int(text)
        except ValueError:
            # Past the interpreter's int string limit; float() overflows to inf
            pass

    parsed = float(text)
    return parsed if math.isfinite(parsed) else None


def format_js_number(value: Number) -> str:
    """Render a number the way a JavaScript template literal would.

    Integral floats drop the fraction: 100.0 -> "100", 0.5 -> "0.5".
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def format_number(value: Number, decimals: Optional[int] = None) -> str:
    """Format a number for display.

    Args:
        value: Number to format
        decimals: Fixed number of decimals; when None, thousands are grouped
            and up to three decimals are kept (1234.5 -> "1,234.5")

    Returns:
        Display string
    """
    if decimals is not None:
        return f"{value:.{decimals}f}"

    if isinstance(value, int) or float(value).is_integer():
        return f"{int(value):,}"

    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return text
