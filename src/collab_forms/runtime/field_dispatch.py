"""
Field Dispatch - routes a field to the value-shape contract of its kind.

Each ComponentType has exactly one FieldHandler. Handlers normalize raw edit
payloads or externally supplied values into the canonical stored shape, and
render stored values for display. Malformed values coerce to the kind's safe
default instead of raising.

Value shapes:
- text_input, text_area -> str
- checkbox -> bool
- select, radio -> str (option value; membership not enforced)
- date -> "YYYY-MM-DD" or "", range mode -> {"from": str, "to": str}
- data_table -> list of row dicts
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from collab_forms.schemas.fields_set import ComponentType, FieldConfig, InputOption
from collab_forms.utils.coercion import js_string
from collab_forms.utils.date_parsing import format_date_display, to_iso_date

logger = logging.getLogger(__name__)


class FieldHandler(ABC):
    """Value-shape contract for one component kind."""

    @abstractmethod
    def coerce(self, raw: Any, field: FieldConfig) -> Any:
        """Normalize a raw or stored value into the canonical stored shape."""
        pass

    @abstractmethod
    def display(self, stored: Any, field: FieldConfig) -> Any:
        """Representation handed to the rendering collaborator."""
        pass

    def default(self, field: FieldConfig) -> Any:
        """Safe empty value for the kind."""
        return self.coerce(None, field)


class TextHandler(FieldHandler):
    """Text input and text area: string in, string out."""

    def coerce(self, raw: Any, field: FieldConfig) -> str:
        if raw is None:
            return ""
        return js_string(raw)

    def display(self, stored: Any, field: FieldConfig) -> str:
        return self.coerce(stored, field)


class CheckboxHandler(FieldHandler):
    """Checkbox: True, or any spelling of "true", is checked."""

    def coerce(self, raw: Any, field: FieldConfig) -> bool:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            return raw.lower() == "true"
        return False

    def display(self, stored: Any, field: FieldConfig) -> bool:
        return self.coerce(stored, field)


class ChoiceHandler(FieldHandler):
    """Select and radio: stores an option value without checking membership.

    Options may change after data was stored, so an unmatched value displays
    as unselected rather than failing.
    """

    def coerce(self, raw: Any, field: FieldConfig) -> str:
        if raw is None:
            return ""
        return js_string(raw)

    def display(self, stored: Any, field: FieldConfig) -> str:
        option = selected_option(stored, field)
        return option.value if option else ""


class DateHandler(FieldHandler):
    """Single dates and date ranges as ISO calendar-date strings."""

    def coerce(self, raw: Any, field: FieldConfig) -> Any:
        if field.is_date_range:
            return self._coerce_range(raw)
        return to_iso_date(raw)

    def display(self, stored: Any, field: FieldConfig) -> str:
        if not field.is_date_range:
            return format_date_display(stored)

        value = self._coerce_range(stored)
        start = format_date_display(value["from"])
        end = format_date_display(value["to"])
        if start and end:
            return f"{start} - {end}"
        if start:
            return f"{start} - ..."
        if end:
            return f"... - {end}"
        return ""

    @staticmethod
    def _coerce_range(raw: Any) -> Dict[str, str]:
        if isinstance(raw, dict):
            return {"from": to_iso_date(raw.get("from")), "to": to_iso_date(raw.get("to"))}
        if isinstance(raw, (list, tuple)) and len(raw) == 2:
            return {"from": to_iso_date(raw[0]), "to": to_iso_date(raw[1])}
        return {"from": "", "to": ""}


class TableHandler(FieldHandler):
    """Data table: a list of row dicts. Anything else becomes an empty table."""

    def coerce(self, raw: Any, field: FieldConfig) -> List[Dict[str, Any]]:
        if not isinstance(raw, list):
            if raw is not None:
                logger.debug(f"Field '{field.id}': non-list table value coerced to []")
            return []
        rows = [row for row in raw if isinstance(row, dict)]
        if len(rows) != len(raw):
            logger.debug(f"Field '{field.id}': dropped {len(raw) - len(rows)} non-object rows")
        return rows

    def display(self, stored: Any, field: FieldConfig) -> List[Dict[str, Any]]:
        return self.coerce(stored, field)


_TEXT = TextHandler()
_CHOICE = ChoiceHandler()

FIELD_HANDLERS: Dict[ComponentType, FieldHandler] = {
    ComponentType.TEXT_INPUT: _TEXT,
    ComponentType.TEXT_AREA: _TEXT,
    ComponentType.CHECKBOX: CheckboxHandler(),
    ComponentType.SELECT: _CHOICE,
    ComponentType.RADIO: _CHOICE,
    ComponentType.DATE: DateHandler(),
    ComponentType.DATA_TABLE: TableHandler(),
}


def resolve_handler(field: FieldConfig) -> Optional[FieldHandler]:
    """Handler for a field, or None when the field renders as absent."""
    kind = field.kind
    if kind is None:
        return None
    if kind == ComponentType.DATA_TABLE and field.table_config is None:
        return None
    return FIELD_HANDLERS[kind]


def coerce_value(field: FieldConfig, raw: Any) -> Any:
    """Coerce a raw value for a field; unrenderable fields pass through."""
    handler = resolve_handler(field)
    if handler is None:
        return raw
    return handler.coerce(raw, field)


def display_value(field: FieldConfig, stored: Any) -> Any:
    handler = resolve_handler(field)
    if handler is None:
        return None
    return handler.display(stored, field)


def selected_option(stored: Any, field: FieldConfig) -> Optional[InputOption]:
    """Option whose value matches the stored value, if any."""
    if stored is None:
        return None
    value = js_string(stored)
    for option in field.input_options:
        if option.value == value:
            return option
    return None


def is_empty_value(field: FieldConfig, stored: Any) -> bool:
    """Whether a stored value counts as "not filled in" for required checks."""
    handler = resolve_handler(field)
    if handler is None:
        return stored is None or stored == ""

    value = handler.coerce(stored, field)
    if field.kind == ComponentType.CHECKBOX:
        return value is False
    if field.kind == ComponentType.DATE and field.is_date_range:
        return not (value["from"] and value["to"])
    if field.kind == ComponentType.DATA_TABLE:
        return len(value) == 0
    return value == ""
