"""
Form Set - the imperative surface a hosting UI drives.

Owns one FormDataStore and one TableRowEngine per configured table field,
and computes the logical render state: which fields are visible, their
coerced and display values, errors, notes, chat flags and table aggregates.
Rendering that state is left to the caller.
"""

import copy
import logging
from dataclasses import asdict, dataclass, field as dataclass_field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from collab_forms.runtime.aggregation import format_aggregation
from collab_forms.runtime.dependency import is_visible, visible_fields
from collab_forms.runtime.field_dispatch import (
    coerce_value,
    display_value,
    is_empty_value,
    resolve_handler,
)
from collab_forms.runtime.form_store import FieldChangeListener, FormDataListener, FormDataStore
from collab_forms.runtime.row_ids import RowIdFactory
from collab_forms.runtime.schema_loader import (
    SchemaWarning,
    iter_fields,
    load_fields_set,
    parse_fields_set,
)
from collab_forms.runtime.table_engine import CellErrors, TableRowEngine
from collab_forms.runtime.validators import REQUIRED, validate_field_value
from collab_forms.schemas.fields_set import ComponentType, FieldConfig, FieldsSet, NoteEntry
from collab_forms.utils.number_parsing import Number

logger = logging.getLogger(__name__)

NotesListener = Callable[[str, List[NoteEntry]], None]
AllNotesListener = Callable[[Dict[str, List[NoteEntry]]], None]


class UnknownFieldError(KeyError):
    """Raised when a field id is not part of the form set."""
    pass


@dataclass
class TableState:
    """Render state of a data table field."""

    rows: List[Dict[str, Any]]
    cell_errors: CellErrors
    aggregations: Dict[str, Number]
    aggregation_display: Dict[str, str]
    aggregation_labels: Dict[str, str]
    row_count: int
    max_rows: Optional[int]
    can_add_row: bool
    allow_add_row: bool
    allow_delete_row: bool
    show_row_numbers: bool
    show_subtotal_row: bool
    enable_row_collab: bool
    empty_message: str


@dataclass
class FieldState:
    """Render state of one visible field or group."""

    id: str
    label: str
    field_type: str
    component_type: Optional[str]
    value: Any = None
    display_value: Any = None
    required: bool = False
    error: Optional[str] = None
    description: Optional[str] = None
    accept_files: bool = False
    has_chat_messages: bool = False
    enable_notes: bool = False
    notes: List[Dict[str, Any]] = dataclass_field(default_factory=list)
    has_notes: bool = False
    reference_value: Optional[str] = None
    reference_label: Optional[str] = None
    table: Optional[TableState] = None
    children: List["FieldState"] = dataclass_field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FormValidationReport:
    """Validation of every visible field and table cell."""

    field_errors: Dict[str, str] = dataclass_field(default_factory=dict)
    cell_errors: Dict[str, CellErrors] = dataclass_field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.field_errors and not any(self.cell_errors.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "field_errors": dict(self.field_errors),
            "cell_errors": copy.deepcopy(self.cell_errors),
        }


class FormSet:
    """A live form built from a FieldsSet.

    Example:
        form = FormSet.from_file("expenses.json", initial_data={"country": "AU"})
        form.set_value("has_expenses", True)
        table = form.table("expenses")
        row_id = table.add_row()
        table.update_cell(row_id, "amount", "42.50")
        state = form.render_state()
    """

    def __init__(
        self,
        fields_set: FieldsSet,
        initial_data: Optional[Mapping[str, Any]] = None,
        *,
        enable_notes: bool = False,
        empty_table_message: Optional[str] = None,
        on_field_change: Optional[FieldChangeListener] = None,
        on_form_data_change: Optional[FormDataListener] = None,
        on_notes_change: Optional[NotesListener] = None,
        on_all_notes_change: Optional[AllNotesListener] = None,
        row_id_factory: Optional[RowIdFactory] = None,
        warnings: Optional[Sequence[SchemaWarning]] = None,
    ):
        self.fields_set = fields_set
        self.warnings: List[SchemaWarning] = list(warnings or [])
        self.enable_notes = enable_notes
        self.empty_table_message = empty_table_message
        self.on_notes_change = on_notes_change
        self.on_all_notes_change = on_all_notes_change

        row_ids = row_id_factory or RowIdFactory()
        self.store = FormDataStore(fields_set, initial_data, row_ids)
        self.store.subscribe(on_field_change=on_field_change, on_form_data_change=on_form_data_change)

        self._fields: Dict[str, FieldConfig] = {}
        for field in iter_fields(fields_set.field_list):
            self._fields[field.id] = field

        self._tables: Dict[str, TableRowEngine] = {
            field.id: TableRowEngine(self.store, field, row_ids)
            for field in self._fields.values()
            if field.kind == ComponentType.DATA_TABLE and field.table_config is not None
        }

        self._notes: Dict[str, List[NoteEntry]] = {
            field.id: list(field.notes) for field in self._fields.values() if field.notes
        }
        self._chat_flags: Dict[str, bool] = {}
        self._field_errors: Dict[str, str] = {}

    @classmethod
    def from_file(cls, file_path: str | Path, initial_data: Optional[Mapping[str, Any]] = None, **kwargs) -> "FormSet":
        loaded = load_fields_set(file_path)
        return cls(loaded.fields_set, initial_data, warnings=loaded.warnings, **kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | str, initial_data: Optional[Mapping[str, Any]] = None, **kwargs) -> "FormSet":
        loaded = parse_fields_set(data)
        return cls(loaded.fields_set, initial_data, warnings=loaded.warnings, **kwargs)

    # ------------------------------------------------------------------
    # Hosting UI surface
    # ------------------------------------------------------------------

    def get_form_data(self) -> Dict[str, Any]:
        return self.store.snapshot()

    def set_form_data(self, data: Mapping[str, Any]) -> None:
        self.store.replace(data)
        self._clear_errors()

    def reset_form(self) -> None:
        """Restore schema defaults merged with the initial data."""
        self.store.reset()
        self._clear_errors()

    def get_notes_data(self) -> Dict[str, List[NoteEntry]]:
        return {field_id: list(notes) for field_id, notes in self._notes.items()}

    def set_field_notes(self, field_id: str, notes: Sequence[NoteEntry | Mapping[str, Any]]) -> None:
        """Replace a field's notes and notify the notes listeners."""
        self.field(field_id)
        entries = [n if isinstance(n, NoteEntry) else NoteEntry.model_validate(n) for n in notes]
        self._notes[field_id] = entries

        if self.on_notes_change is not None:
            self.on_notes_change(field_id, list(entries))
        if self.on_all_notes_change is not None:
            self.on_all_notes_change(self.get_notes_data())

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def field(self, field_id: str) -> FieldConfig:
        try:
            return self._fields[field_id]
        except KeyError:
            raise UnknownFieldError(field_id)

    def get_value(self, field_id: str) -> Any:
        """Current value coerced to the field's stored shape."""
        field = self.field(field_id)
        return coerce_value(field, self._current_value(field))

    def set_value(self, field_id: str, raw: Any) -> Optional[str]:
        """Coerce an edit payload, store it and validate the field.

        Required is only enforced while the field renders. Errors of fields
        the edit hid are dropped.

        Returns:
            The field's validation error, or None
        """
        field = self.field(field_id)
        value = coerce_value(field, raw)
        self.store.set(field_id, value)

        visible = set(self.visible_field_ids())
        error = validate_field_value(field, value, required=field.required and field_id in visible)
        if error:
            self._field_errors[field_id] = error
        else:
            self._field_errors.pop(field_id, None)

        self._field_errors = {
            fid: message for fid, message in self._field_errors.items() if fid in visible
        }
        return error

    def is_visible(self, field_id: str) -> bool:
        """Own dependency of a field, without considering ancestors."""
        return is_visible(self.field(field_id), self.store.view())

    def visible_field_ids(self) -> List[str]:
        """Ids of fields that render, gated top-down through groups."""
        return [field.id for field in visible_fields(self.fields_set.field_list, self.store.view())]

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    @property
    def tables(self) -> Dict[str, TableRowEngine]:
        return dict(self._tables)

    def table(self, field_id: str) -> TableRowEngine:
        try:
            return self._tables[field_id]
        except KeyError:
            raise UnknownFieldError(field_id)

    def add_row(self, field_id: str) -> Optional[str]:
        return self.table(field_id).add_row()

    def delete_row(self, field_id: str, row_id: str) -> None:
        self.table(field_id).delete_row(row_id)

    def get_aggregations(self, field_id: str) -> Dict[str, Number]:
        return self.table(field_id).get_aggregations()

    # ------------------------------------------------------------------
    # Collaboration annotations
    # ------------------------------------------------------------------

    def apply_chat_flags(self, flags: Mapping[str, bool]) -> None:
        """Merge unread-chat flags pushed by a collaborator. Not form data."""
        self._chat_flags = {field_id: bool(flag) for field_id, flag in flags.items()}

    def has_chat_messages(self, field_id: str) -> bool:
        return self._chat_flags.get(field_id, False)

    # ------------------------------------------------------------------
    # Validation and render state
    # ------------------------------------------------------------------

    def validate(self) -> FormValidationReport:
        """Validate visible fields and all cells of visible tables.

        Hidden fields, including children of hidden groups, are never enforced.
        """
        report = FormValidationReport()
        for field in visible_fields(self.fields_set.field_list, self.store.view()):
            if field.is_group or resolve_handler(field) is None:
                continue

            value = self._current_value(field)
            if field.kind == ComponentType.DATA_TABLE:
                table = self._tables[field.id]
                if field.required and is_empty_value(field, value):
                    report.field_errors[field.id] = REQUIRED
                errors = table.validate_all()
                if errors:
                    report.cell_errors[field.id] = errors
                continue

            error = validate_field_value(field, value, required=field.required)
            if error:
                report.field_errors[field.id] = error

        self._field_errors = dict(report.field_errors)
        return report

    def render_state(self) -> List[FieldState]:
        """Logical state of every field that renders, as a tree."""
        return self._render_fields(self.fields_set.field_list)

    def _render_fields(self, fields: List[FieldConfig]) -> List[FieldState]:
        states = []
        for field in fields:
            state = self._render_field(field)
            if state is not None:
                states.append(state)
        return states

    def _render_field(self, field: FieldConfig) -> Optional[FieldState]:
        form_data = self.store.view()
        if not is_visible(field, form_data):
            return None

        if field.is_group:
            if not field.sub_fields:
                return None
            state = self._base_state(field)
            state.children = self._render_fields(field.sub_fields)
            return state

        handler = resolve_handler(field)
        if handler is None:
            return None

        value = handler.coerce(self._current_value(field), field)
        state = self._base_state(field)
        state.component_type = field.kind.value
        state.value = value
        state.display_value = display_value(field, value)
        state.required = field.required
        state.error = self._field_errors.get(field.id)

        if field.kind == ComponentType.DATA_TABLE:
            state.table = self._table_state(self._tables[field.id])
            state.value = state.table.rows
            state.display_value = state.table.rows

        return state

    def _base_state(self, field: FieldConfig) -> FieldState:
        notes = self._notes.get(field.id, [])
        enable_notes = field.enable_notes if field.enable_notes is not None else self.enable_notes
        accept_files = field.accept_files if field.accept_files is not None else self.fields_set.accept_files
        return FieldState(
            id=field.id,
            label=field.label,
            field_type=field.field_type,
            component_type=None,
            description=field.description,
            accept_files=accept_files,
            has_chat_messages=self.has_chat_messages(field.id),
            enable_notes=enable_notes,
            notes=[note.model_dump() for note in notes],
            has_notes=len(notes) > 0,
            reference_value=field.reference_value,
            reference_label=field.reference_label,
        )

    def _table_state(self, table: TableRowEngine) -> TableState:
        config = table.config
        rows = copy.deepcopy(table.rows)
        aggregations = table.get_aggregations()
        columns = {column.id: column for column in config.columns}
        empty_message = config.empty_message
        if "empty_message" not in config.model_fields_set and self.empty_table_message:
            empty_message = self.empty_table_message
        return TableState(
            rows=rows,
            cell_errors=table.cell_errors,
            aggregations=aggregations,
            aggregation_display={
                column_id: format_aggregation(columns[column_id], value)
                for column_id, value in aggregations.items()
            },
            aggregation_labels={
                column_id: columns[column_id].aggregation_label for column_id in aggregations
            },
            row_count=len(rows),
            max_rows=config.max_rows,
            can_add_row=config.allow_add_row and table.can_add_row,
            allow_add_row=config.allow_add_row,
            allow_delete_row=config.allow_delete_row,
            show_row_numbers=config.show_row_numbers,
            show_subtotal_row=config.subtotal_row_visible,
            enable_row_collab=config.enable_row_collab,
            empty_message=empty_message,
        )

    def _current_value(self, field: FieldConfig) -> Any:
        value = self.store.get(field.id)
        return field.value if value is None else value

    def _clear_errors(self) -> None:
        self._field_errors = {}
        for table in self._tables.values():
            table.clear_errors()
