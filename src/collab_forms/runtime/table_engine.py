"""
Table Row Engine - CRUD over the rows of one data table field.

Rows live in the form data store under the table field's id. The engine never
caches them: every operation reads the current list from the store and writes
back a new list, so store subscribers see each mutation.

Row identity is the generated `_row_id`, never the list position. Ids are
unique for the lifetime of the factory and are never reused after a delete.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from collab_forms.runtime.aggregation import get_aggregations
from collab_forms.runtime.field_dispatch import FIELD_HANDLERS
from collab_forms.runtime.form_store import FormDataStore
from collab_forms.runtime.row_ids import RowIdFactory, has_row_id
from collab_forms.runtime.validators import validate_cell
from collab_forms.schemas.data_table import (
    ROW_CHAT_KEY,
    ROW_DATA_OK_KEY,
    ROW_FILES_KEY,
    ROW_HAS_NOTES_KEY,
    ROW_ID_KEY,
    ROW_NOTES_KEY,
    ColumnFieldType,
    DataTableColumn,
    DataTableConfig,
    FileData,
)
from collab_forms.schemas.fields_set import ComponentType, FieldConfig, NoteEntry
from collab_forms.utils.number_parsing import Number

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
CellErrors = Dict[str, Dict[str, str]]


def default_cell_value(column: DataTableColumn) -> Any:
    """Default for a new row: False for checkboxes, empty otherwise."""
    if column.field_type == ColumnFieldType.CHECKBOX:
        return False
    return ""


def _to_records(files: Sequence[Any]) -> List[Any]:
    return [f.model_dump(mode="json") if isinstance(f, FileData) else f for f in files]


class TableRowEngine:
    """Row operations for one data table field.

    Example:
        table = TableRowEngine(store, field)
        row_id = table.add_row()
        table.update_cell(row_id, "amount", "150")  # -> "Maximum: 100"
        table.get_aggregations()                     # -> {"amount": 150}
    """

    def __init__(
        self,
        store: FormDataStore,
        field: FieldConfig,
        row_id_factory: Optional[RowIdFactory] = None,
    ):
        if field.kind != ComponentType.DATA_TABLE or field.table_config is None:
            raise ValueError(f"Field '{field.id}' is not a configured data table")

        self.store = store
        self.field = field
        self.config: DataTableConfig = field.table_config
        self._new_row_id = row_id_factory or store.row_ids
        self._cell_errors: CellErrors = {}

    @property
    def field_id(self) -> str:
        return self.field.id

    @property
    def columns(self) -> List[DataTableColumn]:
        return self.config.columns

    @property
    def rows(self) -> List[Row]:
        """Current rows. The store gives rows their ids, so this never writes."""
        raw = self.store.get(self.field_id)
        rows = FIELD_HANDLERS[ComponentType.DATA_TABLE].coerce(raw, self.field)
        for row in rows:
            if has_row_id(row):
                self._new_row_id.adopt(row[ROW_ID_KEY])
        return rows

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def can_add_row(self) -> bool:
        max_rows = self.config.max_rows
        return not (max_rows and self.row_count >= max_rows)

    @property
    def cell_errors(self) -> CellErrors:
        """Per-row, per-column errors for rows that still exist."""
        live = {row.get(ROW_ID_KEY) for row in self.rows}
        return {
            row_id: dict(errors)
            for row_id, errors in self._cell_errors.items()
            if row_id in live and errors
        }

    def find_row(self, row_id: str) -> Optional[Row]:
        for row in self.rows:
            if row.get(ROW_ID_KEY) == row_id:
                return row
        return None

    def add_row(self) -> Optional[str]:
        """Append a row with per-column defaults.

        Returns:
            The new row id, or None when max_rows is reached
        """
        rows = self.rows
        max_rows = self.config.max_rows
        if max_rows and len(rows) >= max_rows:
            logger.debug(f"Table '{self.field_id}': max_rows {max_rows} reached, row not added")
            return None

        new_row: Row = {ROW_ID_KEY: self._new_row_id()}
        for column in self.columns:
            if column.field_type == ColumnFieldType.FILES:
                new_row.setdefault(ROW_FILES_KEY, {})[column.id] = []
            else:
                new_row[column.id] = default_cell_value(column)

        self.store.set(self.field_id, [*rows, new_row])
        return new_row[ROW_ID_KEY]

    def delete_row(self, row_id: str) -> None:
        """Remove a row by id. Deleting an unknown id is a no-op."""
        rows = self.rows
        remaining = [row for row in rows if row.get(ROW_ID_KEY) != row_id]
        self._cell_errors.pop(row_id, None)

        if len(remaining) == len(rows):
            logger.debug(f"Table '{self.field_id}': delete of unknown row '{row_id}' ignored")
            return

        self.store.set(self.field_id, remaining)

    def update_cell(self, row_id: str, column_id: str, value: Any) -> Optional[str]:
        """Store a cell value and re-validate that cell.

        The value is stored even when invalid; the error is advisory.

        Returns:
            The cell's validation error, or None
        """
        column = self.config.get_column(column_id)
        if column is None:
            logger.debug(f"Table '{self.field_id}': update of unknown column '{column_id}' ignored")
            return None

        if not self._replace_row(row_id, lambda row: {**row, column_id: value}):
            return None

        error = validate_cell(value, column)
        row_errors = self._cell_errors.setdefault(row_id, {})
        if error:
            row_errors[column_id] = error
        else:
            row_errors.pop(column_id, None)
        return error

    def update_files(self, row_id: str, column_id: str, files: Sequence[Any]) -> None:
        """Replace the file records attached to a files cell."""
        column = self.config.get_column(column_id)
        if column is None:
            logger.debug(f"Table '{self.field_id}': files for unknown column '{column_id}' ignored")
            return

        records = _to_records(files)
        max_files = column.files_config.max_files if column.files_config else None
        if max_files is not None:
            records = records[:max_files]

        self._replace_row(
            row_id,
            lambda row: {**row, ROW_FILES_KEY: {**(row.get(ROW_FILES_KEY) or {}), column_id: records}},
        )

    def set_row_data_ok(self, row_id: str, checked: bool) -> None:
        self._replace_row(row_id, lambda row: {**row, ROW_DATA_OK_KEY: bool(checked)})

    def set_row_notes(self, row_id: str, notes: Sequence[Any]) -> None:
        entries = [n.model_dump() if isinstance(n, NoteEntry) else n for n in notes]
        self._replace_row(
            row_id,
            lambda row: {**row, ROW_NOTES_KEY: entries, ROW_HAS_NOTES_KEY: len(entries) > 0},
        )

    def set_row_chat_flag(self, row_id: str, has_messages: bool) -> None:
        """Forward an unread-discussion flag computed by a collaborator."""
        self._replace_row(row_id, lambda row: {**row, ROW_CHAT_KEY: bool(has_messages)})

    def get_file_data(self) -> List[Any]:
        """All file records attached anywhere in the table."""
        all_files: List[Any] = []
        for row in self.rows:
            for files in (row.get(ROW_FILES_KEY) or {}).values():
                all_files.extend(files or [])
        return all_files

    def get_aggregations(self) -> Dict[str, Number]:
        return get_aggregations(self.columns, self.rows)

    def validate_all(self) -> CellErrors:
        """Validate every cell of every row and refresh the error map."""
        errors: CellErrors = {}
        for row in self.rows:
            row_errors = {}
            for column in self.columns:
                error = validate_cell(row.get(column.id), column)
                if error:
                    row_errors[column.id] = error
            if row_errors:
                errors[row.get(ROW_ID_KEY)] = row_errors
        self._cell_errors = {row_id: dict(e) for row_id, e in errors.items()}
        return errors

    def clear_errors(self) -> None:
        self._cell_errors = {}

    def _replace_row(self, row_id: str, update: Callable[[Row], Row]) -> bool:
        rows = self.rows
        found = False
        updated: List[Row] = []
        for row in rows:
            if row.get(ROW_ID_KEY) == row_id:
                updated.append(update(row))
                found = True
            else:
                updated.append(row)

        if not found:
            logger.debug(f"Table '{self.field_id}': update of unknown row '{row_id}' ignored")
            return False

        self.store.set(self.field_id, updated)
        return True
