"""
Form Data Store - the single mutable resource of a form.

Holds a flat field_id -> value map regardless of how the schema nests fields.
Seeded from schema defaults (depth-first), then overridden by an optional
initial snapshot. Every write is atomic and observed synchronously by
subscribers.

Table rows get their `_row_id` when they enter the store (seeding, set,
replace), so reading a table never has to write.
"""

import copy
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from collab_forms.runtime.row_ids import RowIdFactory, assign_row_ids
from collab_forms.runtime.schema_loader import iter_fields
from collab_forms.schemas.fields_set import ComponentType, FieldsSet

logger = logging.getLogger(__name__)

FieldChangeListener = Callable[[str, Any], None]
FormDataListener = Callable[[Dict[str, Any]], None]


def table_field_ids(fields_set: FieldsSet) -> Set[str]:
    return {field.id for field in iter_fields(fields_set.field_list) if field.kind == ComponentType.DATA_TABLE}


def initialize_form_data(
    fields_set: FieldsSet,
    initial_data: Optional[Mapping[str, Any]] = None,
    row_ids: Optional[RowIdFactory] = None,
) -> Dict[str, Any]:
    """Seed every field's value (groups included), then apply overrides.

    With a row id factory, rows of data table fields that lack a `_row_id`
    get one here.
    """
    data: Dict[str, Any] = {}
    for field in iter_fields(fields_set.field_list):
        data[field.id] = copy.deepcopy(field.value)

    if initial_data:
        for key, value in initial_data.items():
            data[key] = copy.deepcopy(value)

    if row_ids is not None:
        for field_id in table_field_ids(fields_set):
            if field_id in data:
                data[field_id] = assign_row_ids(data[field_id], row_ids)

    return data


class FormDataStore:
    """Owned, flat, mutable map of field values for one active form.

    Example:
        store = FormDataStore(fields_set, initial_data={"name": "Ada"})
        store.subscribe(on_field_change=lambda fid, v: print(fid, v))
        store.set("name", "Grace")
        store.reset()  # back to {"name": "Ada", ...}
    """

    def __init__(
        self,
        fields_set: FieldsSet,
        initial_data: Optional[Mapping[str, Any]] = None,
        row_id_factory: Optional[RowIdFactory] = None,
    ):
        self.row_ids = row_id_factory or RowIdFactory()
        self._table_ids = table_field_ids(fields_set)
        self._initial = initialize_form_data(fields_set, initial_data, self.row_ids)
        self._data: Dict[str, Any] = copy.deepcopy(self._initial)
        self._field_listeners: List[FieldChangeListener] = []
        self._form_listeners: List[FormDataListener] = []

    def __contains__(self, field_id: str) -> bool:
        return field_id in self._data

    def __len__(self) -> int:
        return len(self._data)

    def get(self, field_id: str, default: Any = None) -> Any:
        return self._data.get(field_id, default)

    def set(self, field_id: str, value: Any) -> None:
        """Replace one value and notify subscribers."""
        if field_id in self._table_ids:
            value = assign_row_ids(value, self.row_ids)
        self._data[field_id] = value
        logger.debug(f"Field '{field_id}' updated")
        for listener in list(self._field_listeners):
            listener(field_id, value)
        self._notify_form_listeners()

    def replace(self, data: Mapping[str, Any]) -> None:
        """Replace the whole map (hosting UI set_form_data)."""
        new_data = copy.deepcopy(dict(data))
        for field_id in self._table_ids & new_data.keys():
            new_data[field_id] = assign_row_ids(new_data[field_id], self.row_ids)
        self._data = new_data
        self._notify_form_listeners()

    def reset(self) -> None:
        """Restore the snapshot computed at initialization."""
        self._data = copy.deepcopy(self._initial)
        self._notify_form_listeners()

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy of the current values."""
        return copy.deepcopy(self._data)

    def initial_snapshot(self) -> Dict[str, Any]:
        """Deep copy of the values reset() restores."""
        return copy.deepcopy(self._initial)

    def view(self) -> Mapping[str, Any]:
        """Live read-only access for hot paths (dependency checks)."""
        return self._data

    def subscribe(
        self,
        on_field_change: Optional[FieldChangeListener] = None,
        on_form_data_change: Optional[FormDataListener] = None,
    ) -> None:
        if on_field_change is not None:
            self._field_listeners.append(on_field_change)
        if on_form_data_change is not None:
            self._form_listeners.append(on_form_data_change)

    def unsubscribe(
        self,
        on_field_change: Optional[FieldChangeListener] = None,
        on_form_data_change: Optional[FormDataListener] = None,
    ) -> None:
        if on_field_change in self._field_listeners:
            self._field_listeners.remove(on_field_change)
        if on_form_data_change in self._form_listeners:
            self._form_listeners.remove(on_form_data_change)

    def _notify_form_listeners(self) -> None:
        if not self._form_listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._form_listeners):
            listener(snapshot)
