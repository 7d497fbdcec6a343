"""
Runtime components of the schema-driven form engine.

1. Schema Loader - schema_loader (fail-soft parsing of form set JSON)
2. Dependency Resolver - dependency
3. Form Data Store - form_store
4. Field Dispatch - field_dispatch
5. Table Row Engine - table_engine
6. Validation Engine - validators
7. Aggregation Engine - aggregation

FormSet (form_set) ties them together behind the surface a hosting UI uses.
"""

from collab_forms.runtime.aggregation import compute_aggregation, get_aggregations
from collab_forms.runtime.collab import UnreadFlagPoller, collect_unread_flags, has_unread_messages
from collab_forms.runtime.dependency import check_dependency, is_visible, parse_dependency, visible_fields
from collab_forms.runtime.field_dispatch import FIELD_HANDLERS, FieldHandler, resolve_handler
from collab_forms.runtime.form_set import FieldState, FormSet, FormValidationReport, UnknownFieldError
from collab_forms.runtime.form_store import FormDataStore
from collab_forms.runtime.schema_loader import (
    LoadedSchema,
    SchemaLoadError,
    SchemaWarning,
    load_fields_set,
    parse_fields_set,
)
from collab_forms.runtime.row_ids import RowIdFactory
from collab_forms.runtime.table_engine import TableRowEngine
from collab_forms.runtime.validators import validate_cell, validate_field_value

__all__ = [
    "FIELD_HANDLERS",
    "FieldHandler",
    "FieldState",
    "FormDataStore",
    "FormSet",
    "FormValidationReport",
    "LoadedSchema",
    "RowIdFactory",
    "SchemaLoadError",
    "SchemaWarning",
    "TableRowEngine",
    "UnknownFieldError",
    "UnreadFlagPoller",
    "check_dependency",
    "collect_unread_flags",
    "compute_aggregation",
    "get_aggregations",
    "has_unread_messages",
    "is_visible",
    "load_fields_set",
    "parse_dependency",
    "parse_fields_set",
    "resolve_handler",
    "validate_cell",
    "validate_field_value",
    "visible_fields",
]
