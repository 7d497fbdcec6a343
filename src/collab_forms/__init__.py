"""
Collab Forms - a schema-driven form engine.

Loads form sets described in JSON, tracks form data, resolves conditional
visibility, manages editable data tables with per-cell validation and column
aggregation, and carries collaboration annotations (notes, chat flags, row
markers) next to the data.
"""

__version__ = "0.1.0"

from collab_forms.runtime.form_set import FormSet
from collab_forms.runtime.schema_loader import load_fields_set, parse_fields_set
from collab_forms.schemas.fields_set import FieldConfig, FieldsSet

__all__ = [
    "FieldConfig",
    "FieldsSet",
    "FormSet",
    "load_fields_set",
    "parse_fields_set",
]
