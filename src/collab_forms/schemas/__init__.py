"""Pydantic schemas for form definitions."""

from collab_forms.schemas.data_table import (
    AggregationConfig,
    AggregationType,
    ColumnConstraints,
    ColumnFieldType,
    DataTableColumn,
    DataTableConfig,
    DataTableOption,
    FileData,
    FilesColumnConfig,
)
from collab_forms.schemas.fields_set import (
    ComponentType,
    FieldConfig,
    FieldsSet,
    InputFormat,
    InputOption,
    InputType,
    NoteEntry,
)

__all__ = [
    "AggregationConfig",
    "AggregationType",
    "ColumnConstraints",
    "ColumnFieldType",
    "ComponentType",
    "DataTableColumn",
    "DataTableConfig",
    "DataTableOption",
    "FieldConfig",
    "FieldsSet",
    "FileData",
    "FilesColumnConfig",
    "InputFormat",
    "InputOption",
    "InputType",
    "NoteEntry",
]
