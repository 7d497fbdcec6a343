"""Pydantic schemas for table-typed form fields.

A data table field stores a list of row dicts. These models describe the
table itself (columns, row policy) and the opaque records the engine keeps
alongside row data (file descriptors).
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


ROW_ID_KEY = "_row_id"
ROW_DATA_OK_KEY = "_data_ok"
ROW_FILES_KEY = "_files"
ROW_CHAT_KEY = "_has_chat_messages"
ROW_NOTES_KEY = "_notes"
ROW_HAS_NOTES_KEY = "_has_notes"

DEFAULT_EMPTY_MESSAGE = 'No data. Click "Add Row" to begin.'


class ColumnFieldType(str, Enum):
    """Cell kinds supported by a table column."""

    TEXT = "text"
    NUMERIC = "numeric"
    DROPDOWN = "dropdown"
    FILES = "files"
    CHECKBOX = "checkbox"
    RADIOBUTTON = "radiobutton"


class AggregationType(str, Enum):
    """Column summary statistic shown in the subtotal row."""

    SUM = "sum"
    AVERAGE = "average"
    COUNT = "count"
    NONE = "none"


class DataTableOption(BaseModel):
    """Label/value pair for dropdown and radiobutton columns."""

    label: str
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value_to_str(cls, v):
        """Schema authors sometimes write numeric option values."""
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v


class ColumnConstraints(BaseModel):
    """Declarative cell constraints, applied per column field type."""

    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    length: Optional[int] = Field(default=None, ge=0)
    regex: Optional[str] = None
    required: bool = False
    num_decimals: Optional[int] = Field(default=None, ge=0)


class FilesColumnConfig(BaseModel):
    """Upload settings for a files column. Transport is handled elsewhere."""

    target_path: str = "/uploads"
    max_files: Optional[int] = Field(default=None, ge=1)
    file_accept: Optional[str] = None
    max_size: Optional[int] = Field(default=None, ge=0)


class AggregationConfig(BaseModel):
    """Aggregation configured for a column."""

    type: AggregationType = AggregationType.NONE
    label: Optional[str] = None


class DataTableColumn(BaseModel):
    """One column of a data table field.

    Styling keys (width, background_color, header_styling, tooltip) are
    accepted and ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Key of the cell value in each row")
    label: str = Field("", description="Column header text")
    field_type: ColumnFieldType = ColumnFieldType.TEXT
    editable: bool = True
    constraints: Optional[ColumnConstraints] = None
    options: List[DataTableOption] = Field(default_factory=list)
    files_config: Optional[FilesColumnConfig] = None
    aggregation: Optional[AggregationConfig] = None

    @property
    def has_aggregation(self) -> bool:
        return self.aggregation is not None and self.aggregation.type != AggregationType.NONE

    @property
    def aggregation_label(self) -> str:
        if self.aggregation and self.aggregation.label:
            return self.aggregation.label
        return "Total"


class DataTableConfig(BaseModel):
    """Columns and row policy of a data table field."""

    model_config = ConfigDict(extra="ignore")

    columns: List[DataTableColumn] = Field(default_factory=list)
    allow_add_row: bool = True
    allow_delete_row: bool = True
    show_row_numbers: bool = False
    show_subtotal_row: bool = True
    empty_message: str = DEFAULT_EMPTY_MESSAGE
    max_rows: Optional[int] = Field(default=None, ge=0)
    enable_row_collab: bool = True

    @field_validator("columns")
    @classmethod
    def validate_unique_column_ids(cls, v: List[DataTableColumn]) -> List[DataTableColumn]:
        """Column ids key the cells of every row, so they must be unique."""
        seen = set()
        for column in v:
            if column.id in seen:
                raise ValueError(f"Duplicate column id '{column.id}'")
            seen.add(column.id)
        return v

    def get_column(self, column_id: str) -> Optional[DataTableColumn]:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    @property
    def has_aggregations(self) -> bool:
        return any(column.has_aggregation for column in self.columns)

    @property
    def subtotal_row_visible(self) -> bool:
        return self.show_subtotal_row and self.has_aggregations


class FileData(BaseModel):
    """Descriptor of an uploaded file attached to a cell or field."""

    model_config = ConfigDict(extra="allow")

    file_path: str
    file_name: str
    file_size: int = Field(0, ge=0)
    file_type: str = ""
    file_id: str
    uploaded_at: Optional[datetime] = None
