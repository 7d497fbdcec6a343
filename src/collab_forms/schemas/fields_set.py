"""Pydantic schemas for form definitions (fields, groups, form sets).

A FieldsSet is the root JSON document. Fields nest through groups, but every
field id maps to a single key of the flat form data store.
"""

from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from collab_forms.schemas.data_table import DataTableConfig


class ComponentType(str, Enum):
    """Logical kind of a form field. Each kind owns one stored value shape."""

    TEXT_INPUT = "text_input"
    TEXT_AREA = "text_area"
    CHECKBOX = "checkbox"
    SELECT = "select"
    RADIO = "radio"
    DATE = "date"
    DATA_TABLE = "data_table"


# Widget tags used by existing form documents, resolved onto the same kinds
COMPONENT_ALIASES = {
    "HazoCollabFormInputbox": ComponentType.TEXT_INPUT,
    "HazoCollabFormTextArea": ComponentType.TEXT_AREA,
    "HazoCollabFormCheckbox": ComponentType.CHECKBOX,
    "HazoCollabFormCombo": ComponentType.SELECT,
    "HazoCollabFormRadio": ComponentType.RADIO,
    "HazoCollabFormDate": ComponentType.DATE,
    "HazoCollabFormDataTable": ComponentType.DATA_TABLE,
}


class InputType(str, Enum):
    """Character class accepted by a text input."""

    MIXED = "mixed"
    NUMERIC = "numeric"
    EMAIL = "email"
    ALPHA = "alpha"


DATE_RANGE_GUIDE = "range"


class InputOption(BaseModel):
    """Label/value pair for select and radio fields."""

    label: str
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value_to_str(cls, v: Any) -> Any:
        """Accept numeric and boolean option values from hand-written JSON."""
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v


class InputFormat(BaseModel):
    """Format rules and hints for text inputs (and date mode for date fields)."""

    format_guide: Optional[str] = None
    text_min_len: Optional[int] = Field(default=None, ge=0)
    text_max_len: Optional[int] = Field(default=None, ge=0)
    num_min: Optional[float] = None
    num_max: Optional[float] = None
    regex: Optional[str] = None
    num_decimals: Optional[int] = Field(default=None, ge=0)


class NoteEntry(BaseModel):
    """A note attached to a field or a table row. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    note_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    created_at: Optional[str] = None
    content: str = ""


class FieldConfig(BaseModel):
    """One form field or group."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Key into the form data store")
    label: str = ""
    field_type: Literal["field", "group"] = "field"
    description: Optional[str] = None
    component_type: Optional[str] = Field(
        default=None, description="Raw component tag; resolved through ComponentType"
    )
    value: Any = None
    dependency: Optional[str] = Field(
        default=None, description="Visibility gate in the form 'field_id:value'"
    )
    required: bool = False
    sub_fields: List["FieldConfig"] = Field(default_factory=list)
    table_config: Optional[DataTableConfig] = None

    input_type: Optional[InputType] = None
    input_format: Optional[InputFormat] = None
    input_options: List[InputOption] = Field(default_factory=list)
    accept_files: Optional[bool] = None
    input_width: Optional[Literal["auto", "full"]] = None

    enable_notes: Optional[bool] = None
    notes: List[NoteEntry] = Field(default_factory=list)
    reference_value: Optional[str] = None
    reference_label: Optional[str] = None

    @property
    def is_group(self) -> bool:
        return self.field_type == "group"

    @property
    def kind(self) -> Optional[ComponentType]:
        """Resolved component kind, or None for groups and unknown tags.

        Accepts the enum values and the widget tags in COMPONENT_ALIASES.
        """
        if self.is_group or not self.component_type:
            return None
        if self.component_type in COMPONENT_ALIASES:
            return COMPONENT_ALIASES[self.component_type]
        try:
            return ComponentType(self.component_type)
        except ValueError:
            return None

    @property
    def is_date_range(self) -> bool:
        return (
            self.kind == ComponentType.DATE
            and self.input_format is not None
            and self.input_format.format_guide == DATE_RANGE_GUIDE
        )

    @property
    def min_date(self) -> Optional[str]:
        """Earliest selectable ISO date for single-date fields."""
        if self.kind != ComponentType.DATE or self.is_date_range or self.input_format is None:
            return None
        return self.input_format.format_guide


class FieldsSet(BaseModel):
    """Root form document."""

    model_config = ConfigDict(extra="ignore")

    group_name: str = ""
    accept_files: bool = False
    field_list: List[FieldConfig] = Field(default_factory=list)


FieldConfig.model_rebuild()
