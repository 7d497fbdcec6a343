"""
Utility module for loading form set JSON documents.

The document as a whole must parse; individual fields fail soft. A field that
cannot be understood is reported as a SchemaWarning and rendered as absent,
so one malformed field never breaks the rest of the form.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from pydantic import ValidationError

from collab_forms.schemas.fields_set import ComponentType, FieldConfig, FieldsSet

logger = logging.getLogger(__name__)


class SchemaLoadError(Exception):
    """Raised when a form set document cannot be loaded at all."""
    pass


@dataclass
class SchemaWarning:
    """A non-fatal configuration problem in one field."""

    field_id: Optional[str]
    path: str
    message: str

    def __str__(self) -> str:
        target = self.field_id or self.path
        return f"{target}: {self.message}"


@dataclass
class LoadedSchema:
    """Result of loading a form set: the model plus configuration warnings."""

    fields_set: FieldsSet
    warnings: List[SchemaWarning] = field(default_factory=list)


def load_fields_set(file_path: str | Path) -> LoadedSchema:
    """
    Load a form set JSON file.

    Args:
        file_path: Path to the form set JSON file

    Returns:
        LoadedSchema with the parsed FieldsSet and any field-level warnings

    Raises:
        SchemaLoadError: If the file is missing or is not valid JSON
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SchemaLoadError(f"Form set file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Invalid JSON in form set file: {e}")

    return parse_fields_set(data)


def parse_fields_set(data: Dict[str, Any] | str) -> LoadedSchema:
    """
    Build a FieldsSet from a decoded document (or a JSON string).

    Expected structure:
        {
            "group_name": str,
            "accept_files": bool,
            "field_list": [...]
        }

    Raises:
        SchemaLoadError: If the document is not an object with a 'field_list' list
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise SchemaLoadError(f"Invalid JSON in form set document: {e}")

    if not isinstance(data, dict):
        raise SchemaLoadError("Form set document must be a JSON object")

    if "field_list" not in data:
        raise SchemaLoadError("Form set must contain 'field_list' key")

    if not isinstance(data["field_list"], list):
        raise SchemaLoadError("Form set 'field_list' must be a list")

    header = {k: v for k, v in data.items() if k != "field_list"}
    try:
        fields_set = FieldsSet.model_validate(header)
    except ValidationError as e:
        raise SchemaLoadError(f"Invalid form set header: {e}")

    warnings: List[SchemaWarning] = []
    fields_set.field_list = _parse_field_list(data["field_list"], "field_list", warnings)
    _check_duplicate_ids(fields_set.field_list, warnings)

    for warning in warnings:
        logger.warning(f"Form set '{fields_set.group_name}': {warning}")

    return LoadedSchema(fields_set=fields_set, warnings=warnings)


def iter_fields(field_list: List[FieldConfig]) -> Iterator[FieldConfig]:
    """Walk a field tree depth-first, yielding groups before their children."""
    for field_config in field_list:
        yield field_config
        if field_config.is_group:
            yield from iter_fields(field_config.sub_fields)


def find_field(field_list: List[FieldConfig], field_id: str) -> Optional[FieldConfig]:
    """Find a field anywhere in the tree. The last match wins, like the store."""
    found = None
    for field_config in iter_fields(field_list):
        if field_config.id == field_id:
            found = field_config
    return found


def _parse_field_list(
    raw_fields: List[Any],
    path: str,
    warnings: List[SchemaWarning],
) -> List[FieldConfig]:
    fields: List[FieldConfig] = []
    for index, raw in enumerate(raw_fields):
        field_path = f"{path}[{index}]"
        parsed = _parse_field(raw, field_path, warnings)
        if parsed is not None:
            fields.append(parsed)
    return fields


def _parse_field(
    raw: Any,
    path: str,
    warnings: List[SchemaWarning],
) -> Optional[FieldConfig]:
    if not isinstance(raw, dict):
        warnings.append(SchemaWarning(None, path, "Field definition must be an object"))
        return None

    raw_id = raw.get("id") if isinstance(raw.get("id"), str) else None
    own_keys = {k: v for k, v in raw.items() if k != "sub_fields"}

    try:
        field_config = FieldConfig.model_validate(own_keys)
    except ValidationError as e:
        warnings.append(SchemaWarning(raw_id, path, f"Invalid field definition: {_summarize(e)}"))
        return None

    if field_config.is_group:
        raw_children = raw.get("sub_fields") or []
        if not isinstance(raw_children, list):
            warnings.append(
                SchemaWarning(field_config.id, path, "Group 'sub_fields' must be a list")
            )
            raw_children = []
        field_config.sub_fields = _parse_field_list(raw_children, f"{path}.sub_fields", warnings)
        return field_config

    _check_component(field_config, path, warnings)
    return field_config


def _check_component(
    field_config: FieldConfig,
    path: str,
    warnings: List[SchemaWarning],
) -> None:
    """Record configuration errors that make a field render as absent."""
    if not field_config.component_type:
        warnings.append(SchemaWarning(field_config.id, path, "Missing component_type"))
        return

    if field_config.kind is None:
        warnings.append(
            SchemaWarning(
                field_config.id,
                path,
                f"Unknown component type: {field_config.component_type}",
            )
        )
        return

    if field_config.kind == ComponentType.DATA_TABLE and field_config.table_config is None:
        warnings.append(
            SchemaWarning(field_config.id, path, "Missing table_config for data table field")
        )


def _check_duplicate_ids(field_list: List[FieldConfig], warnings: List[SchemaWarning]) -> None:
    seen = set()
    for field_config in iter_fields(field_list):
        if field_config.id in seen:
            warnings.append(
                SchemaWarning(field_config.id, "field_list", "Duplicate field id; last one wins")
            )
        seen.add(field_config.id)


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
    return "; ".join(parts)
