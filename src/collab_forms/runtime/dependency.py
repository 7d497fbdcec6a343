"""Dependency resolver: decides which fields are currently visible.

A dependency is written "field_id:expected_value". The field is visible when
the String() rendering of the referenced value equals expected_value.
Malformed expressions fail open (visible).
"""

import logging
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from collab_forms.schemas.fields_set import FieldConfig
from collab_forms.utils.coercion import MISSING, js_string

logger = logging.getLogger(__name__)


class Dependency(NamedTuple):
    """Parsed dependency expression."""

    field_id: str
    value: str


def parse_dependency(dependency: str) -> Optional[Dependency]:
    """Parse "field_id:value". Returns None unless there is exactly one colon."""
    parts = dependency.split(":")
    if len(parts) != 2:
        return None
    return Dependency(field_id=parts[0].strip(), value=parts[1].strip())


def check_dependency(dependency: Optional[str], form_data: Mapping[str, Any]) -> bool:
    """Evaluate a dependency expression against a form data snapshot."""
    if not dependency:
        return True

    parsed = parse_dependency(dependency)
    if parsed is None:
        logger.debug(f"Malformed dependency '{dependency}', treating field as visible")
        return True

    current = form_data.get(parsed.field_id, MISSING)
    return js_string(current) == parsed.value


def is_visible(field: FieldConfig, form_data: Mapping[str, Any]) -> bool:
    """Whether a field's own dependency is satisfied."""
    return check_dependency(field.dependency, form_data)


def visibility_map(field_list: List[FieldConfig], form_data: Mapping[str, Any]) -> Dict[str, bool]:
    """Evaluate every node's own dependency, ignoring ancestors."""
    result: Dict[str, bool] = {}

    def process(fields: List[FieldConfig]) -> None:
        for field in fields:
            result[field.id] = is_visible(field, form_data)
            if field.is_group:
                process(field.sub_fields)

    process(field_list)
    return result


def visible_fields(field_list: List[FieldConfig], form_data: Mapping[str, Any]) -> List[FieldConfig]:
    """Fields that render, gated top-down: children of hidden groups are skipped.

    Returned in depth-first order, groups before their children.
    """
    result: List[FieldConfig] = []

    def process(fields: List[FieldConfig]) -> None:
        for field in fields:
            if not is_visible(field, form_data):
                continue
            result.append(field)
            if field.is_group:
                process(field.sub_fields)

    process(field_list)
    return result
