"""Shared helpers for CLI commands."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from rich.logging import RichHandler

from collab_forms.cli._console import console
from collab_forms.config import EngineSettings, SettingsError, get_settings, load_settings
from collab_forms.runtime.form_set import FormSet
from collab_forms.runtime.schema_loader import SchemaLoadError
from collab_forms.startup import ensure_initialized as _ensure_initialized


logger = logging.getLogger(__name__)


def ensure_initialized() -> None:
    """Load .env from the project root."""
    _ensure_initialized()


def resolve_settings(config_path: Optional[Path] = None) -> EngineSettings:
    """Settings from --config when given, else the cached lookup.

    Raises:
        SettingsError: If the settings file is missing or invalid
    """
    if config_path is not None:
        return load_settings(config_path)
    return get_settings()


def setup_logging(*, verbose: bool = False, quiet: bool = False, config_path: Optional[Path] = None) -> None:
    """Configure logging with Rich handler.

    Without -v/-q the level comes from the settings file (INFO by default).
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        try:
            level = getattr(logging, resolve_settings(config_path).log_level)
        except SettingsError:
            level = logging.INFO

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def read_json_data(path: Optional[Path]) -> Optional[Dict[str, Any]]:
    """Read an initial-data JSON object, or None when no path is given.

    Raises:
        SchemaLoadError: If the file is missing, invalid, or not an object
    """
    if path is None:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SchemaLoadError(f"Data file not found: {path}")
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Invalid JSON in data file: {e}")

    if not isinstance(data, dict):
        raise SchemaLoadError("Data file must contain a JSON object")
    return data


def build_form(schema_path: Path, data_path: Optional[Path] = None, config_path: Optional[Path] = None) -> FormSet:
    """Load a form set and its initial data using the engine settings.

    Raises:
        SchemaLoadError: If the schema or data file cannot be loaded
        SettingsError: If the settings file is invalid
    """
    settings = resolve_settings(config_path)
    initial_data = read_json_data(data_path)
    logger.debug(f"Building form from {schema_path} (initial data: {data_path or 'none'})")
    return FormSet.from_file(
        schema_path,
        initial_data,
        enable_notes=settings.enable_notes,
        empty_table_message=settings.empty_table_message,
    )
