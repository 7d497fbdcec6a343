"""Engine settings schema and loader.

Settings are read from a YAML file. Lookup order:
1. An explicit path passed to load_settings()
2. The COLLAB_FORMS_CONFIG environment variable
3. collab_forms.yaml in the current working directory
4. Built-in defaults
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from collab_forms.schemas.data_table import DEFAULT_EMPTY_MESSAGE

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "COLLAB_FORMS_CONFIG"
DEFAULT_CONFIG_FILENAME = "collab_forms.yaml"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SettingsError(Exception):
    """Raised when a settings file exists but cannot be used."""
    pass


class EngineSettings(BaseModel):
    """Engine-wide settings.

    Attributes:
        chat_poll_interval_seconds: Period of the unread-chat poller.
        enable_notes: Default for fields that do not set enable_notes.
        empty_table_message: Message for tables whose config sets none.
        log_level: Root log level used by the CLI when neither -v nor -q is given.
    """

    chat_poll_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Seconds between unread-chat polls",
    )
    enable_notes: bool = Field(
        default=False,
        description="Form-level default for field notes",
    )
    empty_table_message: str = Field(
        default=DEFAULT_EMPTY_MESSAGE,
        description="Placeholder shown for tables without rows",
    )
    log_level: str = Field(
        default="INFO",
        description="Default log level name",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a standard logging level name."""
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'. Valid levels: {sorted(VALID_LOG_LEVELS)}")
        return level


def resolve_settings_path(config_path: Optional[Path] = None) -> Optional[Path]:
    """Find the settings file to use, or None to use defaults."""
    if config_path is not None:
        return Path(config_path)

    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    local = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if local.exists():
        return local
    return None


def load_settings(config_path: Optional[Path] = None) -> EngineSettings:
    """Load engine settings from YAML.

    Args:
        config_path: Optional explicit path to the settings file.

    Returns:
        EngineSettings; defaults when no settings file is found.

    Raises:
        SettingsError: If the file is explicitly named but missing, or
            contains invalid YAML or invalid values.
    """
    path = resolve_settings_path(config_path)
    if path is None:
        logger.debug("No settings file found, using defaults")
        return EngineSettings()

    if not path.exists():
        raise SettingsError(f"Settings file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in settings file {path}: {e}")

    if data is None:
        logger.warning(f"Empty settings file at {path}, using defaults")
        return EngineSettings()

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping")

    try:
        settings = EngineSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {path}: {e}")

    logger.debug(f"Loaded settings from {path}")
    return settings


# Cached settings (loaded once per process)
_cached_settings: Optional[EngineSettings] = None


def get_settings(force_reload: bool = False) -> EngineSettings:
    """Get the current engine settings (cached).

    Args:
        force_reload: If True, reload from disk even if cached.
    """
    global _cached_settings

    if force_reload or _cached_settings is None:
        _cached_settings = load_settings()

    return _cached_settings


def reset_settings_cache() -> None:
    global _cached_settings
    _cached_settings = None
