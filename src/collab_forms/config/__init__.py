"""Engine configuration management."""

from collab_forms.config.settings import (
    EngineSettings,
    SettingsError,
    get_settings,
    load_settings,
    reset_settings_cache,
)

__all__ = [
    "EngineSettings",
    "SettingsError",
    "get_settings",
    "load_settings",
    "reset_settings_cache",
]
