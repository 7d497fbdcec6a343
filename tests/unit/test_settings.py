"""Unit tests for engine settings."""

import pytest

from collab_forms.config.settings import (
    CONFIG_ENV_VAR,
    EngineSettings,
    SettingsError,
    get_settings,
    load_settings,
    resolve_settings_path,
)
from collab_forms.schemas.data_table import DEFAULT_EMPTY_MESSAGE


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_without_file(self):
        """No settings file means built-in defaults."""
        settings = load_settings()
        assert settings == EngineSettings()
        assert settings.chat_poll_interval_seconds == 5.0
        assert settings.enable_notes is False
        assert settings.empty_table_message == DEFAULT_EMPTY_MESSAGE

    def test_explicit_file(self, tmp_path):
        """Values are read from YAML and log_level is normalized."""
        path = tmp_path / "custom.yaml"
        path.write_text("chat_poll_interval_seconds: 2\nenable_notes: true\nlog_level: debug\n")
        settings = load_settings(path)
        assert settings.chat_poll_interval_seconds == 2
        assert settings.enable_notes is True
        assert settings.log_level == "DEBUG"

    def test_env_var_then_cwd(self, tmp_path, monkeypatch):
        """The env var wins over collab_forms.yaml in the working directory."""
        (tmp_path / "collab_forms.yaml").write_text("enable_notes: true\n")
        assert resolve_settings_path().resolve() == (tmp_path / "collab_forms.yaml").resolve()

        other = tmp_path / "other.yaml"
        other.write_text("empty_table_message: Nothing yet\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        assert load_settings().empty_table_message == "Nothing yet"

    def test_empty_file_uses_defaults(self, tmp_path):
        """An empty YAML file is treated as defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == EngineSettings()

    @pytest.mark.parametrize("content,message", [
        ("chat_poll_interval_seconds: 0\n", "Invalid settings"),
        ("log_level: LOUD\n", "Invalid settings"),
        ("key: [unclosed\n", "Invalid YAML"),
        ("- just\n- a list\n", "must contain a mapping"),
    ])
    def test_invalid_files(self, tmp_path, content, message):
        """Unusable settings files raise SettingsError."""
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        with pytest.raises(SettingsError, match=message):
            load_settings(path)

    def test_missing_explicit_file(self, tmp_path):
        """A named but missing file is an error."""
        with pytest.raises(SettingsError, match="not found"):
            load_settings(tmp_path / "nope.yaml")


class TestGetSettings:
    """Tests for the cached accessor."""

    def test_cached_until_reload(self, tmp_path):
        """get_settings caches until force_reload."""
        first = get_settings()
        (tmp_path / "collab_forms.yaml").write_text("enable_notes: true\n")
        assert get_settings() is first
        assert get_settings(force_reload=True).enable_notes is True
