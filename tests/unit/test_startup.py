"""Unit tests for process initialization."""

import os

import pytest

from collab_forms import startup


@pytest.fixture
def fresh_startup(monkeypatch):
    """Forget any earlier initialization."""
    monkeypatch.setattr(startup, "_initialized", False)
    monkeypatch.setattr(startup, "_project_root", None)


class TestEnsureInitialized:
    """Tests for ensure_initialized."""

    def test_loads_env_from_project_root(self, tmp_path, fresh_startup):
        """The .env next to pyproject.toml is loaded once."""
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")
        (tmp_path / ".env").write_text("COLLAB_FORMS_STARTUP_MARKER=loaded\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        try:
            root = startup.ensure_initialized(nested)
            assert root == tmp_path.resolve()
            assert os.environ["COLLAB_FORMS_STARTUP_MARKER"] == "loaded"
            assert startup.ensure_initialized(tmp_path / "elsewhere") == root
        finally:
            os.environ.pop("COLLAB_FORMS_STARTUP_MARKER", None)

    def test_without_project_root(self, tmp_path, fresh_startup):
        """Without pyproject.toml the start directory is the root."""
        assert startup.ensure_initialized(tmp_path) == tmp_path.resolve()
