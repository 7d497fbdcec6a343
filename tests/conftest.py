"""
Pytest fixtures shared by the collab_forms test suite.
Provides sample form sets, form data and isolated engine settings.
"""

import json
from pathlib import Path

import pytest

from collab_forms.config.settings import CONFIG_ENV_VAR, reset_settings_cache
from collab_forms.schemas.fields_set import FieldConfig


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run every test without a settings file from the environment or cwd."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def schema_path():
    """Path to the expense claim form set."""
    return FIXTURES_DIR / "expense_claim.json"


@pytest.fixture
def data_path():
    """Path to form data for the expense claim form set."""
    return FIXTURES_DIR / "expense_data.json"


@pytest.fixture
def broken_schema_path():
    """Path to a form set with one valid field and several broken ones."""
    return FIXTURES_DIR / "broken_fields.json"


@pytest.fixture
def form_set_dict(schema_path):
    """Decoded expense claim form set."""
    with open(schema_path, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def form_data(data_path):
    """Decoded expense claim form data."""
    with open(data_path, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def make_table_field():
    """Factory for data table fields from a list of column dicts."""

    def _make(columns, field_id="items", **table_options):
        return FieldConfig.model_validate({
            "id": field_id,
            "label": "Items",
            "component_type": "data_table",
            "table_config": {"columns": columns, **table_options},
        })

    return _make
