"""CLI tests for the Typer application."""

import json

import pytest
from typer.testing import CliRunner

from collab_forms.cli import app


@pytest.fixture
def runner():
    return CliRunner()


def _json(result):
    return json.loads(result.stdout)


class TestCheck:
    """Tests for the check command."""

    def test_clean_schema_json(self, runner, schema_path):
        """A clean form set reports counts and no warnings."""
        result = runner.invoke(app, ["--json", "-q", "check", str(schema_path)])
        assert result.exit_code == 0, result.output
        summary = _json(result)
        assert summary["group_name"] == "Expense Claim"
        assert summary["field_count"] == 9
        assert summary["group_count"] == 1
        assert summary["table_count"] == 1
        assert summary["warnings"] == []

    def test_warnings_listed(self, runner, broken_schema_path):
        """Broken fields are listed but do not fail the command."""
        result = runner.invoke(app, ["check", str(broken_schema_path)])
        assert result.exit_code == 0
        assert "signature_pad" in result.output

    def test_strict_fails_on_warnings(self, runner, broken_schema_path):
        """--strict turns warnings into a failing exit code."""
        result = runner.invoke(app, ["-q", "check", "--strict", str(broken_schema_path)])
        assert result.exit_code == 1

    def test_missing_file(self, runner, tmp_path):
        """A missing form set exits with status 1."""
        result = runner.invoke(app, ["check", str(tmp_path / "absent.json")])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestState:
    """Tests for the state command."""

    def test_json_state(self, runner, schema_path, data_path):
        """The render state tree is emitted as JSON."""
        result = runner.invoke(app, ["--json", "-q", "state", str(schema_path), "--data", str(data_path)])
        assert result.exit_code == 0, result.output
        fields = _json(result)["fields"]
        ids = [f["id"] for f in fields]
        assert ids == ["claimant_name", "email", "has_expenses", "expense_details", "travel_mode"]
        group = fields[3]
        assert [c["id"] for c in group["children"]] == ["period", "currency", "expenses"]
        assert group["children"][2]["table"]["aggregations"] == {"amount": 192.5, "rating": 4}

    def test_table_output(self, runner, schema_path):
        """Without --json the state prints as a table."""
        result = runner.invoke(app, ["state", str(schema_path)])
        assert result.exit_code == 0, result.output

    def test_data_must_be_object(self, runner, schema_path, tmp_path):
        """Initial data must be a JSON object."""
        data = tmp_path / "data.json"
        data.write_text("[1, 2]")
        result = runner.invoke(app, ["state", str(schema_path), "--data", str(data)])
        assert result.exit_code == 1

    def test_invalid_settings(self, runner, schema_path, tmp_path):
        """An invalid settings file in the working directory is reported."""
        (tmp_path / "collab_forms.yaml").write_text("chat_poll_interval_seconds: -1\n")
        result = runner.invoke(app, ["state", str(schema_path)])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output


class TestValidate:
    """Tests for the validate command."""

    def test_errors_exit_one(self, runner, schema_path, data_path):
        """Cell errors are reported and the exit code is 1."""
        result = runner.invoke(app, ["--json", "-q", "validate", str(schema_path), "--data", str(data_path)])
        assert result.exit_code == 1
        report = _json(result)
        assert report["is_valid"] is False
        assert report["cell_errors"] == {"expenses": {"row_2_bbbbbbb": {"amount": "Maximum: 100"}}}

    def test_required_field(self, runner, schema_path):
        """Empty required fields are listed."""
        result = runner.invoke(app, ["validate", str(schema_path)])
        assert result.exit_code == 1
        assert "claimant_name: Required" in result.output

    def test_valid_data(self, runner, schema_path, tmp_path):
        """Valid data exits 0."""
        data = tmp_path / "data.json"
        data.write_text(json.dumps({"claimant_name": "Ada"}))
        result = runner.invoke(app, ["validate", str(schema_path), "--data", str(data)])
        assert result.exit_code == 0, result.output
        assert "valid" in result.output


class TestAggregate:
    """Tests for the aggregate command."""

    def test_json(self, runner, schema_path, data_path):
        """Aggregations of one table are emitted as JSON."""
        result = runner.invoke(
            app, ["--json", "-q", "aggregate", str(schema_path), "expenses", "--data", str(data_path)]
        )
        assert result.exit_code == 0, result.output
        assert _json(result) == {
            "field_id": "expenses",
            "row_count": 2,
            "aggregations": {"amount": 192.5, "rating": 4},
        }

    def test_unknown_table(self, runner, schema_path):
        """Asking for a field that is not a table fails."""
        result = runner.invoke(app, ["aggregate", str(schema_path), "claimant_name"])
        assert result.exit_code == 1
        assert "No data table" in result.output


class TestGlobalOptions:
    """Tests for options on the root command."""

    def test_version(self, runner):
        """--version prints the package version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.stdout.startswith("collab-forms ")

    def test_config_option(self, runner, schema_path, tmp_path):
        """--config selects the settings file used to build the form."""
        config = tmp_path / "settings.yaml"
        config.write_text("empty_table_message: Nothing yet\n")
        data = tmp_path / "data.json"
        data.write_text(json.dumps({"has_expenses": True}))
        result = runner.invoke(
            app, ["--json", "-q", "--config", str(config), "state", str(schema_path), "--data", str(data)]
        )
        assert result.exit_code == 0, result.output
        group = _json(result)["fields"][3]
        assert group["children"][2]["table"]["empty_message"] == "Nothing yet"

    def test_missing_config(self, runner, schema_path, tmp_path):
        """A --config path that does not exist is an error."""
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "state", str(schema_path)])
        assert result.exit_code == 1
