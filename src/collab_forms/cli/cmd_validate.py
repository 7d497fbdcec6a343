"""Validate command: run field and cell validation over form data."""

from pathlib import Path
from typing import Optional

import typer

from collab_forms.cli._app import app
from collab_forms.cli._common import build_form, ensure_initialized, setup_logging
from collab_forms.cli._console import console, output_result, print_err, print_ok
from collab_forms.config import SettingsError
from collab_forms.runtime.schema_loader import SchemaLoadError


@app.command("validate", help="Validate form data against a form set. Exits 1 on errors.")
def validate_cmd(
    ctx: typer.Context,
    schema: Path = typer.Argument(..., help="Path to the form set JSON"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Form data JSON to validate"),
):
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"], config_path=ctx.obj["config"])

    try:
        form = build_form(schema, data, ctx.obj["config"])
    except (SchemaLoadError, SettingsError) as e:
        print_err(str(e))
        raise SystemExit(1)

    report = form.validate()

    if ctx.obj["json"]:
        output_result(report.to_dict(), ctx=ctx)
    elif report.is_valid:
        print_ok("Form data is valid")
    else:
        for field_id, message in report.field_errors.items():
            print_err(f"{field_id}: {message}")
        for table_id, rows in report.cell_errors.items():
            for row_id, columns in rows.items():
                for column_id, message in columns.items():
                    print_err(f"{table_id}[{row_id}].{column_id}: {message}")
        console.print(f"\n[bold]{len(report.field_errors)}[/bold] field errors, "
                      f"[bold]{sum(len(c) for r in report.cell_errors.values() for c in r.values())}[/bold] cell errors")

    if not report.is_valid:
        raise SystemExit(1)
