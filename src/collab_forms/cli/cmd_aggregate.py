"""Aggregate command: compute a table's column aggregations."""

from pathlib import Path
from typing import Optional

import typer

from collab_forms.cli._app import app
from collab_forms.cli._common import build_form, ensure_initialized, setup_logging
from collab_forms.cli._console import output_result, output_table, print_err
from collab_forms.config import SettingsError
from collab_forms.runtime.aggregation import format_aggregation
from collab_forms.runtime.form_set import UnknownFieldError
from collab_forms.runtime.schema_loader import SchemaLoadError


@app.command("aggregate", help="Compute the aggregation row of a data table.")
def aggregate_cmd(
    ctx: typer.Context,
    schema: Path = typer.Argument(..., help="Path to the form set JSON"),
    field_id: str = typer.Argument(..., help="Id of the data table field"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Form data JSON holding the rows"),
):
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"], config_path=ctx.obj["config"])

    try:
        form = build_form(schema, data, ctx.obj["config"])
    except (SchemaLoadError, SettingsError) as e:
        print_err(str(e))
        raise SystemExit(1)

    try:
        table = form.table(field_id)
    except UnknownFieldError:
        print_err(f"No data table with id '{field_id}'")
        raise SystemExit(1)

    aggregations = table.get_aggregations()
    if ctx.obj["json"]:
        output_result({"field_id": field_id, "row_count": table.row_count, "aggregations": aggregations}, ctx=ctx)
        return

    rows = []
    for column_id, value in aggregations.items():
        column = table.config.get_column(column_id)
        rows.append({
            "column": column.label or column_id,
            "type": column.aggregation.type.value,
            "label": column.aggregation_label,
            "value": format_aggregation(column, value),
        })
    output_table(rows, ctx=ctx, title=f"{field_id} ({table.row_count} rows)")
