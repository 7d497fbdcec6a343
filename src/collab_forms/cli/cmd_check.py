"""Check command: load a form set and report configuration problems."""

from pathlib import Path

import typer

from collab_forms.cli._app import app
from collab_forms.cli._common import ensure_initialized, setup_logging
from collab_forms.cli._console import console, output_result, print_err, print_ok, print_warn
from collab_forms.runtime.schema_loader import SchemaLoadError, iter_fields, load_fields_set
from collab_forms.schemas.fields_set import ComponentType


@app.command("check", help="Load a form set and list the fields it dropped or flagged.")
def check_cmd(
    ctx: typer.Context,
    schema: Path = typer.Argument(..., help="Path to the form set JSON"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 when there are warnings"),
):
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"], config_path=ctx.obj["config"])

    try:
        loaded = load_fields_set(schema)
    except SchemaLoadError as e:
        print_err(str(e))
        raise SystemExit(1)

    fields = list(iter_fields(loaded.fields_set.field_list))
    summary = {
        "group_name": loaded.fields_set.group_name,
        "field_count": len(fields),
        "group_count": sum(1 for f in fields if f.is_group),
        "table_count": sum(1 for f in fields if f.kind == ComponentType.DATA_TABLE),
        "warnings": [
            {"field_id": w.field_id, "path": w.path, "message": w.message}
            for w in loaded.warnings
        ],
    }

    if ctx.obj["json"]:
        output_result(summary, ctx=ctx)
    elif not ctx.obj["quiet"]:
        print_ok(f"{schema.name}: {summary['field_count']} fields, {summary['table_count']} tables")
        for warning in loaded.warnings:
            print_warn(f"{warning.path}: {warning.message}")
        if not loaded.warnings:
            console.print("  [dim]No warnings[/dim]")

    if strict and loaded.warnings:
        raise SystemExit(1)
