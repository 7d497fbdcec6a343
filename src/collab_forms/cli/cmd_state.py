"""State command: print the logical render state of a form."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from collab_forms.cli._app import app
from collab_forms.cli._common import build_form, ensure_initialized, setup_logging
from collab_forms.cli._console import output_result, output_table, print_err
from collab_forms.config import SettingsError
from collab_forms.runtime.form_set import FieldState
from collab_forms.runtime.schema_loader import SchemaLoadError


def _flatten(states: List[FieldState], depth: int = 0) -> List[Dict[str, Any]]:
    rows = []
    for state in states:
        rows.append({
            "field": "  " * depth + state.id,
            "type": state.component_type or state.field_type,
            "value": state.display_value if state.table is None else f"{state.table.row_count} rows",
            "required": "yes" if state.required else "",
            "error": state.error,
        })
        rows.extend(_flatten(state.children, depth + 1))
    return rows


@app.command("state", help="Show which fields render and their current values.")
def state_cmd(
    ctx: typer.Context,
    schema: Path = typer.Argument(..., help="Path to the form set JSON"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Initial form data JSON"),
):
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"], config_path=ctx.obj["config"])

    try:
        form = build_form(schema, data, ctx.obj["config"])
    except (SchemaLoadError, SettingsError) as e:
        print_err(str(e))
        raise SystemExit(1)

    states = form.render_state()
    if ctx.obj["json"]:
        output_result({"fields": [s.to_dict() for s in states]}, ctx=ctx)
        return

    output_table(_flatten(states), ctx=ctx, title=form.fields_set.group_name or str(schema.name))
