"""Typer application and the options shared by every command."""

from pathlib import Path
from typing import Optional

import typer

from collab_forms import __version__

app = typer.Typer(
    name="collab-forms",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"collab-forms {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug-level logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Warnings and errors only"),
    json_output: bool = typer.Option(False, "--json", help="Write results to stdout as JSON"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Settings YAML; overrides $COLLAB_FORMS_CONFIG"
    ),
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show the version and exit"
    ),
):
    """Inspect schema-driven forms from the command line."""
    ctx.ensure_object(dict)
    ctx.obj.update(verbose=verbose, quiet=quiet, json=json_output, config=config)
