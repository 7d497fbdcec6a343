"""Rich consoles for status messages and pipeable results."""

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

# Status goes to stderr so `--json` output stays clean on stdout
console = Console(stderr=True)

# Resolves sys.stdout at write time
stdout_console = Console()


def print_ok(msg: str) -> None:
    console.print(f"[green]✓[/green] {escape(msg)}")


def print_err(msg: str) -> None:
    console.print(f"[red]✗[/red] {escape(msg)}")


def print_warn(msg: str) -> None:
    console.print(f"[yellow]![/yellow] {escape(msg)}")


def output_result(data: dict, *, ctx: typer.Context, title: str = "") -> None:
    """Print a result as JSON on stdout, or as a panel on stderr."""
    if ctx.obj.get("json"):
        stdout_console.print_json(data=data, default=str)
        return

    formatted = escape(json.dumps(data, indent=2, ensure_ascii=False, default=str))
    if title:
        console.print(Panel(formatted, title=title, border_style="blue"))
    else:
        console.print(formatted)


def output_table(rows: list[dict], *, ctx: typer.Context, title: str = "", columns: list[str] | None = None) -> None:
    """Print rows as a JSON array or a Rich table."""
    if ctx.obj.get("json"):
        stdout_console.print_json(data=rows, default=str)
        return

    if not rows:
        console.print("[dim]Nothing to show[/dim]")
        return

    names = columns or list(rows[0].keys())
    table = Table(title=title or None)
    for name in names:
        table.add_column(name)
    for row in rows:
        table.add_row(*["" if row.get(name) is None else escape(str(row.get(name))) for name in names])
    console.print(table)
