"""CLI package: Typer-based command-line interface.

Usage:
    collab-forms --help
    python -m collab_forms.cli check path/to/form.json
"""

from collab_forms.cli._app import app

# Register command modules (side-effect imports)
import collab_forms.cli.cmd_check  # noqa: F401
import collab_forms.cli.cmd_state  # noqa: F401
import collab_forms.cli.cmd_validate  # noqa: F401
import collab_forms.cli.cmd_aggregate  # noqa: F401

__all__ = ["app"]
