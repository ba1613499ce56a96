from __future__ import annotations

from pathlib import Path

import typer

from .commands.chat import chat
from .commands.system import doctor
from ..cli_components.app import app


# Typer command registration -------------------------------------------------
app.command(
    help="Open the command panel. Pass a command (e.g. /summary app.js) with --inline to run it once and exit."
)(chat)
app.command(help="Check configuration and the local tools DevForge shells out to.")(doctor)


@app.callback(invoke_without_command=True)
def _default_entry(ctx: typer.Context):
    """Open the command panel when no explicit subcommand is provided."""
    if ctx.invoked_subcommand:
        return
    chat(
        message=None,
        project_dir=Path.cwd(),
        active_file=None,
        endpoint=None,
        test_cmd=None,
        inline=False,
        verbose=False,
    )


def main() -> None:
    app()


__all__ = ["app", "main"]
