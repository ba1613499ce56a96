from __future__ import annotations

import logging

import typer
from click.exceptions import UsageError
from rich.logging import RichHandler
from typer.core import TyperGroup

from .constants import APP_HELP
from .state import console


class _DefaultToChatGroup(TyperGroup):
    """Route unknown subcommands to `chat --inline ...` so `devforge /summary app.js` works."""

    def resolve_command(self, ctx, args):
        if args and not args[0].startswith("-"):
            try:
                return super().resolve_command(ctx, args)
            except UsageError:
                chat_cmd = self.get_command(ctx, "chat")
                if chat_cmd is None:
                    raise
                if "--inline" not in args:
                    args = ["--inline", *args]
                return chat_cmd.name, chat_cmd, args
        return super().resolve_command(ctx, args)


for _name in ("httpx", "httpcore", "asyncio"):
    _log = logging.getLogger(_name)
    _log.setLevel(logging.CRITICAL)
    _log.propagate = False


def configure_logging(verbose: bool = False) -> None:
    """Send package logs through Rich on the shared console."""
    root = logging.getLogger("devforge")
    root.handlers.clear()
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=verbose, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


app = typer.Typer(
    cls=_DefaultToChatGroup,
    add_completion=False,
    help=APP_HELP.strip(),
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
