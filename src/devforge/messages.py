"""Messages and the UI boundary every pipeline talks to."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol


@dataclass(frozen=True)
class DisplayMessage:
    """Markdown text shown to the user. The only pipeline output that reaches the UI."""

    text: str
    level: str = "info"  # info | success | error

    @classmethod
    def info(cls, text: str) -> "DisplayMessage":
        return cls(text, "info")

    @classmethod
    def success(cls, text: str) -> "DisplayMessage":
        return cls(text, "success")

    @classmethod
    def error(cls, text: str) -> "DisplayMessage":
        return cls(text, "error")


class Workbench(Protocol):
    """Host surface (chat panel, editor, terminal) the pipelines report to."""

    def emit(self, message: DisplayMessage) -> None:
        """Append a message to the chat panel."""

    def notify(self, text: str) -> None:
        """Show a transient status line. Not part of the chat history."""

    def active_file(self) -> Optional[Path]:
        """File currently in focus, if the host has one."""

    def open_file(self, path: Path) -> None:
        """Show a file to the user for inspection."""

    def run_in_terminal(self, title: str, command: str, cwd: Path) -> None:
        """Start `command` in a visible terminal and return without waiting."""


__all__ = ["DisplayMessage", "Workbench"]
