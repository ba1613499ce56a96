from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..messages import DisplayMessage
from ..tools.shell import start_detached
from .display import panel_file, panel_message, status_line
from .state import console as shared_console

logger = logging.getLogger(__name__)


class ConsoleWorkbench:
    """Workbench backed by the terminal: panels for messages, dim lines for status."""

    def __init__(
        self,
        project_dir: Path,
        *,
        active_file: Optional[Path] = None,
        console: Optional[Console] = None,
        show_status: bool = True,
    ):
        self.project_dir = project_dir
        self._active_file = active_file
        self.console = console or shared_console
        self.show_status = show_status
        self.history: List[DisplayMessage] = []

    def emit(self, message: DisplayMessage) -> None:
        self.history.append(message)
        self.console.print(panel_message(message))

    def notify(self, text: str) -> None:
        if self.show_status:
            self.console.print(status_line(text))

    def active_file(self) -> Optional[Path]:
        if self._active_file is None:
            return None
        path = self._active_file
        return path if path.is_absolute() else self.project_dir / path

    def open_file(self, path: Path) -> None:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not open %s: %s", path, e)
            self.console.print(status_line(f"Could not open {path}: {e}"))
            return
        self.console.print(panel_file(path, content, self.project_dir))

    def run_in_terminal(self, title: str, command: str, cwd: Path) -> None:
        self.console.print(status_line(f"[{title}] $ {command}"))
        start_detached(command, cwd)


__all__ = ["ConsoleWorkbench"]
