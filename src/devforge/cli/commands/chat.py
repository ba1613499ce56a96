from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import List, Optional

import typer

from ...cli_components.app import configure_logging
from ...cli_components.display import print_session_header, status_line
from ...cli_components.env import bootstrap_env
from ...cli_components.state import console
from ...cli_components.workbench import ConsoleWorkbench
from ...cli_components.constants import PROMPT, WELCOME_TEXT
from ...config import Settings, load_settings
from ...messages import DisplayMessage
from ...router import CommandRouter
from ..constants_runtime import CHAT_SESSION_TITLE, CLEAR_WORDS, EXIT_WORDS


class _PromptReader:
    """
    Reads prompt lines on a daemon thread so the event loop keeps running
    pipelines while the user types. A line is only requested when `readline`
    is awaited, so the prompt is not redrawn under running output.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, prompt: str):
        self._loop = loop
        self._prompt = prompt
        self._queue: asyncio.Queue = asyncio.Queue()
        self._wanted = threading.Event()
        threading.Thread(target=self._run, name="devforge-prompt", daemon=True).start()

    def _run(self) -> None:
        while True:
            self._wanted.wait()
            self._wanted.clear()
            try:
                line: Optional[str] = console.input(self._prompt)
            except EOFError:
                line = None
            try:
                self._loop.call_soon_threadsafe(self._queue.put_nowait, line)
            except RuntimeError:
                return
            if line is None:
                return

    async def readline(self) -> Optional[str]:
        self._wanted.set()
        return await self._queue.get()


def _header(project_dir: Path, settings: Settings, active_file: Optional[Path]) -> None:
    print_session_header(
        CHAT_SESSION_TITLE,
        project_dir,
        endpoint_url=settings.endpoint_url,
        test_cmd=settings.test_command,
        active_file=active_file,
        interactive=True,
    )


async def run_once(
    raw: str,
    project_dir: Path,
    settings: Settings,
    active_file: Optional[Path] = None,
) -> List[DisplayMessage]:
    """Dispatch one command, wait for its pipeline and return what it displayed."""
    workbench = ConsoleWorkbench(project_dir, active_file=active_file)
    router = CommandRouter(project_dir, workbench, settings)
    task = router.dispatch(raw)
    if task is not None:
        await task
    return workbench.history


async def _session(
    project_dir: Path,
    settings: Settings,
    active_file: Optional[Path],
    input_queue: List[str],
) -> str:
    workbench = ConsoleWorkbench(project_dir, active_file=active_file)
    router = CommandRouter(project_dir, workbench, settings)
    reader = _PromptReader(asyncio.get_running_loop(), PROMPT)

    _header(project_dir, settings, active_file)
    workbench.emit(DisplayMessage.info(WELCOME_TEXT))

    try:
        while True:
            if input_queue:
                user = input_queue.pop(0)
            else:
                line = await reader.readline()
                if line is None:
                    return "quit"
                user = line.strip()
            if not user:
                continue

            low = user.lower()
            if low in CLEAR_WORDS:
                _header(project_dir, settings, active_file)
                continue
            if low in EXIT_WORDS:
                return "quit"

            router.dispatch(user)
            # let the pipeline reach its first suspension point before prompting again
            await asyncio.sleep(0)
    finally:
        if router.in_flight:
            console.print(status_line(f"Cancelling {router.in_flight} running command(s)..."))
            await router.cancel_all()


def chat(
    message: Optional[List[str]] = typer.Argument(None, help="Optional command to run first (quotes not required)."),
    project_dir: Path = typer.Option(Path.cwd(), "--project-dir", exists=True, file_okay=False),
    active_file: Optional[Path] = typer.Option(
        None, "--active-file", help="File used by /summary and /test when no path is given."
    ),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", help="Analysis endpoint URL (overrides DEVFORGE_ENDPOINT_URL)."),
    test_cmd: Optional[str] = typer.Option(None, "--test-cmd", help='Test runner used by /test (e.g. "npm test").'),
    inline: bool = typer.Option(False, "--inline", help="Run the given command once, print its result and exit."),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logs."),
) -> Optional[str]:
    """
    Command panel shared between the bare `devforge` entry and `devforge chat`.

    Returns:
      - "quit": the user left the session
      - None: an inline command ran to completion
    """
    configure_logging(verbose)
    project_dir = project_dir.resolve()
    bootstrap_env(project_dir)
    settings = load_settings().with_overrides(endpoint_url=endpoint, test_command=test_cmd)

    first = " ".join(message or []).strip()

    if inline and first:
        try:
            history = asyncio.run(run_once(first, project_dir, settings, active_file))
        except KeyboardInterrupt:
            raise typer.Exit(130)
        if history and history[-1].level == "error":
            raise typer.Exit(1)
        return None

    queue = [first] if first else []
    try:
        return asyncio.run(_session(project_dir, settings, active_file, queue))
    except KeyboardInterrupt:
        return "quit"


__all__ = ["chat", "run_once"]
