from __future__ import annotations

import platform
import shlex
import shutil
import sys
from pathlib import Path

import typer
from rich.align import Align
from rich.columns import Columns
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from ...cli_components.env import bootstrap_env, global_env_path
from ...cli_components.state import console
from ...config import load_settings
from ..constants_runtime import DOCTOR_SESSION_TITLE


def _test_runner_executable(test_cmd: str) -> str:
    try:
        parts = shlex.split(test_cmd)
    except ValueError:
        parts = test_cmd.split()
    return parts[0] if parts else ""


def doctor(
    project_dir: Path = typer.Option(Path.cwd(), "--project-dir", exists=True, file_okay=False),
):
    """Report configuration and the local tools each command depends on."""
    env_info = bootstrap_env(project_dir)
    settings = load_settings()

    def yes(x):
        return Text("• " + x, style="green")

    def no(x):
        return Text("• " + x, style="red")

    rows = [yes(f"Python {sys.version.split()[0]} on {platform.platform()}")]

    runner = _test_runner_executable(settings.test_command)
    needed = {
        "docker-compose": "/env",
        "tail": "/logs",
    }
    if runner:
        needed.setdefault(runner, "/test")
    for tool, used_by in needed.items():
        rows.append(yes(f"{tool} found ({used_by})") if shutil.which(tool) else no(f"{tool} missing ({used_by})"))

    settings_table = Table.grid(padding=(0, 2))
    settings_table.add_column("Setting", style="bold")
    settings_table.add_column("Value")
    settings_table.add_row("Endpoint", settings.endpoint_url)
    settings_table.add_row("Test command", settings.test_command)
    settings_table.add_row("Request timeout", f"{settings.request_timeout}s" if settings.request_timeout else "none")
    settings_table.add_row("Test timeout", f"{settings.test_timeout}s" if settings.test_timeout else "none")
    settings_table.add_row("Flow file cap", str(settings.max_context_files))
    settings_table.add_row(
        "Unreadable files", "skip and note" if settings.skip_unreadable else "abort flow analysis"
    )

    sources = env_info.get("files_found") or []
    env_card = Panel(
        Text("\n".join(sources) if sources else "no .env loaded"),
        title=f"Environment ({env_info.get('source', 'project')})",
        border_style=("green" if sources else "yellow"),
    )
    gpath = global_env_path()
    global_card = Panel(
        Text(f"{'exists' if gpath.exists() else 'missing'}: {gpath}"),
        title="Global .env",
        border_style=("green" if gpath.exists() else "yellow"),
    )
    tests_dir = project_dir / "tests"
    tests_card = Panel(
        Text(f"{'exists' if tests_dir.is_dir() else 'created on first /test'}: {tests_dir}"),
        title="Generated tests",
        border_style="blue",
    )

    console.print(Rule(Text(DOCTOR_SESSION_TITLE, style="bold dark_orange"), style="dark_orange"))
    console.print(Panel(Align.left(Text.assemble(*[r + Text("\n") for r in rows])), title="System", border_style="cyan"))
    console.print(Panel(settings_table, title="Settings", border_style="cyan"))
    console.print(Columns([env_card, global_card, tests_card]))


__all__ = ["doctor"]
