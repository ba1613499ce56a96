from __future__ import annotations

import logging
import shlex
from enum import Enum
from pathlib import Path

from ..messages import DisplayMessage, Workbench
from ..static_values import COMPOSE_COMMAND_TEMPLATE, LOG_TAIL_LINES
from .shell import run_command

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    OBSERVED = "observed"  # result is captured and reported
    UNOBSERVED = "unobserved"  # started and left alone; nothing to wait for


def compose_up_command(env_name: str) -> str:
    return COMPOSE_COMMAND_TEMPLATE.format(compose_file=shlex.quote(f"docker-compose.{env_name}.yml"))


def tail_command(filename: str, lines: int = LOG_TAIL_LINES) -> list[str]:
    return ["tail", "-n", str(lines), "--", filename]


class LocalActionRunner:
    """Non-AI actions: environment bring-up and log tailing."""

    def __init__(self, project_dir: Path, workbench: Workbench):
        self.project_dir = project_dir
        self.workbench = workbench

    def bring_up_environment(self, env_name: str) -> DisplayMessage:
        self.workbench.notify(f"[DevForge] Starting environment: {env_name}...")
        command = compose_up_command(env_name)
        logger.info("Environment bring-up: %s", command)
        self.workbench.run_in_terminal(f"DevForge: {env_name}", command, self.project_dir)
        message = DisplayMessage.info(
            f"Environment setup triggered for **{env_name}** in the terminal. "
            "Follow the docker-compose output there."
        )
        self.workbench.emit(message)
        return message

    async def tail_log(self, filename: str) -> DisplayMessage:
        if not self.project_dir.is_dir():
            message = DisplayMessage.error("[ERROR] Please open a project folder to run log analysis.")
            self.workbench.emit(message)
            return message

        self.workbench.notify(f"[DevForge] Fetching log snapshot for: {filename}")
        result = await run_command(tail_command(filename), self.project_dir)

        if not result.ok or result.stderr:
            message = DisplayMessage.error(
                f"[ERROR] Could not read log file '{filename}'. Check file existence in project root. "
                f"Shell Error: {result.describe_failure()}"
            )
        else:
            message = DisplayMessage.info(
                f"**Log Snapshot for {filename} (Last {LOG_TAIL_LINES} lines):**\n```\n{result.stdout}\n```"
            )
        self.workbench.emit(message)
        return message


__all__ = ["ActionKind", "LocalActionRunner", "compose_up_command", "tail_command"]
