"""
Command router: turns one raw chat line into exactly one pipeline run.

Pipelines run as asyncio tasks owned by the router. `dispatch` starts the task
and returns it without waiting, so several commands can be in flight at once.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Set

from .config import Settings
from .messages import DisplayMessage, Workbench
from .remote import AnalysisClient
from .static_values import DEFAULT_ENV_NAME, DEFAULT_LOG_FILE, HELP_TEXT, SHOW_LOGS_ALIAS
from .tools.local_actions import ActionKind, LocalActionRunner
from .workflows.base import PipelineContext
from .workflows.flow import run_flow_analysis
from .workflows.generate_verify import run_generate_and_verify
from .workflows.summary import run_summary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    verb: str
    argument: Optional[str] = None


def parse_command(raw: str) -> Command:
    parts = raw.strip().split()
    if not parts:
        return Command(verb="")
    argument = " ".join(parts[1:]) or None
    return Command(verb=parts[0].lower(), argument=argument)


@dataclass(frozen=True)
class _Route:
    name: str
    kind: ActionKind
    handler: Callable[[Optional[str]], object]


class CommandRouter:
    def __init__(
        self,
        project_dir: Path,
        workbench: Workbench,
        settings: Settings,
        *,
        client: Optional[AnalysisClient] = None,
    ):
        self.workbench = workbench
        self.settings = settings
        self.ctx = PipelineContext(
            project_dir=project_dir,
            settings=settings,
            client=client or AnalysisClient(settings.endpoint_url, timeout=settings.request_timeout),
            workbench=workbench,
        )
        self.local = LocalActionRunner(project_dir, workbench)
        self._tasks: Set[asyncio.Task] = set()

        flow = _Route("flow", ActionKind.OBSERVED, lambda _arg: run_flow_analysis(self.ctx))
        summary = _Route("summary", ActionKind.OBSERVED, lambda arg: run_summary(self.ctx, arg))
        test = _Route("test", ActionKind.OBSERVED, lambda arg: run_generate_and_verify(self.ctx, arg))
        logs = _Route("logs", ActionKind.OBSERVED, lambda arg: self.local.tail_log(arg or DEFAULT_LOG_FILE))
        shortcut_logs = _Route("logs", ActionKind.OBSERVED, lambda _arg: self.local.tail_log(DEFAULT_LOG_FILE))
        env = _Route(
            "env", ActionKind.UNOBSERVED, lambda arg: self.local.bring_up_environment(arg or DEFAULT_ENV_NAME)
        )
        self.routes: Dict[str, _Route] = {
            "/flow": flow,
            "/summary": summary,
            "/analyze": summary,
            "/test": test,
            "/logs": logs,
            "/env": env,
            "/environment": env,
            SHOW_LOGS_ALIAS: shortcut_logs,
        }

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def dispatch(self, raw: str) -> Optional[asyncio.Task]:
        """
        Route one raw line. Returns the started pipeline task, or None when the
        command completed synchronously (help, unknown verb, fire-and-forget actions).
        Must be called from a running event loop.
        """
        command = parse_command(raw)
        logger.debug("Dispatching %r -> %s", raw, command)

        if command.verb == "/help":
            self.workbench.emit(DisplayMessage.info(HELP_TEXT))
            return None

        route = self.routes.get(command.verb)
        if route is None:
            self.workbench.emit(
                DisplayMessage.error(
                    f"[DevForge] Unrecognized command: {command.verb}. Type **/help** for a list of commands."
                )
            )
            return None

        if route.kind is ActionKind.UNOBSERVED:
            try:
                route.handler(command.argument)
            except Exception as e:
                logger.exception("%s action failed", route.name)
                self.workbench.emit(DisplayMessage.error(f"[DevForge] {route.name} failed: {e}"))
            return None

        task = asyncio.create_task(self._guarded(route, command), name=f"devforge:{route.name}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _guarded(self, route: _Route, command: Command) -> Optional[DisplayMessage]:
        """Run a pipeline so that nothing but a display message leaves it."""
        try:
            return await route.handler(command.argument)
        except asyncio.CancelledError:
            self.workbench.emit(DisplayMessage.error(f"[DevForge] {command.verb} cancelled."))
            raise
        except Exception as e:
            logger.exception("%s pipeline failed", route.name)
            message = DisplayMessage.error(f"[DevForge] {command.verb} failed unexpectedly: {e}")
            self.workbench.emit(message)
            return message

    async def drain(self) -> None:
        """Wait for every in-flight pipeline to settle."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        """Cancel every in-flight pipeline and wait until they have stopped."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


__all__ = ["Command", "CommandRouter", "parse_command"]
