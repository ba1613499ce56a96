from __future__ import annotations

import asyncio
import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]


@dataclass(frozen=True)
class ProcessResult:
    command: str
    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    error: Optional[str] = None

    @property
    def output(self) -> str:
        """stdout followed by stderr, as a terminal would show them."""
        return self.stdout + self.stderr

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out and self.error is None

    def describe_failure(self) -> str:
        if self.error:
            return self.error
        if self.timed_out:
            return f"timed out running `{self.command}`"
        if self.stderr.strip():
            return self.stderr.strip()
        return f"`{self.command}` exited with code {self.returncode}"


def _decode(data: Optional[bytes]) -> str:
    return (data or b"").decode("utf-8", errors="replace").replace("\r\n", "\n")


def _display(cmd: Command) -> str:
    return cmd if isinstance(cmd, str) else subprocess.list2cmdline(list(cmd))


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill the whole process group so children holding our pipes go too, then reap."""
    if os.name == "nt":
        if proc.returncode is None:
            await asyncio.to_thread(
                subprocess.run,
                ["taskkill", "/F", "/T", "/PID", str(proc.pid)],
                capture_output=True,
            )
    else:
        # the group outlives the shell when it backgrounds children
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            pass
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()


async def run_command(cmd: Command, cwd: Path, *, timeout: Optional[float] = None) -> ProcessResult:
    """
    Run `cmd` in `cwd` and capture its output.

    A string runs through the shell, a sequence runs directly. Timeouts and
    spawn failures come back in the result. Cancelling the awaiting task
    kills its process group before the cancellation propagates.
    """
    shown = _display(cmd)
    popen_kwargs = {}
    if os.name == "nt":
        popen_kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0) | getattr(
            subprocess, "CREATE_NEW_PROCESS_GROUP", 0
        )
    else:
        # own group, so a timeout can take down npm -> node -> jest in one go
        popen_kwargs["start_new_session"] = True

    try:
        if isinstance(cmd, str):
            proc = await asyncio.create_subprocess_shell(
                cmd,
                cwd=str(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                **popen_kwargs,
            )
        else:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                **popen_kwargs,
            )
    except OSError as e:
        logger.warning("Could not start %s: %s", shown, e)
        return ProcessResult(command=shown, returncode=None, error=f"Could not start `{shown}`: {e}")

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill(proc)
        logger.warning("%s timed out after %ss", shown, timeout)
        return ProcessResult(
            command=shown,
            returncode=proc.returncode,
            stderr=f"\n(timeout after {timeout}s)\n",
            timed_out=True,
        )
    except asyncio.CancelledError:
        await _kill(proc)
        raise

    logger.debug("%s exited with %s", shown, proc.returncode)
    return ProcessResult(
        command=shown,
        returncode=proc.returncode,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
    )


def start_detached(cmd: str, cwd: Path) -> subprocess.Popen:
    """Start `cmd` through the shell, attached to this terminal, without waiting for it."""
    logger.debug("Starting detached: %s (cwd=%s)", cmd, cwd)
    return subprocess.Popen(cmd, cwd=str(cwd), shell=True)


__all__ = ["ProcessResult", "run_command", "start_detached"]
