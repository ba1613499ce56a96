from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import pytest

from devforge.config import Settings
from devforge.messages import DisplayMessage
from devforge.remote import AnalysisResult, RemoteAnalysisError
from devforge.workflows.base import PipelineContext


class RecordingWorkbench:
    def __init__(self, active: Optional[Path] = None):
        self.messages: List[DisplayMessage] = []
        self.notices: List[str] = []
        self.opened: List[Path] = []
        self.terminals: List[Tuple[str, str, Path]] = []
        self.active = active

    def emit(self, message: DisplayMessage) -> None:
        self.messages.append(message)

    def notify(self, text: str) -> None:
        self.notices.append(text)

    def active_file(self) -> Optional[Path]:
        return self.active

    def open_file(self, path: Path) -> None:
        self.opened.append(path)

    def run_in_terminal(self, title: str, command: str, cwd: Path) -> None:
        self.terminals.append((title, command, cwd))


class FakeClient:
    """Stands in for AnalysisClient; records every request."""

    def __init__(self, text: Optional[str] = "ok", error: Optional[str] = None):
        self.text = text
        self.error = error
        self.requests = []

    async def send(self, request):
        self.requests.append(request)
        if self.error:
            raise RemoteAnalysisError(self.error)
        return AnalysisResult(text=self.text)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "webapp"
    root.mkdir()
    return root


@pytest.fixture
def workbench() -> RecordingWorkbench:
    return RecordingWorkbench()


@pytest.fixture
def settings() -> Settings:
    return Settings(endpoint_url="http://analysis.test/hook", test_command="echo 'all tests pass'", test_timeout=30)


@pytest.fixture
def make_ctx(project, workbench, settings):
    def _make(client=None, **overrides) -> PipelineContext:
        return PipelineContext(
            project_dir=project,
            settings=settings.with_overrides(**overrides),
            client=client or FakeClient(),
            workbench=workbench,
        )

    return _make


@pytest.fixture
def unreadable(monkeypatch):
    """Make reads of the named files fail the way a permission error does."""
    names = set()
    real_read_text = Path.read_text

    def read_text(self, *args, **kwargs):
        if self.name in names:
            raise PermissionError(13, "Permission denied", str(self))
        return real_read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", read_text)
    return names.add
