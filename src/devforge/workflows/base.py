from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import Settings
from ..messages import Workbench
from ..remote import AnalysisClient


@dataclass(frozen=True)
class PipelineContext:
    """Everything a pipeline needs; shared read-only by concurrent pipelines."""

    project_dir: Path
    settings: Settings
    client: AnalysisClient
    workbench: Workbench


def resolve_target(ctx: PipelineContext, argument: Optional[str]) -> Optional[Path]:
    """
    Two-step target resolution: an explicit argument (relative to the project
    root), else the workbench's active file. Returns None when neither names
    an existing file.
    """
    if argument:
        candidate = ctx.project_dir / argument
    else:
        candidate = ctx.workbench.active_file()
    if candidate is None or not candidate.is_file():
        return None
    return candidate


__all__ = ["PipelineContext", "resolve_target"]
