from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..messages import DisplayMessage
from ..remote import AnalysisRequest, RemoteAnalysisError
from ..static_values import TEST_FILE_MARKER, TESTS_DIRNAME
from ..tools.shell import ProcessResult, run_command
from .base import PipelineContext, resolve_target

logger = logging.getLogger(__name__)

GENERATION_FAILURE_MARKER = "failed"
PASS_MARKER = "pass"


@dataclass(frozen=True)
class GeneratedArtifact:
    source_path: Path
    generated_code: str
    destination_path: Path


def generated_test_filename(source_name: str) -> str:
    """`foo.js` -> `foo.test.js`; `bar.component.tsx` -> `bar.component.test.tsx`."""
    path = Path(source_name)
    return f"{path.stem}{TEST_FILE_MARKER}{path.suffix}"


def destination_for(project_dir: Path, source: Path) -> Path:
    return project_dir / TESTS_DIRNAME / generated_test_filename(source.name)


def is_generation_failure(text: Optional[str]) -> bool:
    """The agent signals a failed generation in free text; this is the one place that reads it."""
    return not text or GENERATION_FAILURE_MARKER in text


def is_passing_run(result: ProcessResult) -> bool:
    return PASS_MARKER in result.output.lower() and result.ok


def persist_artifact(artifact: GeneratedArtifact) -> None:
    """Write the generated test, creating the tests directory and overwriting any previous file."""
    artifact.destination_path.parent.mkdir(parents=True, exist_ok=True)
    artifact.destination_path.write_text(artifact.generated_code, encoding="utf-8")


async def run_generate_and_verify(ctx: PipelineContext, argument: Optional[str]) -> DisplayMessage:
    """Locate -> generate -> persist -> execute. Each failure ends the run with one message."""
    wb = ctx.workbench

    # locate
    source = resolve_target(ctx, argument)
    if source is None:
        return _finish(ctx, DisplayMessage.error(f"[DevForge] ERROR: File not found: {argument or 'No active file'}."))

    # generate
    wb.notify(f"[DevForge] Generating test for: {source.name}...")
    try:
        content = await asyncio.to_thread(source.read_text, encoding="utf-8", errors="replace")
    except OSError as e:
        return _finish(ctx, DisplayMessage.error(f"[DevForge] ERROR: Could not read {source.name}: {e}"))
    try:
        result = await ctx.client.send(AnalysisRequest.generate_test(source.name, content))
    except RemoteAnalysisError as e:
        logger.warning("Test generation request for %s failed: %s", source, e)
        return _finish(
            ctx,
            DisplayMessage.error(f"[DevForge] Agent integration failed (check the analysis endpoint). Error: {e}"),
        )

    if is_generation_failure(result.text):
        return _finish(ctx, DisplayMessage.error(f"**AI Test Generation Failed.** Output:\n\n{result.text}"))

    # persist
    artifact = GeneratedArtifact(
        source_path=source,
        generated_code=result.text,
        destination_path=destination_for(ctx.project_dir, source),
    )
    try:
        await asyncio.to_thread(persist_artifact, artifact)
    except OSError as e:
        logger.warning("Could not save %s: %s", artifact.destination_path, e)
        return _finish(ctx, DisplayMessage.error("[ERROR] Could not save test file. Check folder permissions and path."))

    rel = f"{TESTS_DIRNAME}/{artifact.destination_path.name}"
    wb.emit(DisplayMessage.info(f"Test file saved to **{rel}**. Now executing tests..."))

    # execute
    run = await run_command(ctx.settings.test_command, ctx.project_dir, timeout=ctx.settings.test_timeout)
    passed = is_passing_run(run)
    verdict = "✅ PASSED" if passed else "❌ FAILED"
    output = run.output if run.error is None else f"{run.output}{run.error}"
    body = f"**Test Execution Results:** {verdict}\n\n```\n{output}\n```"
    message = _finish(ctx, DisplayMessage.success(body) if passed else DisplayMessage.error(body))

    wb.open_file(artifact.destination_path)
    return message


def _finish(ctx: PipelineContext, message: DisplayMessage) -> DisplayMessage:
    ctx.workbench.emit(message)
    return message


__all__ = [
    "GeneratedArtifact",
    "destination_for",
    "generated_test_filename",
    "is_generation_failure",
    "is_passing_run",
    "persist_artifact",
    "run_generate_and_verify",
]
