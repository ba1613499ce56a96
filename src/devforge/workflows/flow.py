from __future__ import annotations

import logging

from ..messages import DisplayMessage
from ..remote import AnalysisRequest, RemoteAnalysisError
from ..static_values import FLOW_FALLBACK
from ..tools.context import ContextCollectionError, collect_project_context
from .base import PipelineContext

logger = logging.getLogger(__name__)

NO_FILES_TEXT = "[DevForge] No relevant source files found in the project."


async def run_flow_analysis(ctx: PipelineContext) -> DisplayMessage:
    """Map the project's structure and data flow from a bounded set of files."""
    root = ctx.project_dir
    if not root.is_dir():
        return _finish(ctx, DisplayMessage.error("[ERROR] Please open a project folder to run flow analysis."))

    ctx.workbench.notify("[DevForge] Analyzing project flow across multiple files...")
    try:
        context = await collect_project_context(
            root,
            limit=ctx.settings.max_context_files,
            skip_unreadable=ctx.settings.skip_unreadable,
        )
    except ContextCollectionError as e:
        logger.warning("Flow context collection aborted: %s", e)
        return _finish(ctx, DisplayMessage.error(f"[ERROR] Flow analysis failed during execution: {e}"))

    if not context.entries:
        return _finish(ctx, DisplayMessage.error(NO_FILES_TEXT))

    ctx.workbench.notify(f"[DevForge] Sending {len(context)} files to AI for flow mapping...")
    request = AnalysisRequest.flow_analysis(context.blob(), root.resolve().name)
    try:
        result = await ctx.client.send(request)
    except RemoteAnalysisError as e:
        logger.warning("Flow analysis request failed: %s", e)
        return _finish(ctx, DisplayMessage.error(f"[ERROR] Flow analysis failed during execution: {e}"))

    text = f"**Project Flow Analysis for {root.resolve().name}:**\n\n{result.text or FLOW_FALLBACK}"
    if context.skipped:
        names = ", ".join(f"`{rel}`" for rel, _ in context.skipped)
        text += f"\n\n_Skipped unreadable files: {names}_"
    return _finish(ctx, DisplayMessage.info(text))


def _finish(ctx: PipelineContext, message: DisplayMessage) -> DisplayMessage:
    ctx.workbench.emit(message)
    return message


__all__ = ["NO_FILES_TEXT", "run_flow_analysis"]
