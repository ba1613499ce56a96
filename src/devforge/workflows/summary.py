from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..messages import DisplayMessage
from ..remote import AnalysisRequest, RemoteAnalysisError
from ..static_values import SUMMARY_FALLBACK
from .base import PipelineContext, resolve_target

logger = logging.getLogger(__name__)


async def run_summary(ctx: PipelineContext, argument: Optional[str]) -> DisplayMessage:
    """Send one file to the agent for static analysis and show its summary."""
    target = resolve_target(ctx, argument)
    if target is None:
        message = DisplayMessage.error(
            f"[DevForge] ERROR: File not found or invalid path provided: {argument or 'No active file'}."
        )
        ctx.workbench.emit(message)
        return message

    ctx.workbench.notify(f"[DevForge] Sending file to agent for analysis: {target.name}...")
    try:
        content = await asyncio.to_thread(target.read_text, encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Could not read %s: %s", target, e)
        message = DisplayMessage.error(f"[DevForge] ERROR: Could not read {target.name}: {e}")
        ctx.workbench.emit(message)
        return message

    try:
        result = await ctx.client.send(AnalysisRequest.summarize(target.name, content))
    except RemoteAnalysisError as e:
        logger.warning("Summary of %s failed: %s", target, e)
        message = DisplayMessage.error(
            f"[DevForge] Agent integration failed (check the analysis endpoint). Error: {e}"
        )
        ctx.workbench.emit(message)
        return message

    summary = result.text or SUMMARY_FALLBACK
    message = DisplayMessage.info(f"**Agent Analysis for {target.name}:**\n\n{summary}")
    ctx.workbench.emit(message)
    return message


__all__ = ["run_summary"]
