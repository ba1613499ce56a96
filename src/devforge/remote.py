from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class RemoteAnalysisError(Exception):
    """The analysis endpoint could not be reached or answered with something unusable."""


class AnalysisTask(str, Enum):
    SUMMARIZE = "summarize"
    GENERATE_TEST = "generate_test"
    FLOW_ANALYSIS = "flow_analysis"


class AnalysisRequest(BaseModel):
    """Task-tagged request body. Unset fields are left out of the JSON."""

    model_config = ConfigDict(frozen=True)

    task: AnalysisTask
    filename: Optional[str] = None
    content: Optional[str] = None
    project_context: Optional[str] = None
    root_path: Optional[str] = None

    @classmethod
    def summarize(cls, filename: str, content: str) -> "AnalysisRequest":
        return cls(task=AnalysisTask.SUMMARIZE, filename=filename, content=content)

    @classmethod
    def generate_test(cls, filename: str, content: str) -> "AnalysisRequest":
        return cls(task=AnalysisTask.GENERATE_TEST, filename=filename, content=content)

    @classmethod
    def flow_analysis(cls, project_context: str, root_path: str) -> "AnalysisRequest":
        return cls(task=AnalysisTask.FLOW_ANALYSIS, project_context=project_context, root_path=root_path)

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class _AnalysisResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    summary: Optional[str] = None


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: Optional[str] = Field(default=None, description="Free text returned by the agent, if any.")


class AnalysisClient:
    """
    Client for the single analysis endpoint.

    One POST per request, no retries. Failures surface as RemoteAnalysisError;
    a response without a `summary` field is a valid result with `text=None`.
    """

    def __init__(
        self,
        endpoint_url: str,
        *,
        timeout: Optional[float] = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self._transport = transport

    async def send(self, request: AnalysisRequest) -> AnalysisResult:
        logger.debug("POST %s task=%s", self.endpoint_url, request.task.value)
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), transport=self._transport) as client:
            try:
                response = await client.post(self.endpoint_url, json=request.payload())
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise RemoteAnalysisError(
                    f"{request.task.value} request returned HTTP {e.response.status_code}"
                ) from e
            except httpx.HTTPError as e:
                detail = str(e) or e.__class__.__name__
                raise RemoteAnalysisError(f"{request.task.value} request failed: {detail}") from e

        try:
            parsed = _AnalysisResponse.model_validate(response.json())
        except ValueError as e:
            raise RemoteAnalysisError(f"Malformed response from analysis endpoint: {e}") from e

        return AnalysisResult(text=parsed.summary)


__all__ = [
    "AnalysisClient",
    "AnalysisRequest",
    "AnalysisResult",
    "AnalysisTask",
    "RemoteAnalysisError",
]
