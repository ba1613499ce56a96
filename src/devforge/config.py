from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Optional

from .static_values import (
    DEFAULT_ENDPOINT_URL,
    DEFAULT_REQUEST_TIMEOUT_SEC,
    DEFAULT_TEST_CMD,
    DEFAULT_TEST_TIMEOUT_SEC,
    ENDPOINT_ENVVAR,
    MAX_CONTEXT_FILES,
    MAX_CONTEXT_FILES_ENVVAR,
    REQUEST_TIMEOUT_ENVVAR,
    SKIP_UNREADABLE_ENVVAR,
    TEST_CMD_ENVVAR,
    TEST_TIMEOUT_ENVVAR,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration. Built once at start-up, read-only afterwards."""

    endpoint_url: str = DEFAULT_ENDPOINT_URL
    test_command: str = DEFAULT_TEST_CMD
    request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT_SEC
    test_timeout: Optional[float] = DEFAULT_TEST_TIMEOUT_SEC
    max_context_files: int = MAX_CONTEXT_FILES
    skip_unreadable: bool = False

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values) if values else self


def _env_str(name: str, default: str) -> str:
    value = (os.getenv(name) or "").strip()
    return value or default


def _env_timeout(name: str, default: float) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number); using %s", name, raw, default)
        return default
    return value if value > 0 else None


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer); using %s", name, raw, default)
        return default
    return value if value > 0 else default


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "y", "on"}


def load_settings() -> Settings:
    """Read settings from the environment (call after the .env files are loaded)."""
    return Settings(
        endpoint_url=_env_str(ENDPOINT_ENVVAR, DEFAULT_ENDPOINT_URL),
        test_command=_env_str(TEST_CMD_ENVVAR, DEFAULT_TEST_CMD),
        request_timeout=_env_timeout(REQUEST_TIMEOUT_ENVVAR, DEFAULT_REQUEST_TIMEOUT_SEC),
        test_timeout=_env_timeout(TEST_TIMEOUT_ENVVAR, DEFAULT_TEST_TIMEOUT_SEC),
        max_context_files=_env_int(MAX_CONTEXT_FILES_ENVVAR, MAX_CONTEXT_FILES),
        skip_unreadable=_env_flag(SKIP_UNREADABLE_ENVVAR),
    )


__all__ = ["Settings", "load_settings"]
