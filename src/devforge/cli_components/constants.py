"""Shared constants for the DevForge CLI."""

from ..static_values import (
    APP_HELP,
    DEVFORGE_CONFIG_DIR_ENVVAR,
    ENV_FILENAMES,
    GLOBAL_ENV_ENVVAR,
    PROMPT,
    WELCOME_TEXT,
)
