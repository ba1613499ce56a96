"""DevForge - chat-style command dispatcher for project analysis, test generation and local dev actions."""

__version__ = "0.1.0"
