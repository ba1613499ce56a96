"""
Modular CLI package that wires together the Typer app and individual commands.

Each command lives in its own module under `commands`; `entrypoint` registers
them on the shared Typer app.
"""

from __future__ import annotations

from .entrypoint import app, main

__all__ = ["app", "main"]
