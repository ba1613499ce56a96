"""Shared runtime state for the DevForge CLI."""

from rich.console import Console

console = Console()
