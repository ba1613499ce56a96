from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Any, Dict, List

from dotenv import dotenv_values

from .constants import DEVFORGE_CONFIG_DIR_ENVVAR, ENV_FILENAMES, GLOBAL_ENV_ENVVAR


def user_config_dir() -> Path:
    """Cross-platform config dir: $DEVFORGE_CONFIG_DIR | XDG | APPDATA | ~/.config/devforge."""
    if os.getenv(DEVFORGE_CONFIG_DIR_ENVVAR):
        return Path(os.environ[DEVFORGE_CONFIG_DIR_ENVVAR]).expanduser()
    if platform.system().lower() == "windows":
        base = os.getenv("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        return Path(base) / "DevForge"
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "devforge"
    return Path.home() / ".config" / "devforge"


def global_env_path() -> Path:
    """$DEVFORGE_GLOBAL_ENV, else `.env` inside the user config dir."""
    override = os.getenv(GLOBAL_ENV_ENVVAR)
    if override:
        return Path(override).expanduser()
    return user_config_dir() / ".env"


def load_env_file(path: Path, *, override_existing: bool = False) -> List[str]:
    """
    Load env vars from a single file into os.environ.
    Returns list of keys set/updated.
    """
    try:
        parsed = dotenv_values(path, encoding="utf-8")
    except OSError:
        return []
    applied: List[str] = []
    for key, value in parsed.items():
        if value is None:
            continue
        if override_existing or (key not in os.environ):
            os.environ[key] = value
            applied.append(key)
    return applied


def load_env_files(project_dir: Path, *, override_existing: bool = False) -> Dict[str, Any]:
    """
    Load .env files from project_dir (precedence: .env.local -> .env).
    Returns dict describing files found and keys applied.
    """
    files = [project_dir / name for name in ENV_FILENAMES]
    found = [p for p in files if p.exists()]
    applied: Dict[str, Any] = {"files_found": [str(p) for p in found], "applied_keys": []}
    for path in reversed(found):
        keys = load_env_file(path, override_existing=override_existing)
        if keys:
            applied["applied_keys"].extend(keys)
    return applied


def load_global_env(*, override_existing: bool = False) -> Dict[str, Any]:
    """Load the global env file into os.environ if it exists."""
    path = global_env_path()
    applied = load_env_file(path, override_existing=override_existing) if path.exists() else []
    return {"path": str(path), "applied_keys": applied}


def bootstrap_env(project_dir: Path) -> Dict[str, Any]:
    """
    Load env from project_dir; if none exists, fall back to the global env.
    Variables already set in the process environment always win.
    """
    info = load_env_files(project_dir, override_existing=False)
    if info["files_found"]:
        return {"source": "project", **info}
    g = load_global_env(override_existing=False)
    return {"source": "global", "files_found": [g["path"]] if g["applied_keys"] else [], **g}


__all__ = [
    "bootstrap_env",
    "global_env_path",
    "load_env_file",
    "load_env_files",
    "load_global_env",
    "user_config_dir",
]
