# src/devforge/tools/context.py
from __future__ import annotations

import asyncio
import fnmatch
import itertools
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from ..static_values import FLOW_EXCLUDE_DIRS, FLOW_FILE_PATTERNS, MAX_CONTEXT_FILES

logger = logging.getLogger(__name__)


class ContextCollectionError(Exception):
    """A matched file could not be read while building the project context."""

    def __init__(self, relative_path: str, reason: BaseException):
        super().__init__(f"Could not read {relative_path}: {reason}")
        self.relative_path = relative_path
        self.reason = reason


@dataclass(frozen=True)
class FileContextEntry:
    relative_path: str
    content: str

    def render(self) -> str:
        return f"\n\n### FILE: {self.relative_path} ###\n\n```\n{self.content}\n```"


@dataclass
class ProjectContext:
    root: Path
    entries: List[FileContextEntry] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def blob(self) -> str:
        """Concatenate every entry, each under its own FILE header."""
        return "".join(entry.render() for entry in self.entries)


@lru_cache(maxsize=64)
def _expand_globstars(pattern: str) -> Tuple[str, ...]:
    """
    fnmatch has no `**`, and its `*` already crosses `/`. Each `**/` is kept or
    dropped so it can also stand for zero directories:
    `**/src/**/*.js` -> `**/src/**/*.js`, `**/src/*.js`, `src/**/*.js`, `src/*.js`.
    """
    parts = pattern.split("**/")
    variants = []
    for keep in itertools.product(("**/", ""), repeat=len(parts) - 1):
        variants.append(parts[0] + "".join(k + p for k, p in zip(keep, parts[1:])))
    return tuple(dict.fromkeys(variants))


def matches_any(relpath: str, patterns: Sequence[str]) -> bool:
    return any(fnmatch.fnmatch(relpath, v) for p in patterns for v in _expand_globstars(p))


def _iter_files(root: Path, exclude_dirs: Iterable[str]) -> Iterable[Path]:
    """Depth-first walk in name order; prunes excluded dirs and never follows symlinked dirs."""
    excluded = set(exclude_dirs)
    stack = [root]
    while stack:
        d = stack.pop()
        try:
            with os.scandir(d) as it:
                entries = sorted(it, key=lambda e: e.name)
        except (FileNotFoundError, PermissionError):
            continue
        subdirs = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    if entry.name not in excluded:
                        subdirs.append(Path(entry.path))
                elif entry.is_file():
                    yield Path(entry.path)
            except PermissionError:
                continue
        stack.extend(reversed(subdirs))


def _relposix(root: Path, p: Path) -> str:
    try:
        return p.relative_to(root).as_posix()
    except ValueError:
        return p.as_posix()


def discover_flow_files(
    root: Path,
    *,
    patterns: Sequence[str] = FLOW_FILE_PATTERNS,
    exclude_dirs: Iterable[str] = FLOW_EXCLUDE_DIRS,
    limit: int = MAX_CONTEXT_FILES,
) -> List[Path]:
    """Files under `root` matching the flow allow-list, in walk order, at most `limit`."""
    found: List[Path] = []
    if limit <= 0:
        return found
    for path in _iter_files(root, exclude_dirs):
        if matches_any(_relposix(root, path), patterns):
            found.append(path)
            if len(found) >= limit:
                break
    return found


async def collect_project_context(
    root: Path,
    *,
    limit: int = MAX_CONTEXT_FILES,
    skip_unreadable: bool = False,
) -> ProjectContext:
    """
    Discover and read the files that describe the project's flow.

    With `skip_unreadable=False` the first unreadable file aborts the whole
    collection (ContextCollectionError). With `True` the file is recorded in
    `skipped` and collection continues.
    """
    root = root.resolve()
    paths = await asyncio.to_thread(discover_flow_files, root, limit=limit)
    context = ProjectContext(root=root)

    for path in paths:
        rel = _relposix(root, path)
        try:
            content = await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
        except OSError as e:
            if not skip_unreadable:
                raise ContextCollectionError(rel, e) from e
            logger.warning("Skipping unreadable file %s: %s", rel, e)
            context.skipped.append((rel, str(e)))
            continue
        context.entries.append(FileContextEntry(relative_path=rel, content=content))

    logger.debug("Collected %d file(s) under %s (%d skipped)", len(context), root, len(context.skipped))
    return context


__all__ = [
    "ContextCollectionError",
    "FileContextEntry",
    "ProjectContext",
    "collect_project_context",
    "discover_flow_files",
    "matches_any",
]
