from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional

from pyfiglet import Figlet
from rich import box
from rich.align import Align
from rich.console import Console, Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.style import Style
from rich.syntax import Syntax
from rich.text import Text

from ..messages import DisplayMessage
from .state import console

_LEVEL_STYLES = {"info": "cyan", "success": "green", "error": "red"}


@lru_cache(maxsize=64)
def _ascii_gradient_lines(width: int, text: str, font: str) -> Group:
    def _hex_to_rgb(h: str) -> tuple[int, int, int]:
        h = h.lstrip("#")
        return tuple(int(h[i:i + 2], 16) for i in (0, 2, 4))

    def _interpolate_palette(palette: list[str], steps: int) -> list[str]:
        if steps <= 1:
            return [palette[0]]
        out, steps_total = [], steps - 1
        for x in range(steps):
            pos = x / steps_total
            seg = min(int(pos * (len(palette) - 1)), len(palette) - 2)
            seg_start = seg / (len(palette) - 1)
            seg_end = (seg + 1) / (len(palette) - 1)
            local_t = (pos - seg_start) / (seg_end - seg_start + 1e-9)
            c1, c2 = _hex_to_rgb(palette[seg]), _hex_to_rgb(palette[seg + 1])
            rgb = tuple(int(a + (b - a) * local_t) for a, b in zip(c1, c2))
            out.append(f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}")
        return out

    fig = Figlet(font=font, width=width)
    lines = fig.renderText(text).rstrip("\n").splitlines()
    if not lines:
        return Group()

    palette = ["#7c2d12", "#9a3412", "#c2410c", "#ea580c", "#f97316", "#fb923c", "#fdba74"]
    ramp = _interpolate_palette(palette, max(len(line) for line in lines))

    rendered_lines: List[Any] = []
    for raw in lines:
        styled = Text()
        for idx, ch in enumerate(raw):
            styled.append(ch, style=Style(color=ramp[idx], bold=(ch != " ")))
        rendered_lines.append(Align.center(styled, width=width))
    return Group(*rendered_lines)


def devforge_ascii_renderable(width: int, text: str = "DevForge", font: str = "ansi_shadow") -> Group:
    if width < 70:
        return Group(Align.center(Text(text, style="bold dark_orange"), width=width))
    return _ascii_gradient_lines(width, text, font)


def session_banner(
    project_dir: Path,
    title_text: str,
    *,
    endpoint_url: str,
    test_cmd: Optional[str] = None,
    active_file: Optional[Path] = None,
    interactive: bool = False,
) -> Panel:
    body = Text()
    body.append("Project:  ", style="bold")
    body.append(str(project_dir))
    body.append("\n")
    body.append("Endpoint: ", style="bold")
    body.append(endpoint_url, style="dim")
    if test_cmd:
        body.append("\n")
        body.append("Tests:    ", style="bold")
        body.append(test_cmd, style="italic")
    if active_file:
        body.append("\n")
        body.append("Focus:    ", style="bold")
        body.append(str(active_file))

    if interactive:
        body.append("\n\n")
        body.append("Type /help for commands. /clear to redraw, /exit or /quit to quit. Ctrl+C also exits.", style="dim")

    return Panel(
        body,
        title=Text(title_text, style="bold dark_orange"),
        subtitle=Text("Flow | Summary | Tests | Logs | Env", style="dim"),
        border_style="dark_orange",
        padding=(1, 2),
        box=box.HEAVY,
    )


def print_session_header(
    title: str,
    project_dir: Path,
    *,
    endpoint_url: str,
    test_cmd: Optional[str] = None,
    active_file: Optional[Path] = None,
    interactive: bool = False,
    out: Optional[Console] = None,
) -> None:
    out = out or console
    out.clear()
    out.print(devforge_ascii_renderable(getattr(out.size, "width", 80)))
    out.print(
        session_banner(
            project_dir,
            title,
            endpoint_url=endpoint_url,
            test_cmd=test_cmd,
            active_file=active_file,
            interactive=interactive,
        )
    )
    out.print(Rule(style="dark_orange"))


def looks_like_markdown(text: str) -> bool:
    """Heuristic: decide if a message should be rendered as Markdown."""
    if "```" in text:
        return True
    if re.search(r"(?m)^\s{0,3}#{1,6}\s", text):
        return True
    if re.search(r"(?m)^\s{0,3}[-*+]\s+", text):
        return True
    if re.search(r"(?m)^\s{0,3}\d+\.\s+", text):
        return True
    if re.search(r"(?m)^\s*\|.*\|\s*$", text):
        return True
    if re.search(r"`[^`]+`", text) or re.search(r"\*\*[^*]+\*\*", text):
        return True
    return False


def panel_message(message: DisplayMessage, title: str = "DevForge") -> Panel:
    """Render a display message full-width, as Markdown when it looks like Markdown."""
    text = (message.text or "").rstrip()

    if looks_like_markdown(text):
        body = Markdown(text)
    else:
        t = Text.from_ansi(text) if "\x1b[" in text else Text(text)
        t.no_wrap = False
        t.overflow = "fold"
        body = t

    return Panel(
        body,
        title=title,
        border_style=_LEVEL_STYLES.get(message.level, "cyan"),
        box=box.ROUNDED,
        padding=(1, 2),
        expand=True,
    )


def panel_file(path: Path, content: str, project_dir: Optional[Path] = None) -> Panel:
    """Syntax-highlighted view of a file, titled with its project-relative path."""
    try:
        label = path.relative_to(project_dir).as_posix() if project_dir else str(path)
    except ValueError:
        label = str(path)
    lexer = Syntax.guess_lexer(str(path), code=content)
    return Panel(
        Syntax(content, lexer, line_numbers=True, word_wrap=True),
        title=label,
        border_style="blue",
        box=box.ROUNDED,
        expand=True,
    )


def status_line(text: str) -> Text:
    return Text(text, style="dim italic")


__all__ = [
    "devforge_ascii_renderable",
    "looks_like_markdown",
    "panel_file",
    "panel_message",
    "print_session_header",
    "session_banner",
    "status_line",
]
