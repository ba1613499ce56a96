from pathlib import Path

import pytest

from devforge.tools.context import (
    ContextCollectionError,
    collect_project_context,
    discover_flow_files,
    matches_any,
)


def _write(root: Path, rel: str, text: str = "x") -> Path:
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


@pytest.mark.parametrize(
    "relpath,expected",
    [
        ("package.json", True),
        ("client/package.json", True),
        ("public/index.html", True),
        ("index.tsx", True),
        ("api/server.ts", True),
        ("src/utils/math.js", True),
        ("packages/ui/src/Button.jsx", True),
        ("lib/helpers.js", False),
        ("src/styles.css", False),
        ("README.md", False),
    ],
)
def test_flow_patterns(relpath, expected):
    from devforge.static_values import FLOW_FILE_PATTERNS

    assert matches_any(relpath, FLOW_FILE_PATTERNS) is expected


def test_discovery_skips_dependency_trees(project):
    _write(project, "package.json", "{}")
    _write(project, "node_modules/left-pad/index.js")
    _write(project, "node_modules/left-pad/package.json")
    _write(project, "src/app.js")

    found = [p.relative_to(project).as_posix() for p in discover_flow_files(project)]

    assert found == ["package.json", "src/app.js"]


def test_discovery_is_capped_and_stable(project):
    for i in range(12):
        _write(project, f"src/mod{i:02d}.ts")

    first = discover_flow_files(project, limit=8)
    second = discover_flow_files(project, limit=8)

    assert len(first) == 8
    assert first == second


@pytest.mark.asyncio
async def test_blob_has_one_header_per_file(project):
    _write(project, "package.json", '{"name": "webapp"}')
    _write(project, "public/index.html", "<html></html>")
    _write(project, "src/api/client.ts", "export const x = 1;")

    context = await collect_project_context(project)
    blob = context.blob()

    assert len(context) == 3
    assert blob.count("### FILE: ") == 3
    for rel in ("package.json", "public/index.html", "src/api/client.ts"):
        assert f"### FILE: {rel} ###" in blob
    assert '```\n{"name": "webapp"}\n```' in blob
    assert str(project) not in blob


@pytest.mark.asyncio
async def test_unreadable_file_aborts_by_default(project, unreadable):
    _write(project, "package.json", "{}")
    _write(project, "src/broken.js")
    unreadable("broken.js")

    with pytest.raises(ContextCollectionError) as info:
        await collect_project_context(project)
    assert info.value.relative_path == "src/broken.js"


@pytest.mark.asyncio
async def test_unreadable_file_can_be_skipped(project, unreadable):
    _write(project, "package.json", "{}")
    _write(project, "src/broken.js")
    unreadable("broken.js")

    context = await collect_project_context(project, skip_unreadable=True)

    assert [e.relative_path for e in context.entries] == ["package.json"]
    assert [rel for rel, _ in context.skipped] == ["src/broken.js"]


@pytest.mark.asyncio
async def test_undecodable_bytes_are_replaced_not_fatal(project):
    (project / "index.html").write_bytes("<p>café</p>".encode("latin-1"))

    context = await collect_project_context(project)

    assert context.skipped == []
    assert context.entries[0].content == "<p>caf\ufffd</p>"


@pytest.mark.parametrize(
    "pattern,expanded",
    [
        ("**/package.json", ("**/package.json", "package.json")),
        ("**/src/**/*.js", ("**/src/**/*.js", "**/src/*.js", "src/**/*.js", "src/*.js")),
        ("public/*.html", ("public/*.html",)),
    ],
)
def test_globstar_expansion(pattern, expanded):
    from devforge.tools.context import _expand_globstars

    assert _expand_globstars(pattern) == expanded
