import pytest

from devforge.workflows.flow import NO_FILES_TEXT, run_flow_analysis
from devforge.static_values import FLOW_FALLBACK

from conftest import FakeClient


@pytest.mark.asyncio
async def test_no_files_means_no_remote_call(make_ctx, workbench, project):
    (project / "notes.txt").write_text("nothing to see")
    client = FakeClient()

    message = await run_flow_analysis(make_ctx(client))

    assert message.text == NO_FILES_TEXT
    assert client.requests == []
    assert workbench.messages == [message]


@pytest.mark.asyncio
async def test_sends_context_with_root_label(make_ctx, workbench, project):
    (project / "package.json").write_text("{}")
    (project / "src").mkdir()
    (project / "src" / "index.js").write_text("require('./app')")
    client = FakeClient(text="Entry point is src/index.js")

    message = await run_flow_analysis(make_ctx(client))

    [request] = client.requests
    assert request.task.value == "flow_analysis"
    assert request.root_path == "webapp"
    assert request.project_context.count("### FILE: ") == 2
    assert message.text == "**Project Flow Analysis for webapp:**\n\nEntry point is src/index.js"
    assert len(workbench.messages) == 1


@pytest.mark.asyncio
async def test_respects_configured_cap(make_ctx, project):
    (project / "src").mkdir()
    for i in range(5):
        (project / "src" / f"m{i}.js").write_text("")
    client = FakeClient()

    await run_flow_analysis(make_ctx(client, max_context_files=3))

    assert client.requests[0].project_context.count("### FILE: ") == 3


@pytest.mark.asyncio
async def test_missing_summary_uses_fallback(make_ctx, project):
    (project / "package.json").write_text("{}")

    message = await run_flow_analysis(make_ctx(FakeClient(text=None)))

    assert message.text.endswith(FLOW_FALLBACK)


@pytest.mark.asyncio
async def test_remote_failure_becomes_message(make_ctx, workbench, project):
    (project / "package.json").write_text("{}")

    message = await run_flow_analysis(make_ctx(FakeClient(error="request failed: timeout")))

    assert message.level == "error"
    assert "request failed: timeout" in message.text
    assert workbench.messages == [message]


@pytest.mark.asyncio
async def test_unreadable_file_aborts_without_remote_call(make_ctx, project, unreadable):
    (project / "package.json").write_text("{}")
    unreadable("package.json")
    client = FakeClient()

    message = await run_flow_analysis(make_ctx(client))

    assert "Flow analysis failed" in message.text
    assert "package.json" in message.text
    assert client.requests == []


@pytest.mark.asyncio
async def test_skip_policy_notes_skipped_files(make_ctx, project, unreadable):
    (project / "package.json").write_text("{}")
    unreadable("package.json")
    (project / "index.js").write_text("start()")
    client = FakeClient(text="ok")

    message = await run_flow_analysis(make_ctx(client, skip_unreadable=True))

    assert client.requests[0].project_context.count("### FILE: ") == 1
    assert "`package.json`" in message.text


@pytest.mark.asyncio
async def test_requires_project_folder(make_ctx, workbench, project):
    ctx = make_ctx()
    project.rmdir()

    message = await run_flow_analysis(ctx)

    assert "open a project folder" in message.text


@pytest.mark.asyncio
async def test_latin1_page_does_not_abort_the_batch(make_ctx, project):
    (project / "package.json").write_text("{}")
    (project / "index.html").write_bytes("<h1>Résumé</h1>".encode("latin-1"))
    client = FakeClient(text="ok")

    message = await run_flow_analysis(make_ctx(client))

    assert message.level == "info"
    assert client.requests[0].project_context.count("### FILE: ") == 2
    assert "R\ufffdsum\ufffd" in client.requests[0].project_context
