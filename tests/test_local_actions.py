import asyncio
import time

import pytest

from devforge.tools.local_actions import LocalActionRunner, compose_up_command, tail_command
from devforge.tools.shell import run_command


def test_compose_command_names_the_env_file():
    assert compose_up_command("staging") == "docker-compose -f docker-compose.staging.yml up -d --build"


def test_compose_command_quotes_odd_names():
    assert compose_up_command("my env") == "docker-compose -f 'docker-compose.my env.yml' up -d --build"


def test_tail_command():
    assert tail_command("server.log") == ["tail", "-n", "10", "--", "server.log"]


@pytest.mark.asyncio
async def test_tail_treats_dash_names_as_files(project, workbench):
    (project / "-f").write_text("one\ntwo\n")

    message = await LocalActionRunner(project, workbench).tail_log("-f")

    assert message.level == "info"
    assert "one\ntwo" in message.text


def test_bring_up_hands_off_to_terminal(project, workbench):
    message = LocalActionRunner(project, workbench).bring_up_environment("default")

    assert workbench.terminals == [
        ("DevForge: default", "docker-compose -f docker-compose.default.yml up -d --build", project)
    ]
    assert "**default**" in message.text
    assert workbench.messages == [message]


@pytest.mark.asyncio
async def test_tail_shows_last_ten_lines_verbatim(project, workbench):
    lines = [f"line {i}" for i in range(1, 13)]
    (project / "server.log").write_text("\n".join(lines) + "\n")

    message = await LocalActionRunner(project, workbench).tail_log("server.log")

    expected = "\n".join(lines[2:]) + "\n"
    assert message.level == "info"
    assert message.text == f"**Log Snapshot for server.log (Last 10 lines):**\n```\n{expected}\n```"
    assert "line 2\n" not in message.text


@pytest.mark.asyncio
async def test_tail_missing_file_names_it(project, workbench):
    message = await LocalActionRunner(project, workbench).tail_log("missing.log")

    assert message.level == "error"
    assert "'missing.log'" in message.text
    assert "Shell Error:" in message.text
    assert workbench.messages == [message]


@pytest.mark.asyncio
async def test_tail_without_project_folder(tmp_path, workbench):
    message = await LocalActionRunner(tmp_path / "absent", workbench).tail_log("server.log")

    assert message.text == "[ERROR] Please open a project folder to run log analysis."


@pytest.mark.asyncio
async def test_run_command_reports_spawn_failure(project):
    result = await run_command(["definitely-not-a-real-binary-xyz"], project)

    assert not result.ok
    assert result.error is not None
    assert "definitely-not-a-real-binary-xyz" in result.describe_failure()


@pytest.mark.asyncio
async def test_timeout_kills_shell_children(project):
    started = time.monotonic()

    result = await run_command("sleep 4; echo late", project, timeout=0.3)

    assert time.monotonic() - started < 2
    assert result.timed_out
    assert not result.ok
    assert "late" not in result.output


@pytest.mark.asyncio
async def test_cancel_kills_shell_children(project):
    marker = project / "finished"
    task = asyncio.create_task(run_command(f"sleep 1; touch {marker.name}", project))
    await asyncio.sleep(0.2)
    started = time.monotonic()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert time.monotonic() - started < 1
    await asyncio.sleep(1.2)
    assert not marker.exists()
