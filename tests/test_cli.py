import pytest
from typer.testing import CliRunner

from devforge.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_global_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DEVFORGE_GLOBAL_ENV", str(tmp_path / "global.env"))
    monkeypatch.setenv("DEVFORGE_ENDPOINT_URL", "http://127.0.0.1:9/unreachable")


def test_inline_help_exits_cleanly(project):
    result = runner.invoke(app, ["chat", "--inline", "--project-dir", str(project), "/help"])

    assert result.exit_code == 0, result.output
    assert "DevForge Agent Commands" in result.output


def test_inline_unknown_command_exits_nonzero(project):
    result = runner.invoke(app, ["chat", "--inline", "--project-dir", str(project), "/deploy"])

    assert result.exit_code == 1
    assert "Unrecognized command" in result.output


def test_bare_command_runs_inline(project):
    result = runner.invoke(app, ["/deploy", "--project-dir", str(project)])

    assert result.exit_code == 1
    assert "Unrecognized command" in result.output


def test_inline_summary_of_missing_file(project):
    result = runner.invoke(app, ["chat", "--inline", "--project-dir", str(project), "/summary", "nope.js"])

    assert result.exit_code == 1
    assert "nope.js" in result.output


def test_inline_logs(project):
    (project / "server.log").write_text("booted on :3000\n")

    result = runner.invoke(app, ["chat", "--inline", "--project-dir", str(project), "/logs"])

    assert result.exit_code == 0, result.output
    assert "booted on :3000" in result.output


def test_doctor_reports_settings(project):
    result = runner.invoke(app, ["doctor", "--project-dir", str(project)])

    assert result.exit_code == 0, result.output
    assert "Settings" in result.output
    assert "http://127.0.0.1:9/unreachable" in result.output
