# tests/test_cli.py

import io
import json
from pathlib import Path

import pytest

from projectapp.cli import main
from projectapp.config import get_settings
from projectapp.schema import TaskPrio, TaskState
from projectapp.storage import load_projects


@pytest.fixture()
def run(data_file: Path, capsys):
    """Run the CLI against a temp data file and return (exit code, stdout)"""

    def _run(*argv: str):
        code = main(["--file", str(data_file), *argv])
        return code, capsys.readouterr().out

    return _run


def test_no_command_prints_help(run) -> None:
    code, out = run()
    assert code == 1
    assert "usage" in out.lower()


def test_add_and_list_projects(run, data_file: Path) -> None:
    code, out = run("add", "Website", "-d", "Relaunch")
    assert code == 0
    assert "[0] Website" in out

    code, out = run("list")
    assert code == 0
    assert "Website" in out
    assert "empty" in out

    projects = load_projects(data_file)
    assert [(p.id, p.title, p.description) for p in projects] == [(0, "Website", "Relaunch")]


def test_list_without_projects(run, data_file: Path) -> None:
    code, out = run("list")
    assert code == 0
    assert "No projects created." in out
    assert not data_file.exists()


def test_list_json(run) -> None:
    run("add", "Website")
    code, out = run("list", "--json")
    assert code == 0
    data = json.loads(out)
    assert data[0]["title"] == "Website"
    assert data[0]["state"] == "empty"


def test_duplicate_title_exits_with_error(run, data_file: Path) -> None:
    run("add", "Website")
    code, out = run("add", "Website", "-d", "again")
    assert code == 1
    assert "already exists" in out
    assert len(load_projects(data_file)) == 1


def test_find_project(run) -> None:
    run("add", "Website")
    code, out = run("find", "Website")
    assert code == 0
    assert "title='Website'" in out

    code, out = run("find", "Nothing")
    assert "No matches." in out


def test_remove_project_and_missing_id(run, data_file: Path) -> None:
    run("add", "A")
    run("add", "B")
    code, _ = run("remove", "0")
    assert code == 0
    assert [p.title for p in load_projects(data_file)] == ["B"]

    code, out = run("remove", "0")
    assert code == 1
    assert "Project not found" in out

    # the removed id stays retired
    code, out = run("add", "C")
    assert "[2] C" in out


def test_task_lifecycle(run, data_file: Path) -> None:
    run("add", "Website")
    assert run("task", "add", "0", "Write copy", "-p", "high")[0] == 0
    assert run("task", "add", "0", "Pick fonts", "-p", "LOW")[0] == 0
    assert run("task", "assign", "0", "0", "alice")[0] == 0
    assert run("task", "state", "0", "1", "done")[0] == 0
    assert run("task", "prio", "0", "1", "medium")[0] == 0
    assert run("task", "describe", "0", "1", "Pick two fonts")[0] == 0

    project = load_projects(data_file)[0]
    first, second = project.tasks
    assert (first.prio, first.taken_by) == (TaskPrio.HIGH, "alice")
    assert (second.description, second.prio, second.state) == ("Pick two fonts", TaskPrio.MEDIUM, TaskState.DONE)

    code, out = run("task", "assign", "0", "0", "bob")
    assert code == 1
    assert "already taken by alice" in out
    assert load_projects(data_file)[0].tasks[0].taken_by == "alice"

    assert run("task", "remove", "0", "1")[0] == 0
    assert [t.id for t in load_projects(data_file)[0].tasks] == [0]


def test_task_list_filters(run) -> None:
    run("add", "Website")
    run("task", "add", "0", "Write copy", "-p", "high")
    run("task", "add", "0", "Pick fonts", "-p", "low")
    run("task", "add", "0", "Draft sitemap", "-p", "high")
    run("task", "state", "0", "2", "done")
    run("task", "assign", "0", "1", "bob")

    _, out = run("task", "list", "0", "--prio", "high")
    assert "Write copy" in out and "Draft sitemap" in out and "Pick fonts" not in out

    _, out = run("task", "list", "0", "--not-done")
    assert "Draft sitemap" not in out

    _, out = run("task", "list", "0", "--taken-by", "bob")
    assert "Pick fonts" in out and "Write copy" not in out

    _, out = run("task", "list", "0", "--search", "SITE")
    assert "Draft sitemap" in out and "Write copy" not in out

    _, out = run("task", "list", "0", "--sort")
    assert out.index("Draft sitemap") < out.index("Write copy") < out.index("Pick fonts")

    _, out = run("task", "list", "0", "--taken-by", "nobody")
    assert "No matching tasks." in out


def test_task_commands_report_missing_ids(run) -> None:
    run("add", "Website")
    code, out = run("task", "state", "0", "7", "done")
    assert code == 1
    assert "Task not found" in out

    code, out = run("task", "add", "5", "x")
    assert code == 1
    assert "Project not found" in out


def test_show_project(run) -> None:
    run("add", "Website", "-d", "Relaunch")
    run("task", "add", "0", "Write copy", "-p", "high")
    code, out = run("show", "0")
    assert code == 0
    assert "Website" in out and "Relaunch" in out and "ongoing" in out
    assert "Write copy" in out

    code, out = run("show", "0", "--json")
    data = json.loads(out)
    assert data["state"] == "ongoing"
    assert data["tasks"][0]["prio"] == "high"


def test_corrupt_data_file_exits_with_error(run, data_file: Path) -> None:
    data_file.parent.mkdir(parents=True)
    data_file.write_text("{broken", encoding="utf-8")
    code, out = run("list")
    assert code == 1
    assert "Not a valid project file" in out
    assert data_file.read_text(encoding="utf-8") == "{broken"


def test_shell_runs_commands_and_saves_on_exit(run, data_file: Path, monkeypatch) -> None:
    script = "\n".join([
        "add Website -d 'Company site'",
        "add Website",
        "task add 0 'Write copy' -p high",
        "task assign 0 0 alice",
        "bogus",
        "list",
        "exit",
        "add NeverRuns",
    ])
    monkeypatch.setattr("sys.stdin", io.StringIO(script + "\n"))

    code, out = run("shell")
    assert code == 0
    assert "already exists" in out
    assert "Website" in out

    projects = load_projects(data_file)
    assert [p.title for p in projects] == ["Website"]
    assert projects[0].description == "Company site"
    assert projects[0].tasks[0].taken_by == "alice"


def test_shell_without_changes_does_not_write(run, data_file: Path, monkeypatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("list\n"))
    code, out = run("shell")
    assert code == 0
    assert "No projects created." in out
    assert not data_file.exists()


def test_invalid_env_settings_exit_with_error(run, monkeypatch) -> None:
    monkeypatch.setenv("PROJECTAPP_LOG_LEVEL", "verbose")
    get_settings.cache_clear()
    try:
        code, out = run("list")
    finally:
        get_settings.cache_clear()
    assert code == 1
    assert "Invalid settings" in out


def test_shell_rejects_global_options(run, data_file: Path, tmp_path: Path, monkeypatch) -> None:
    other = tmp_path / "other.json"
    script = "\n".join([
        f"--file {other} add Elsewhere",
        "--log-level debug list",
        "add Here",
        "exit",
    ])
    monkeypatch.setattr("sys.stdin", io.StringIO(script + "\n"))

    code, out = run("shell")
    assert code == 0
    assert out.count("only apply when starting projectapp") == 2
    assert not other.exists()
    assert [p.title for p in load_projects(data_file)] == ["Here"]
