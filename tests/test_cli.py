"""Tests for the ``teleproj`` CLI command.

All tests use real files in temporary directories and real Click test
runner invocations.  No mocks, no stubs, no fakes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from teleproj import __version__
from teleproj.cli.main import _collect_list, _normalise_path, cli
from teleproj.models.project import ProjectList
from teleproj.storage.store import ProjectStore


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def store_path(tmp_path: Path) -> str:
    return str(tmp_path / "teleproj.json")


@pytest.fixture()
def projects_dir(tmp_path: Path) -> Path:
    """Create real project directories: blog-app, todo-cli, foo1, foo2."""
    root = tmp_path / "src"
    for name in ("blog-app", "todo-cli", "foo1", "foo2"):
        (root / name).mkdir(parents=True)
    return root


@pytest.fixture()
def populated(store_path: str, projects_dir: Path) -> list[str]:
    """Save the four project directories and return their paths."""
    paths = [str(projects_dir / n) for n in ("blog-app", "todo-cli", "foo1", "foo2")]
    ProjectStore(store_path).save(ProjectList(paths=paths))
    return paths


def invoke(runner: CliRunner, store_path: str, *args: str):
    return runner.invoke(cli, ["--store-path", store_path, *args])


# ---------------------------------------------------------------------------
# Help / version / no mode
# ---------------------------------------------------------------------------


class TestBasics:
    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "--add" in result.output
        assert "--remove" in result.output
        assert "--list" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_mode(self, runner: CliRunner, store_path: str) -> None:
        result = invoke(runner, store_path)
        assert result.exit_code == 0
        assert "Use --help" in result.output

    def test_store_path_from_env(self, runner: CliRunner, store_path: str, populated) -> None:
        result = runner.invoke(cli, ["0"], env={"TELEPROJ_STORE_PATH": store_path})
        assert result.exit_code == 0
        assert result.output == populated[0] + "\n"


# ---------------------------------------------------------------------------
# Resolve
# ---------------------------------------------------------------------------


class TestResolve:
    def test_by_index_prints_bare_path(self, runner: CliRunner, store_path: str, populated) -> None:
        result = invoke(runner, store_path, "1")
        assert result.exit_code == 0
        assert result.stdout == populated[1] + "\n"
        assert result.stderr == ""

    def test_by_fuzzy_name(self, runner: CliRunner, store_path: str, populated) -> None:
        result = invoke(runner, store_path, "blog")
        assert result.exit_code == 0
        assert result.stdout == populated[0] + "\n"
        assert result.stderr == ""

    def test_no_match(self, runner: CliRunner, store_path: str, populated) -> None:
        result = invoke(runner, store_path, "xyz")
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "Error: No project found matching 'xyz'" in result.stderr

    def test_out_of_range(self, runner: CliRunner, store_path: str, populated) -> None:
        result = invoke(runner, store_path, "4")
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "out of range" in result.stderr

    def test_very_long_index_is_out_of_range(
        self, runner: CliRunner, store_path: str, populated
    ) -> None:
        result = invoke(runner, store_path, "9" * 5000)
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert result.stdout == ""
        assert "out of range" in result.stderr
        assert "(5000 digits)" in result.stderr

    def test_ambiguous_lists_candidates(
        self, runner: CliRunner, store_path: str, populated
    ) -> None:
        result = invoke(runner, store_path, "foo")
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "Multiple projects match 'foo'" in result.stderr
        assert f"  2: foo1 ({populated[2]})" in result.stderr
        assert f"  3: foo2 ({populated[3]})" in result.stderr
        assert "specific index number" in result.stderr

    def test_missing_store_file(self, runner: CliRunner, store_path: str) -> None:
        result = invoke(runner, store_path, "0")
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "no projects saved" in result.stderr

    def test_malformed_store_is_fatal(self, runner: CliRunner, store_path: str) -> None:
        Path(store_path).write_text("[oops", encoding="utf-8")
        result = invoke(runner, store_path, "blog")
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "Fatal:" in result.stderr
        assert "Traceback" not in result.output

    def test_logical_errors_not_logged(
        self, runner: CliRunner, store_path: str, populated, caplog
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="teleproj")
        for query in ("xyz", "foo", "99"):
            result = invoke(runner, store_path, query)
            assert result.exit_code == 1
        assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []

    def test_resolve_does_not_rewrite_store(
        self, runner: CliRunner, store_path: str, populated
    ) -> None:
        before = Path(store_path).read_bytes()
        invoke(runner, store_path, "todo")
        assert Path(store_path).read_bytes() == before


# ---------------------------------------------------------------------------
# Add
# ---------------------------------------------------------------------------


class TestAdd:
    def test_add_existing_directory(
        self, runner: CliRunner, store_path: str, projects_dir: Path
    ) -> None:
        target = projects_dir / "blog-app"
        result = invoke(runner, store_path, "--add", str(target))
        assert result.exit_code == 0
        assert f"Added path [0]: {target.resolve()}" in result.output
        assert ProjectStore(store_path).load().paths == [str(target.resolve())]

    def test_relative_path_made_absolute(
        self, runner: CliRunner, store_path: str, projects_dir: Path, monkeypatch
    ) -> None:
        monkeypatch.chdir(projects_dir)
        result = invoke(runner, store_path, "-a", "todo-cli")
        assert result.exit_code == 0
        saved = ProjectStore(store_path).load().paths
        assert saved == [str((projects_dir / "todo-cli").resolve())]

    def test_missing_directory_warns_but_saves(
        self, runner: CliRunner, store_path: str, tmp_path: Path
    ) -> None:
        result = invoke(runner, store_path, "--add", str(tmp_path / "not-there"))
        assert result.exit_code == 0
        assert "Warning:" in result.stderr
        assert "Warning:" not in result.stdout
        assert len(ProjectStore(store_path).load()) == 1

    def test_undecodable_name_is_fatal_not_a_crash(
        self, runner: CliRunner, store_path: str, populated, tmp_path: Path
    ) -> None:
        before = Path(store_path).read_bytes()
        result = invoke(runner, store_path, "--add", str(tmp_path / "caf\udce9"))
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Fatal:" in result.stderr
        assert Path(store_path).read_bytes() == before

    def test_add_beats_query(
        self, runner: CliRunner, store_path: str, populated, projects_dir: Path
    ) -> None:
        new_dir = projects_dir / "extra"
        new_dir.mkdir()
        result = invoke(runner, store_path, "blog", "--add", str(new_dir))
        assert result.exit_code == 0
        assert "Added path [4]" in result.output
        assert populated[0] not in result.output

    def test_add_then_remove_restores_file(
        self, runner: CliRunner, store_path: str, populated, projects_dir: Path
    ) -> None:
        before = Path(store_path).read_bytes()
        invoke(runner, store_path, "--add", str(projects_dir / "blog-app"))
        result = invoke(runner, store_path, "--remove", "4")
        assert result.exit_code == 0
        assert Path(store_path).read_bytes() == before


# ---------------------------------------------------------------------------
# Remove
# ---------------------------------------------------------------------------


class TestRemove:
    def test_remove_shifts_indices(
        self, runner: CliRunner, store_path: str, populated
    ) -> None:
        result = invoke(runner, store_path, "-r", "1")
        assert result.exit_code == 0
        assert f"Removed path [1]: {populated[1]}" in result.output
        assert ProjectStore(store_path).load().paths == [
            populated[0],
            populated[2],
            populated[3],
        ]

    def test_remove_out_of_range(self, runner: CliRunner, store_path: str, populated) -> None:
        before = Path(store_path).read_bytes()
        result = invoke(runner, store_path, "--remove", "9")
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "Error: Index 9 is out of range" in result.stderr
        assert Path(store_path).read_bytes() == before

    def test_remove_requires_number(self, runner: CliRunner, store_path: str) -> None:
        result = invoke(runner, store_path, "--remove", "abc")
        assert result.exit_code == 2

    def test_remove_rejects_negative(self, runner: CliRunner, store_path: str) -> None:
        result = invoke(runner, store_path, "--remove", "-1")
        assert result.exit_code == 2

    def test_remove_beats_query(self, runner: CliRunner, store_path: str, populated) -> None:
        result = invoke(runner, store_path, "todo", "--remove", "0")
        assert result.exit_code == 0
        assert "Removed path [0]" in result.output
        assert len(ProjectStore(store_path).load()) == 3


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------


class TestList:
    def test_empty(self, runner: CliRunner, store_path: str) -> None:
        result = invoke(runner, store_path, "--list")
        assert result.exit_code == 0
        assert "No paths saved yet" in result.output

    def test_lists_with_indices(self, runner: CliRunner, store_path: str, populated) -> None:
        result = invoke(runner, store_path, "-l")
        assert result.exit_code == 0
        assert result.output.startswith("Saved projects:\n")
        assert f"  0: blog-app ({populated[0]})" in result.output
        assert f"  3: foo2 ({populated[3]})" in result.output
        assert "[missing]" not in result.output

    def test_marks_missing_directories(
        self, runner: CliRunner, store_path: str, populated
    ) -> None:
        Path(populated[1]).rmdir()
        result = invoke(runner, store_path, "--list")
        assert f"  1: todo-cli ({populated[1]}) [missing]" in result.output

    def test_json_output(self, runner: CliRunner, store_path: str, populated) -> None:
        result = invoke(runner, store_path, "--list", "--json-output")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [row["index"] for row in data] == [0, 1, 2, 3]
        assert data[0] == {
            "index": 0,
            "name": "blog-app",
            "path": populated[0],
            "exists": True,
        }

    def test_list_beats_query(self, runner: CliRunner, store_path: str, populated) -> None:
        result = invoke(runner, store_path, "foo", "--list")
        assert result.exit_code == 0
        assert "Saved projects:" in result.output


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_collect_list_empty(self) -> None:
        assert _collect_list([]) == []

    def test_normalise_expands_home(self) -> None:
        assert _normalise_path("~") == str(Path.home().resolve())
