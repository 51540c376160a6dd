"""Tests for the ``verlimit check`` command.

Runs the command through Click's CliRunner against real project
directories created in ``tmp_path``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Generator, List

import pytest
from click.testing import CliRunner, Result

from verlimit.cli import cli


def write_json(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def runner(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[CliRunner, None, None]:
    # Keep config discovery away from the repository's own files
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VERLIMIT_CONFIG", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    yield CliRunner()

    # The CLI binds a log handler to the runner's stream
    logging.getLogger("verlimit").handlers.clear()
    logging.getLogger("verlimit").propagate = True


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "app"
    root.mkdir()
    write_json(
        root / "package.json",
        {
            "name": "app",
            "engines": {"node": ">=16.0.0,<=18.0.0", "npm": ">=8.0.0,<=9.0.0"},
            "dependencies": {"react": "^18.2.0"},
            "devDependencies": {"eslint": "^9.0.0"},
        },
    )
    return root


def invoke(runner: CliRunner, *args: str) -> Result:
    argv: List[str] = ["--no-color", "check", *args]
    return runner.invoke(cli, argv)


@pytest.mark.integration
class TestCheckCommand:
    """Tests for the check command."""

    def test_json_output(self, runner: CliRunner, project: Path) -> None:
        result = invoke(runner, "--path", str(project), "--format", "json")

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "lowest": {"node": "18.18.0", "npm": "8.0.0"},
            "highest": {"node": "18.0.0", "npm": "9.0.0"},
            "source": "dependencies",
        }

    def test_simple_output(self, runner: CliRunner, project: Path) -> None:
        result = invoke(runner, "--path", str(project), "--format", "simple")

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "node:18.18.0|npm:8.0.0",
            "node:18.0.0|npm:9.0.0",
        ]

    def test_simple_output_unlimited_is_latest(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        write_json(tmp_path / "package.json", {"dependencies": {"react": "^17.0.0"}})

        result = invoke(runner, "--format", "simple")

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "node:12.0.0|npm:6.9.0",
            "node:latest|npm:latest compatible",
        ]

    def test_table_output(self, runner: CliRunner, project: Path) -> None:
        result = invoke(runner, "--path", str(project))

        assert result.exit_code == 0
        assert "Version Constraints Summary" in result.output
        assert "v18.18.0" in result.output
        assert "Source: dependencies" in result.output
        assert "best-effort analysis" in result.output

    def test_table_output_without_constraints(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        write_json(tmp_path / "package.json", {"name": "plain"})

        result = invoke(runner)

        assert result.exit_code == 0
        assert "No Node.js version constraints found." in result.output
        assert "Version Constraints Summary" not in result.output

    def test_json_output_without_constraints(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        write_json(tmp_path / "package.json", {"name": "plain"})

        result = invoke(runner, "--format", "json")

        assert json.loads(result.output)["source"] == "none"

    def test_format_is_case_insensitive(self, runner: CliRunner, project: Path) -> None:
        result = invoke(runner, "--path", str(project), "--format", "JSON")

        assert result.exit_code == 0
        assert json.loads(result.output)["source"] == "dependencies"

    def test_empty_directory_fails(self, runner: CliRunner, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()

        result = invoke(runner, "--path", str(empty))

        assert result.exit_code == 1
        assert "No package.json or package-lock.json found!" in result.output

    def test_missing_path_is_usage_error(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        result = invoke(runner, "--path", str(tmp_path / "nope"))

        assert result.exit_code == 2

    def test_lockfile_only_project(self, runner: CliRunner, tmp_path: Path) -> None:
        write_json(
            tmp_path / "package-lock.json",
            {"packages": {"node_modules/next": {"version": "14.1.0"}}},
        )

        result = invoke(runner, "--format", "json")

        assert result.exit_code == 0
        assert json.loads(result.output)["lowest"] == {
            "node": "18.17.0",
            "npm": "9.6.4",
        }

    def test_invalid_lockfile_warns_and_continues(
        self, runner: CliRunner, project: Path
    ) -> None:
        (project / "package-lock.json").write_text("{oops", encoding="utf-8")

        result = invoke(runner, "--path", str(project))

        assert result.exit_code == 0
        assert "Could not parse package-lock.json" in result.output
        assert "Version Constraints Summary" in result.output

    def test_config_excludes_dev_dependencies(
        self, runner: CliRunner, tmp_path: Path, project: Path
    ) -> None:
        (tmp_path / "verlimit.toml").write_text(
            "[verlimit]\ninclude_dev_dependencies = false\n", encoding="utf-8"
        )

        result = invoke(runner, "--path", str(project), "--format", "json")

        assert result.exit_code == 0
        assert json.loads(result.output)["lowest"]["node"] == "16.0.0"
        assert json.loads(result.output)["source"] == "engines"

    def test_invalid_config_fails(
        self, runner: CliRunner, tmp_path: Path, project: Path
    ) -> None:
        (tmp_path / "verlimit.toml").write_text(
            "[verlimit]\nunknown_option = true\n", encoding="utf-8"
        )

        result = invoke(runner, "--path", str(project))

        assert result.exit_code == 1
        assert "Unknown configuration keys: unknown_option" in result.output

    def test_verbose_logs_progress(self, runner: CliRunner, project: Path) -> None:
        result = runner.invoke(
            cli, ["--no-color", "-v", "check", "--path", str(project)]
        )

        assert result.exit_code == 0
        assert "Analyzing project in" in result.output
