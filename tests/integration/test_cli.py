"""CLI commands driven through typer's test runner against real DuckDB."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from jsonsql.main import app

runner = CliRunner()


@pytest.fixture
def people_file(tmp_path: Path, people) -> Path:
    path = tmp_path / "people.json"
    path.write_text(json.dumps(people), encoding="utf-8")
    return path


def test_info_shows_effective_settings() -> None:
    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    assert "table=t" in result.output
    assert "duckdb=:memory:" in result.output


def test_columns_lists_inferred_schema(people_file: Path) -> None:
    result = runner.invoke(app, ["--log-level", "WARNING", "columns", str(people_file)])

    assert result.exit_code == 0, result.output
    assert "Loaded 2 row(s) into t" in result.output
    assert "user.name" in result.output
    assert "number" in result.output


def test_query_runs_sql(people_file: Path) -> None:
    result = runner.invoke(
        app,
        ["--log-level", "WARNING", "query", str(people_file), 'SELECT "user.name" AS who FROM t'],
    )

    assert result.exit_code == 0, result.output
    assert "who" in result.output
    assert "Alice" in result.output
    assert "Bob" in result.output


def test_query_without_sql_previews_table(people_file: Path) -> None:
    result = runner.invoke(app, ["--log-level", "WARNING", "query", str(people_file)])

    assert result.exit_code == 0, result.output
    assert "2 row(s)" in result.output


def test_query_reports_syntax_errors(people_file: Path) -> None:
    result = runner.invoke(app, ["--log-level", "WARNING", "query", str(people_file), "SELEC 1"])

    assert result.exit_code == 1
    assert "SQL Syntax Error" in result.output


def test_invalid_json_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"a": ', encoding="utf-8")

    result = runner.invoke(app, ["--log-level", "WARNING", "columns", str(path)])

    assert result.exit_code == 1
    assert "Invalid JSON" in result.output


def test_missing_file_is_reported(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--log-level", "WARNING", "columns", str(tmp_path / "nope.json")])

    assert result.exit_code == 1
    assert "Cannot read" in result.output


def test_columns_reads_stdin() -> None:
    result = runner.invoke(
        app, ["--log-level", "WARNING", "columns", "-"], input='{"a": {"b": 1}}'
    )

    assert result.exit_code == 0, result.output
    assert "Loaded 1 row(s)" in result.output
    assert "a.b" in result.output


def test_shell_runs_commands_until_quit(people_file: Path) -> None:
    script = "\n".join(
        [
            ".columns",
            'SELECT count(*) AS total FROM t',
            ".quit",
        ]
    )

    result = runner.invoke(
        app, ["--log-level", "WARNING", "shell", str(people_file)], input=script + "\n"
    )

    assert result.exit_code == 0, result.output
    assert "Engine Ready" in result.output
    assert "user.name" in result.output
    assert "total" in result.output


def test_shell_pick_appends_quoted_column_to_current_query(people_file: Path) -> None:
    script = "\n".join(["SELECT", ".pick user.name", ".run", ".pick nope", ".quit"])

    result = runner.invoke(
        app, ["--log-level", "WARNING", "shell", str(people_file)], input=script + "\n"
    )

    assert result.exit_code == 0, result.output
    assert 'SELECT "user.name"' in result.output
    assert "Alice" in result.output
    assert "Unknown column: nope" in result.output
