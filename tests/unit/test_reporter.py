from __future__ import annotations

import io

import pytest
from rich.console import Console

from jsonsql.domain.models import ColumnDescriptor, QueryOutcome, TypeTag
from jsonsql.domain.values import EMPTY_ARRAY, EMPTY_OBJECT
from jsonsql.infrastructure.abstract import Readiness
from jsonsql.reporter import (
    format_cell,
    print_columns,
    print_readiness,
    print_result,
)


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=120, color_system=None), buffer


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "NULL"),
        (True, "TRUE"),
        (False, "FALSE"),
        (3, "3"),
        (2.5, "2.5"),
        ("x", "x"),
        ({"a": 1}, '{"a": 1}'),
        ([1, "b"], '[1, "b"]'),
        (EMPTY_ARRAY, "[]"),
        (EMPTY_OBJECT, "{}"),
    ],
)
def test_format_cell(value, expected) -> None:
    assert format_cell(value) == expected


def test_print_result_renders_grid() -> None:
    console, buffer = _console()
    outcome = QueryOutcome(
        sql="SELECT 1",
        rows=[{"id": 1, "name": "Alice", "tags": None}],
        columns=["id", "name", "tags"],
    )

    print_result(outcome, console)

    out = buffer.getvalue()
    assert "name" in out
    assert "Alice" in out
    assert "NULL" in out
    assert "1 row(s)" in out


def test_print_result_renders_error_banner() -> None:
    console, buffer = _console()

    print_result(QueryOutcome(sql="SELEC", error="SQL Syntax Error: bad [input]"), console)

    out = buffer.getvalue()
    assert "Error" in out
    assert "SQL Syntax Error: bad [input]" in out


def test_print_result_without_rows() -> None:
    console, buffer = _console()

    print_result(QueryOutcome(sql="SELECT 1 WHERE false"), console)

    assert "No results" in buffer.getvalue()


def test_print_columns_lists_name_type_and_sample() -> None:
    console, buffer = _console()
    schema = [
        ColumnDescriptor(name="a[0]", type=TypeTag.NUMBER, sample=1),
        ColumnDescriptor(name="tags", type=TypeTag.ARRAY, sample=EMPTY_ARRAY),
    ]

    print_columns(schema, console)

    out = buffer.getvalue()
    assert "a[0]" in out
    assert "number" in out
    assert "[]" in out


def test_print_columns_without_schema() -> None:
    console, buffer = _console()

    print_columns([], console)

    assert "No columns" in buffer.getvalue()


def test_print_readiness() -> None:
    console, buffer = _console()

    print_readiness(Readiness.READY, console)

    assert "Engine Ready" in buffer.getvalue()
