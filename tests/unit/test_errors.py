from __future__ import annotations

from jsonsql.errors import (
    EngineError,
    EngineInitError,
    InputError,
    JsonSqlError,
    format_engine_error,
)

PARSER_MESSAGE = 'Parser Error: syntax error at or near "SELEC"\n\nLINE 1: SELEC * FROM t\n        ^'
CATALOG_MESSAGE = "Catalog Error: Table with name nope does not exist!\nDid you mean \"t\"?"


def test_parser_errors_are_cut_to_first_line_and_relabelled() -> None:
    assert format_engine_error(PARSER_MESSAGE) == (
        'SQL Syntax Error: Parser Error: syntax error at or near "SELEC"'
    )


def test_other_errors_pass_through_verbatim() -> None:
    assert format_engine_error(CATALOG_MESSAGE) == CATALOG_MESSAGE


def test_format_accepts_exceptions() -> None:
    assert format_engine_error(EngineError(PARSER_MESSAGE)).startswith("SQL Syntax Error: ")
    assert format_engine_error(RuntimeError("boom")) == "boom"


def test_hierarchy() -> None:
    assert issubclass(EngineInitError, EngineError)
    assert issubclass(EngineError, JsonSqlError)
    assert issubclass(InputError, JsonSqlError)
    assert EngineError("x").message == "x"
