"""
Exception hierarchy and error-message normalization for JSON SQL Search.

Each error is recovered where it happens and rendered to the user:

- `InputError`: JSON text that does not parse; the loaded table is untouched.
- `EngineInitError`: the engine failed to start or timed out.
- `EngineError`: the engine rejected a statement.
"""

from __future__ import annotations

from typing import Union

SYNTAX_ERROR_LABEL = "SQL Syntax Error"


class JsonSqlError(Exception):
    """Base class for all errors raised by this package."""


class InputError(JsonSqlError):
    """Raised when text supplied for loading is not valid JSON."""


class EngineError(JsonSqlError):
    """Raised when the query engine rejects an operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EngineInitError(EngineError):
    """Raised when the query engine cannot be started."""


def format_engine_error(error: Union[BaseException, str]) -> str:
    """
    Normalize an engine error message for display.

    Parser errors are cut to their first line and labelled as syntax errors;
    anything else passes through verbatim.
    """
    message = error if isinstance(error, str) else (getattr(error, "message", None) or str(error))
    if "Parser Error" in message:
        return f"{SYNTAX_ERROR_LABEL}: {message.splitlines()[0]}"
    return message


__all__ = [
    "EngineError",
    "EngineInitError",
    "InputError",
    "JsonSqlError",
    "SYNTAX_ERROR_LABEL",
    "format_engine_error",
]
