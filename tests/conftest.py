"""
Pytest configuration for JSON SQL Search.

Provides fixtures for:
- Sample documents with nested, sparse and conflicting shapes
- A real in-memory DuckDB engine, closed after each test
- Settings isolation from the caller's environment
"""

from __future__ import annotations

from typing import Any, Generator

import pytest

from jsonsql.config import get_settings
from jsonsql.infrastructure.duckdb_engine import DuckDBEngine

_SETTINGS_ENV = (
    "TABLE_NAME",
    "DEFAULT_QUERY_LIMIT",
    "DUCKDB_DATABASE",
    "DUCKDB_THREADS",
    "ENGINE_INIT_TIMEOUT_SECONDS",
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Run every test against default settings.

    Clears the settings cache before and after so env overrides made by a
    test never leak into the next one.
    """
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def people() -> list[dict[str, Any]]:
    """
    Two documents that differ in shape: nested objects, an array that is
    populated in one and empty in the other, and a key present only once.
    """
    return [
        {"id": 1, "user": {"name": "Alice", "tags": ["admin", "beta"]}, "score": 10},
        {"id": 2, "user": {"name": "Bob", "tags": []}, "score": None, "extra": "x"},
    ]


@pytest.fixture
def duckdb_engine() -> Generator[DuckDBEngine, None, None]:
    """
    Fresh in-memory DuckDB engine; not started until a test awaits it.
    """
    engine = DuckDBEngine(database=":memory:", init_timeout_seconds=30)
    try:
        yield engine
    finally:
        engine.close()
