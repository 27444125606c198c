"""
Infrastructure package for JSON SQL Search.

Centralizes query-engine concerns (start-up, table materialization, query
execution). Keep this layer focused on I/O and resource management, decoupled
from projection and pipeline logic.
"""

from jsonsql.infrastructure.abstract import AbstractSqlEngine, Readiness, SqlEngine
from jsonsql.infrastructure.duckdb_engine import DuckDBEngine

__all__ = [
    "AbstractSqlEngine",
    "DuckDBEngine",
    "Readiness",
    "SqlEngine",
]
