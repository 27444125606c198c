"""
JSON SQL Search - query arbitrary JSON with SQL.

This package projects nested, heterogeneous JSON into a relational table and
lets you query it with SQL through an embedded DuckDB engine:

- Flattening documents into rows keyed by dot/bracket column paths
- Inferring a typed column schema across every row
- Materializing the rows as a table and running queries against it
- Column-aware completion suggestions for query editors
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from jsonsql.completion import SQL_KEYWORDS, CompletionHost, SchemaCompleter, build_completions
from jsonsql.config import Settings, get_settings
from jsonsql.domain.models import ColumnDescriptor, LoadResult, QueryOutcome, TypeTag
from jsonsql.domain.values import EMPTY_ARRAY, EMPTY_OBJECT
from jsonsql.errors import EngineError, EngineInitError, InputError, format_engine_error
from jsonsql.infrastructure import DuckDBEngine, Readiness, SqlEngine
from jsonsql.pipeline import ProjectionPipeline
from jsonsql.projection import detect_type, flatten, infer_schema, merge_type
from jsonsql.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Projection
    "EMPTY_ARRAY",
    "EMPTY_OBJECT",
    "ColumnDescriptor",
    "TypeTag",
    "detect_type",
    "flatten",
    "infer_schema",
    "merge_type",
    # Pipeline and engine
    "DuckDBEngine",
    "LoadResult",
    "ProjectionPipeline",
    "QueryOutcome",
    "Readiness",
    "SqlEngine",
    # Completion
    "SQL_KEYWORDS",
    "CompletionHost",
    "SchemaCompleter",
    "build_completions",
    # Errors
    "EngineError",
    "EngineInitError",
    "InputError",
    "format_engine_error",
    # Logging
    "configure_logging",
    "get_logger",
]
