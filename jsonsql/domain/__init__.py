"""
Domain package for JSON SQL Search.

Exports the JSON value variant, the empty-container markers, and the models
shared by the projection, the engine adapter and the pipeline.
"""

from jsonsql.domain.models import (
    ROW_ID_COLUMN,
    ColumnDescriptor,
    FlatRow,
    LoadResult,
    QueryOutcome,
    TypeTag,
)
from jsonsql.domain.values import EMPTY_ARRAY, EMPTY_OBJECT, EmptyMarker, JsonValue, to_json_value

__all__ = [
    "ColumnDescriptor",
    "EMPTY_ARRAY",
    "EMPTY_OBJECT",
    "EmptyMarker",
    "FlatRow",
    "JsonValue",
    "LoadResult",
    "QueryOutcome",
    "ROW_ID_COLUMN",
    "TypeTag",
    "to_json_value",
]
