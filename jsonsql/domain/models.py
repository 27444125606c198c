"""
Domain models for JSON SQL Search.

Defines the column descriptors produced by schema inference and the result
contracts returned by the projection pipeline. All models are frozen: a schema
is rebuilt on every load rather than edited in place.
"""
from __future__ import annotations

import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

FlatRow = Dict[str, Any]

ROW_ID_COLUMN = "_row_id"


class TypeTag(str, enum.Enum):
    """Column type detected from JSON values."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"
    MIXED = "mixed"

    def __str__(self) -> str:
        return self.value


class ColumnDescriptor(BaseModel):
    """
    One column of the projected table.
    """

    name: str = Field(..., description="Column path, e.g. 'user.tags[0]'.")
    type: TypeTag = Field(..., description="Type inferred across every row.")
    sample: Any = Field(None, description="Representative value seen during inference.")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }


class QueryOutcome(BaseModel):
    """
    Result of running one query: either rows or a normalized error message.
    """

    sql: str
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    columns: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    duration_ms: float = 0.0

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return self.error is None


class LoadResult(BaseModel):
    """
    Summary of one load: the projected row count, the fresh schema, and the
    outcome of the preview query run right after materialization.
    """

    table_name: str
    row_count: int
    schema_: List[ColumnDescriptor] = Field(default_factory=list, alias="schema")
    preview: QueryOutcome
    duration_ms: float = 0.0

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @property
    def columns(self) -> List[ColumnDescriptor]:
        return self.schema_


__all__ = [
    "ColumnDescriptor",
    "FlatRow",
    "LoadResult",
    "QueryOutcome",
    "ROW_ID_COLUMN",
    "TypeTag",
]
