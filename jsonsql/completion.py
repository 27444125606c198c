"""
Query-assistance suggestions built from the inferred schema.

The pipeline pushes every new schema, together with a fixed keyword list, to
the registered completion hosts. Hosts only render suggestions; they cannot
change the pipeline.
"""

from __future__ import annotations

import enum
import json
import re
from typing import List, Protocol, Sequence, runtime_checkable

from pydantic import BaseModel

from jsonsql.domain.models import ColumnDescriptor
from jsonsql.domain.values import EmptyMarker

SQL_KEYWORDS: List[str] = [
    "SELECT",
    "FROM",
    "WHERE",
    "GROUP BY",
    "ORDER BY",
    "LIMIT",
    "COUNT",
    "SUM",
    "AVG",
    "LIKE",
    "IN",
    "IS NULL",
]

_BARE_IDENTIFIER = re.compile(r"[a-zA-Z0-9_]+")


class CompletionKind(str, enum.Enum):
    TABLE = "table"
    KEYWORD = "keyword"
    FIELD = "field"


class CompletionItem(BaseModel):
    label: str
    kind: CompletionKind
    insert_text: str
    detail: str = ""
    documentation: str = ""

    model_config = {"frozen": True}


@runtime_checkable
class CompletionHost(Protocol):
    """Receives the full schema and keyword list on every schema change."""

    def update(self, schema: Sequence[ColumnDescriptor], keywords: Sequence[str]) -> None:
        ...


def sample_to_text(sample: object) -> str:
    """Render a sample value the way it would look in JSON."""
    if isinstance(sample, EmptyMarker):
        sample = sample.to_json()
    return json.dumps(sample, ensure_ascii=False, default=str)


def column_reference(name: str) -> str:
    """Column name as it must be written in SQL: bare if safe, quoted otherwise."""
    if _BARE_IDENTIFIER.fullmatch(name):
        return name
    return '"' + name.replace('"', '""') + '"'


def column_insert_text(name: str) -> str:
    """Text appended to a query when a column is picked from the column list."""
    return ' "' + name.replace('"', '""') + '" '


def build_completions(
    schema: Sequence[ColumnDescriptor],
    table_name: str,
    keywords: Sequence[str] = SQL_KEYWORDS,
) -> List[CompletionItem]:
    """Table name first, then keywords, then one item per column."""
    items = [CompletionItem(label=table_name, kind=CompletionKind.TABLE, insert_text=table_name)]
    items.extend(
        CompletionItem(label=keyword, kind=CompletionKind.KEYWORD, insert_text=keyword)
        for keyword in keywords
    )
    items.extend(
        CompletionItem(
            label=column.name,
            kind=CompletionKind.FIELD,
            insert_text=column_reference(column.name),
            detail=str(column.type),
            documentation=f"Sample: {sample_to_text(column.sample)}",
        )
        for column in schema
    )
    return items


class SchemaCompleter:
    """
    Completion host that keeps the latest suggestions for prefix lookups.
    """

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        self.items: List[CompletionItem] = build_completions([], table_name)

    def update(self, schema: Sequence[ColumnDescriptor], keywords: Sequence[str]) -> None:
        self.items = build_completions(schema, self.table_name, keywords)

    def complete(self, prefix: str) -> List[CompletionItem]:
        """Suggestions whose label or insert text starts with `prefix`, case-insensitively."""
        needle = prefix.casefold()
        return [
            item
            for item in self.items
            if item.label.casefold().startswith(needle)
            or item.insert_text.casefold().startswith(needle)
        ]


__all__ = [
    "CompletionHost",
    "CompletionItem",
    "CompletionKind",
    "SQL_KEYWORDS",
    "SchemaCompleter",
    "build_completions",
    "column_insert_text",
    "column_reference",
    "sample_to_text",
]
