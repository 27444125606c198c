"""
Infer a column schema from flattened rows.

Inference is a fold over every (column, value) pair of every row. Each column
starts with the type of its first value; later values refine it through
`merge_type`:

- null carries no information, so the first non-null type replaces it;
- two different non-null types downgrade the column to ``string``;
- anything else leaves the column unchanged.

The ``mixed`` tag is part of the type domain but conflicts always resolve to
``string``.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from jsonsql.domain.models import ColumnDescriptor, TypeTag
from jsonsql.domain.values import EmptyMarker

ISO_DATE_REGEX = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?"
)

# Punctuation order of the default Unicode collation for the characters that
# show up in column paths and JSON keys; unlisted punctuation sorts after them.
_PUNCTUATION_ORDER = "_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"


def detect_type(value: Any) -> TypeTag:
    """Map one flattened value to its type tag."""
    if value is None:
        return TypeTag.NULL
    if isinstance(value, bool):
        return TypeTag.BOOLEAN
    if isinstance(value, (int, float)):
        return TypeTag.NUMBER
    if isinstance(value, EmptyMarker):
        return TypeTag.ARRAY if value is EmptyMarker.ARRAY else TypeTag.OBJECT
    if isinstance(value, (list, tuple)):
        return TypeTag.ARRAY
    if isinstance(value, dict):
        return TypeTag.OBJECT
    if isinstance(value, str) and ISO_DATE_REGEX.fullmatch(value):
        return TypeTag.DATE
    return TypeTag.STRING


def merge_type(existing: TypeTag, incoming: TypeTag) -> TypeTag:
    """Refine a column type with the type of a newly seen value."""
    if existing is TypeTag.NULL and incoming is not TypeTag.NULL:
        return incoming
    if existing is not TypeTag.MIXED and existing is not incoming and incoming is not TypeTag.NULL:
        return TypeTag.STRING
    return existing


def refine(column: ColumnDescriptor, value: Any) -> ColumnDescriptor:
    """Return the descriptor after observing one more value for its column."""
    incoming = detect_type(value)
    merged = merge_type(column.type, incoming)
    if merged is column.type:
        return column
    if column.type is TypeTag.NULL:
        # Promotion from null also adopts the first informative sample.
        return column.model_copy(update={"type": merged, "sample": value})
    return column.model_copy(update={"type": merged})


def collation_key(name: str) -> Tuple[Tuple[Tuple[int, int], ...], Tuple[int, ...], str]:
    """
    Sort key approximating locale-aware string comparison.

    Whitespace sorts first, then punctuation, digits and letters. Letters
    compare without case or accents first; lowercase wins a tie.
    """
    primary: List[Tuple[int, int]] = []
    tertiary: List[int] = []
    for char in name:
        base = unicodedata.normalize("NFKD", char)[0]
        if base.isalpha():
            primary.append((3, ord(base.casefold()[0])))
        elif base.isspace():
            primary.append((-1, ord(base)))
        elif base.isdigit():
            primary.append((2, int(unicodedata.digit(base, 0))))
        elif base in _PUNCTUATION_ORDER:
            primary.append((0, _PUNCTUATION_ORDER.index(base)))
        else:
            primary.append((1, ord(base)))
        tertiary.append(1 if char.isupper() else 0)
    return tuple(primary), tuple(tertiary), name


def infer_schema(rows: Iterable[Mapping[str, Any]]) -> List[ColumnDescriptor]:
    """
    Build one descriptor per distinct column across all rows, sorted by name.

    Never raises: every value has a type, and conflicts are resolved by
    `merge_type`.
    """
    columns: Dict[str, ColumnDescriptor] = {}
    for row in rows:
        for name, value in row.items():
            current = columns.get(name)
            if current is None:
                columns[name] = ColumnDescriptor(name=name, type=detect_type(value), sample=value)
            else:
                columns[name] = refine(current, value)

    return sorted(columns.values(), key=lambda column: collation_key(column.name))


__all__ = [
    "ISO_DATE_REGEX",
    "collation_key",
    "detect_type",
    "infer_schema",
    "merge_type",
    "refine",
]
