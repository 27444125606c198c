"""
Flatten nested JSON into relational rows.

Every top-level item becomes one row keyed by column paths: dotted segments
for object keys and bracketed zero-based indices for array elements, e.g.
``user.tags[0]`` or ``a.b[2].c``. Each row also carries ``_row_id``, the
1-based position of its item.

Keys that themselves contain ``.``, ``[`` or ``]`` can produce colliding
paths; they are not escaped.
"""

from __future__ import annotations

from typing import Any, List, assert_never

from jsonsql.domain.models import ROW_ID_COLUMN, FlatRow
from jsonsql.domain.values import (
    EMPTY_ARRAY,
    EMPTY_OBJECT,
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    is_falsy,
    to_json_value,
)


def flatten(data: Any) -> List[FlatRow]:
    """
    Flatten decoded JSON into one row per top-level item.

    An array is split into its elements; any other value is a single item.
    Falsy input (null, false, 0, "") yields no rows. A top-level scalar or
    null item yields a row holding only ``_row_id``.

    Example
    -------
        >>> flatten({"items": [1, 2]})
        [{'_row_id': 1, 'items[0]': 1, 'items[1]': 2}]
    """
    if is_falsy(data):
        return []

    items = data if isinstance(data, (list, tuple)) else [data]

    rows: List[FlatRow] = []
    for index, item in enumerate(items):
        row: FlatRow = {ROW_ID_COLUMN: index + 1}
        _walk(to_json_value(item), "", row)
        # A user key named _row_id must not replace the position.
        row[ROW_ID_COLUMN] = index + 1
        rows.append(row)
    return rows


def _walk(value: JsonValue, prefix: str, row: FlatRow) -> None:
    if isinstance(value, JsonNull):
        if prefix:
            row[prefix] = None
    elif isinstance(value, (JsonBool, JsonNumber, JsonString)):
        if prefix:
            row[prefix] = value.value
    elif isinstance(value, JsonArray):
        if not value.items:
            if prefix:
                row[prefix] = EMPTY_ARRAY
            return
        for index, item in enumerate(value.items):
            _walk(item, f"{prefix}[{index}]", row)
    elif isinstance(value, JsonObject):
        if not value.fields:
            if prefix:
                row[prefix] = EMPTY_OBJECT
            return
        for key, item in value.fields:
            _walk(item, f"{prefix}.{key}" if prefix else key, row)
    else:
        assert_never(value)


__all__ = ["flatten"]
