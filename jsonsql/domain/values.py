"""
JSON values as an explicit tagged variant.

Decoded JSON arrives as plain Python data (dict, list, str, int, float, bool,
None). `to_json_value` converts it once into one case per JSON kind so the
flattener can dispatch exhaustively on the case instead of probing runtime
types at every level.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class JsonNull:
    pass


@dataclass(frozen=True)
class JsonBool:
    value: bool


@dataclass(frozen=True)
class JsonNumber:
    value: Union[int, float]


@dataclass(frozen=True)
class JsonString:
    value: str


@dataclass(frozen=True)
class JsonArray:
    items: Tuple["JsonValue", ...]


@dataclass(frozen=True)
class JsonObject:
    # Key order is the object's natural (insertion) order.
    fields: Tuple[Tuple[str, "JsonValue"], ...]


JsonValue = Union[JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject]


class EmptyMarker(enum.Enum):
    """Placeholder written for an empty container at a non-root path."""

    ARRAY = "array"
    OBJECT = "object"

    def to_json(self) -> Any:
        return [] if self is EmptyMarker.ARRAY else {}

    def __repr__(self) -> str:
        return "EMPTY_ARRAY" if self is EmptyMarker.ARRAY else "EMPTY_OBJECT"


EMPTY_ARRAY = EmptyMarker.ARRAY
EMPTY_OBJECT = EmptyMarker.OBJECT


def to_json_value(raw: Any) -> JsonValue:
    """
    Convert decoded Python data into the tagged variant.

    Values that are not JSON (datetimes, sets, custom objects) become strings
    via ``str()``.
    """
    if raw is None:
        return JsonNull()
    # bool is a subclass of int; test it first.
    if isinstance(raw, bool):
        return JsonBool(raw)
    if isinstance(raw, (int, float)):
        return JsonNumber(raw)
    if isinstance(raw, str):
        return JsonString(raw)
    if isinstance(raw, (list, tuple)):
        return JsonArray(tuple(to_json_value(item) for item in raw))
    if isinstance(raw, dict):
        return JsonObject(tuple((str(key), to_json_value(value)) for key, value in raw.items()))
    return JsonString(str(raw))


def is_falsy(raw: Any) -> bool:
    """
    JSON truthiness: null, false, 0, NaN and "" are falsy.

    Unlike Python truthiness, empty arrays and objects are truthy.
    """
    if raw is None or raw is False:
        return True
    if isinstance(raw, bool):
        return False
    if isinstance(raw, (int, float)):
        return raw == 0 or (isinstance(raw, float) and math.isnan(raw))
    if isinstance(raw, str):
        return raw == ""
    return False


__all__ = [
    "EMPTY_ARRAY",
    "EMPTY_OBJECT",
    "EmptyMarker",
    "JsonArray",
    "JsonBool",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonString",
    "JsonValue",
    "is_falsy",
    "to_json_value",
]
