from __future__ import annotations

import copy
from datetime import datetime

import pytest

from jsonsql.domain.values import EMPTY_ARRAY, EMPTY_OBJECT
from jsonsql.projection.flatten import flatten

ARRAY_LENGTH = 5


@pytest.mark.parametrize("falsy", [None, False, 0, 0.0, float("nan"), ""])
def test_falsy_input_yields_no_rows(falsy) -> None:
    assert flatten(falsy) == []


def test_empty_top_level_array_yields_no_rows() -> None:
    assert flatten([]) == []


def test_empty_top_level_object_yields_identity_only() -> None:
    assert flatten({}) == [{"_row_id": 1}]


@pytest.mark.parametrize("scalar", [5, -1.5, "text", True, False, None, 0, ""])
def test_top_level_scalar_items_keep_only_row_id(scalar) -> None:
    assert flatten([scalar]) == [{"_row_id": 1}]


def test_array_yields_one_row_per_item_with_dense_ids() -> None:
    rows = flatten([{"n": i} for i in range(ARRAY_LENGTH)])

    assert len(rows) == ARRAY_LENGTH
    assert [row["_row_id"] for row in rows] == list(range(1, ARRAY_LENGTH + 1))
    assert [row["n"] for row in rows] == list(range(ARRAY_LENGTH))


def test_user_row_id_key_does_not_replace_position() -> None:
    rows = flatten([{"_row_id": 7, "a": 1}, {"_row_id": 7}])

    assert rows == [{"_row_id": 1, "a": 1}, {"_row_id": 2}]
    assert list(rows[0]) == ["_row_id", "a"]


def test_nested_object_uses_dotted_paths() -> None:
    assert flatten({"a": {"b": 1}}) == [{"_row_id": 1, "a.b": 1}]


def test_array_elements_use_bracketed_indices() -> None:
    assert flatten({"items": [1, 2]}) == [{"_row_id": 1, "items[0]": 1, "items[1]": 2}]


def test_paths_compose_arbitrarily_deep() -> None:
    rows = flatten({"a": {"b": [{"c": 1}, {"c": 2, "d": None}], "e": {"f": {"g": "deep"}}}})

    assert rows == [
        {
            "_row_id": 1,
            "a.b[0].c": 1,
            "a.b[1].c": 2,
            "a.b[1].d": None,
            "a.e.f.g": "deep",
        }
    ]


def test_nested_arrays_stack_indices() -> None:
    rows = flatten({"m": [[1, 2], []]})

    assert rows == [{"_row_id": 1, "m[0][0]": 1, "m[0][1]": 2, "m[1]": EMPTY_ARRAY}]


def test_empty_array_marker_is_distinct_from_null_and_absence() -> None:
    (row,) = flatten({"a": []})

    assert "a" in row
    assert row["a"] is EMPTY_ARRAY
    assert row["a"] is not None
    assert row != {"_row_id": 1}
    assert row != {"_row_id": 1, "a": None}


def test_empty_object_gets_its_own_marker() -> None:
    (row,) = flatten({"meta": {}, "tags": []})

    assert row["meta"] is EMPTY_OBJECT
    assert row["tags"] is EMPTY_ARRAY
    assert EMPTY_OBJECT is not EMPTY_ARRAY


def test_explicit_null_is_written() -> None:
    assert flatten({"a": None}) == [{"_row_id": 1, "a": None}]


def test_scalars_are_kept_verbatim() -> None:
    (row,) = flatten({"i": 3, "f": 2.5, "s": "x", "t": True, "z": 0, "empty": ""})

    assert row == {"_row_id": 1, "i": 3, "f": 2.5, "s": "x", "t": True, "z": 0, "empty": ""}
    assert row["t"] is True


def test_object_key_order_is_preserved() -> None:
    (row,) = flatten({"z": 1, "a": {"y": 2, "b": 3}, "m": 4})

    assert list(row) == ["_row_id", "z", "a.y", "a.b", "m"]


def test_array_item_at_top_level_gets_bare_bracket_paths() -> None:
    assert flatten([[1, 2]]) == [{"_row_id": 1, "[0]": 1, "[1]": 2}]


def test_non_json_values_are_stringified() -> None:
    (row,) = flatten({"when": datetime(2024, 1, 2, 3, 4, 5)})

    assert row["when"] == "2024-01-02 03:04:05"


def test_keys_with_path_characters_can_collide() -> None:
    # Known limitation: "a.b" as a key and a -> b as nesting share one path.
    (row,) = flatten({"a.b": 1, "a": {"b": 2}})

    assert row == {"_row_id": 1, "a.b": 2}


def test_rows_differ_in_shape_per_item(people) -> None:
    rows = flatten(people)

    assert rows[0] == {
        "_row_id": 1,
        "id": 1,
        "user.name": "Alice",
        "user.tags[0]": "admin",
        "user.tags[1]": "beta",
        "score": 10,
    }
    assert rows[1] == {
        "_row_id": 2,
        "id": 2,
        "user.name": "Bob",
        "user.tags": EMPTY_ARRAY,
        "score": None,
        "extra": "x",
    }


def test_input_is_not_mutated(people) -> None:
    before = copy.deepcopy(people)
    flatten(people)
    assert people == before
