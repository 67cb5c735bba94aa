"""Tests for walking JSON values along compiled paths."""

import copy

import pytest

from jdx.query import (
    Filter,
    Index,
    Key,
    Slice,
    Wildcard,
    get_available_keys,
    parse,
    parse_predicate,
    traverse,
)
from jdx.values import MISSING


def test_traverse_root_returns_whole_value() -> None:
    data = {"a": 1}
    result = traverse(data, [])

    assert result.value == {"a": 1}
    assert result.parent is MISSING
    assert result.depth == 0


def test_traverse_nested_keys() -> None:
    data = {"a": {"b": {"c": 42}}}
    result = traverse(data, [Key("a"), Key("b"), Key("c")])

    assert result.value == 42
    assert result.parent == {"c": 42}
    assert result.depth == 3


def test_traverse_negative_index() -> None:
    result = traverse({"items": [10, 20, 30]}, [Key("items"), Index(-1)])

    assert result.value == 30
    assert result.found


@pytest.mark.parametrize("items", [[1], [1, 2], ["a", "b", "c", "d"]])
def test_negative_one_matches_last_index(items: list) -> None:
    data = {"items": items}
    last = traverse(data, [Key("items"), Index(len(items) - 1)])

    assert traverse(data, [Key("items"), Index(-1)]).value == last.value


def test_traverse_null_value_is_found() -> None:
    result = traverse({"a": None}, [Key("a")])

    assert result.found
    assert result.value is None


def test_traverse_missing_key_reports_container() -> None:
    data = {"user": {"name": "Alice"}}
    result = traverse(data, [Key("user"), Key("email")])

    assert result.value is MISSING
    assert not result.found
    assert result.parent == {"name": "Alice"}
    assert result.depth == 1


def test_traverse_key_on_array_is_type_mismatch() -> None:
    result = traverse({"items": [1, 2]}, [Key("items"), Key("name")])

    assert not result.found
    assert result.parent == [1, 2]
    assert result.depth == 1


@pytest.mark.parametrize("index", [2, 99, -3, -99])
def test_traverse_index_out_of_bounds(index: int) -> None:
    result = traverse({"items": [1, 2]}, [Key("items"), Index(index)])

    assert not result.found
    assert result.parent == [1, 2]


def test_traverse_index_on_object_fails() -> None:
    result = traverse({"a": 1}, [Index(0)])

    assert not result.found
    assert result.depth == 0


def test_traverse_slice() -> None:
    data = {"items": [0, 1, 2, 3, 4]}

    assert traverse(data, [Key("items"), Slice(1, 3)]).value == [1, 2]
    assert traverse(data, [Key("items"), Slice(2, None)]).value == [2, 3, 4]
    assert traverse(data, [Key("items"), Slice(None, 2)]).value == [0, 1]
    assert traverse(data, [Key("items"), Slice(-2, None)]).value == [3, 4]
    assert traverse(data, [Key("items"), Slice(None, -1)]).value == [0, 1, 2, 3]


@pytest.mark.parametrize(
    ("start", "end"),
    [(0, 10), (-10, 2), (3, 1), (7, 9), (-1, -3), (None, None), (2, -2)],
)
def test_slice_length_matches_clamped_bounds(start, end) -> None:
    items = list(range(5))
    n = len(items)

    def clamp(bound: int | None, default: int) -> int:
        value = default if bound is None else bound
        if value < 0:
            value += n
        return min(max(value, 0), n)

    lo, hi = clamp(start, 0), clamp(end, n)
    result = traverse(items, [Slice(start, end)])

    assert len(result.value) == max(hi - lo, 0)


def test_slice_terminates_walk() -> None:
    data = {"items": [{"name": "a"}, {"name": "b"}]}
    result = traverse(data, [Key("items"), Slice(0, 1), Key("name")])

    assert result.value == [{"name": "a"}]
    assert result.depth == 2


def test_traverse_wildcard_object() -> None:
    result = traverse({"a": 1, "b": 2}, [Wildcard()])

    assert sorted(result.value) == [1, 2]
    assert result.parent == {"a": 1, "b": 2}
    assert result.depth == 1


def test_traverse_wildcard_array_is_identity_and_terminates() -> None:
    data = {"items": [1, 2, 3]}
    result = traverse(data, [Key("items"), Wildcard(), Key("ignored")])

    assert result.value == [1, 2, 3]
    assert result.parent == data
    assert result.depth == 2


def test_traverse_wildcard_on_scalar_fails() -> None:
    result = traverse({"a": 1}, [Key("a"), Wildcard()])

    assert not result.found
    assert result.parent == 1


def test_traverse_filter_keeps_matches_in_order() -> None:
    data = {
        "items": [
            {"name": "A", "price": 5},
            {"name": "B", "price": 15},
            {"name": "C", "price": 8},
            {"name": "D"},
        ]
    }
    result = traverse(data, parse(".items[price < 10]"))

    assert result.value == [{"name": "A", "price": 5}, {"name": "C", "price": 8}]
    assert result.depth == 2


def test_filter_continues_with_next_segment() -> None:
    data = {"items": [{"price": 5}, {"price": 20}]}
    predicate = parse_predicate("price < 10")

    result = traverse(data, [Key("items"), Filter(predicate), Key("whatever")])

    assert not result.found
    assert result.parent == [{"price": 5}]
    assert result.depth == 2


def test_filter_then_index() -> None:
    data = {"users": [{"age": 20, "n": 1}, {"age": 40, "n": 2}, {"age": 50, "n": 3}]}

    result = traverse(data, parse(".users[age > 30][0].n"))

    assert result.value == 2
    assert result.depth == 4


def test_filter_on_object_fails() -> None:
    result = traverse({"a": {"b": 1}}, parse(".a[b == 1]"))

    assert not result.found
    assert result.parent == {"b": 1}


def test_traverse_returns_copies() -> None:
    data = {"items": [{"tags": ["x"]}]}
    before = copy.deepcopy(data)

    result = traverse(data, [Key("items")])
    result.value[0]["tags"].append("y")

    assert data == before


def test_get_available_keys() -> None:
    assert get_available_keys({"banana": 1, "apple": 2, "cherry": 3}) == [
        "apple",
        "banana",
        "cherry",
    ]
    assert get_available_keys([10, 20, 30]) == ["[0]", "[1]", "[2]"]
    assert get_available_keys(42) == []
