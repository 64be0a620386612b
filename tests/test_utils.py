from __future__ import annotations

import pytest

from query_repository.utils import (
    field_name,
    is_finite_collection,
    parse_integer,
    split_nulls,
    unique,
)


def test_unique_preserves_first_seen_order() -> None:
    assert unique([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_unique_keeps_equal_values_of_different_types() -> None:
    assert unique([1, True, 1.0, 1, True]) == [1, True, 1.0]


def test_unique_handles_unhashable_values() -> None:
    assert unique([[1], 1, [1], {"a": 1}, {"a": 1}, 1]) == [[1], 1, {"a": 1}]


def test_unique_scales_to_large_lists() -> None:
    values = list(range(50_000)) * 2
    assert unique(values) == list(range(50_000))


def test_split_nulls() -> None:
    assert split_nulls([1, None, 2, None, 1]) == ([1, 2], True)
    assert split_nulls([]) == ([], False)


@pytest.mark.parametrize(
    ("raw", "parsed"),
    [(0, 0), (7, 7), ("12", 12), (" 3 ", 3), (-1, None), (True, None), ("1.5", None)],
)
def test_parse_integer(raw, parsed) -> None:
    assert parse_integer(raw) == parsed


def test_field_name_and_collections() -> None:
    assert field_name("age") == "age"
    assert field_name(3) is None
    assert is_finite_collection((1,))
    assert not is_finite_collection("abc")
