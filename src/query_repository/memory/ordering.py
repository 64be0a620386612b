"""Sorting helpers for the in-memory adapter."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..query import Sort

_NULL_RANK = 0
_BOOL_RANK = 1
_VALUE_RANK = 2


def sort_key(value: Any) -> tuple[int, Any]:
    """
    Total-order key: ``None`` < ``False`` < ``True`` < every other value.

    Non-null, non-bool values compare natively within their rank.
    """
    if value is None:
        return (_NULL_RANK, 0)
    if isinstance(value, bool):
        return (_BOOL_RANK, int(value))
    return (_VALUE_RANK, value)


def sort_records(
    records: Sequence[Mapping[str, Any]],
    sorts: Sequence[Sort],
) -> list[Mapping[str, Any]]:
    """
    Stable multi-key sort.

    The least significant key is applied first; each later pass keeps the
    relative order of ties from the previous one.
    """
    result = list(records)
    for sort in reversed(sorts):
        result.sort(key=lambda r, f=sort.field: sort_key(r.get(f)), reverse=sort.descending)
    return result
