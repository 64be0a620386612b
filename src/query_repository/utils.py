"""Small helpers shared by the builder and the adapters."""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable
from enum import Enum
from typing import Any

_DIGITS_RE = re.compile(r"\d+")


def field_name(field: Any) -> str | None:
    """
    Normalise a field identifier to ``str``.

    Accepts a ``str`` or an ``Enum`` member whose value is a ``str``
    (the symbol-like form).  Returns ``None`` for anything else.
    """
    if isinstance(field, Enum):
        return field.value if isinstance(field.value, str) else None
    if isinstance(field, str):
        return field
    return None


def is_finite_collection(value: Any) -> bool:
    """True for sized, iterable containers other than text/bytes."""
    return isinstance(value, Collection) and not isinstance(
        value, (str, bytes, bytearray)
    )


def parse_integer(value: Any) -> int | None:
    """
    Parse an integer-like value (``int`` or a string of digits).

    ``bool`` is rejected even though it subclasses ``int``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and _DIGITS_RE.fullmatch(value.strip()):
        return int(value)
    return None


def unique(values: Iterable[Any]) -> list[Any]:
    """
    De-duplicate preserving first-seen order.

    Values are keyed by ``(type, value)``, so ``1`` and ``True`` stay
    distinct.  Unhashable values fall back to a linear scan of the other
    unhashable values seen so far.
    """
    result: list[Any] = []
    seen: set[tuple[type, Any]] = set()
    unhashable: list[Any] = []
    for value in values:
        try:
            key = (type(value), value)
            if key in seen:
                continue
            seen.add(key)
        except TypeError:
            if any(_same(value, other) for other in unhashable):
                continue
            unhashable.append(value)
        result.append(value)
    return result


def split_nulls(values: Iterable[Any]) -> tuple[list[Any], bool]:
    """Split membership values into ``(unique non-null values, has_null)``."""
    non_null: list[Any] = []
    has_null = False
    for value in unique(values):
        if value is None:
            has_null = True
        else:
            non_null.append(value)
    return non_null, has_null


def _same(a: Any, b: Any) -> bool:
    # 1 == True in Python; keep them distinct for membership lists
    return type(a) is type(b) and a == b
