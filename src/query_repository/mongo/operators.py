"""Leaf operator compilation for MongoDB query documents."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ..operators import FilterOperator
from ..utils import unique

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..filters import Filter

_MONGO_OP_MAP: dict[FilterOperator, str] = {
    FilterOperator.NE: "$ne",
    FilterOperator.GT: "$gt",
    FilterOperator.GE: "$gte",
    FilterOperator.LT: "$lt",
    FilterOperator.LE: "$lte",
    FilterOperator.IN: "$in",
    FilterOperator.NOT_IN: "$nin",
}


def compile_operator(
    filter_: Filter,
    convert: Callable[[Any], Any],
) -> dict[str, Any]:
    """
    Compile a non-equality leaf filter to an operator document.

    ``convert`` turns one filter value into its stored form (e.g. an
    identity string into an ``ObjectId``).

    Example::

        compile_operator(Lt("age", 19), convert)     # {"$lt": 19}
        compile_operator(Like("name", "st"), convert)  # {"$regex": "st", "$options": "i"}
    """
    op = filter_.operator
    if op is FilterOperator.LIKE:
        return {"$regex": re.escape(filter_.value), "$options": "i"}
    mongo_op = _MONGO_OP_MAP.get(op)
    if mongo_op is None:
        raise ValueError(f"Unsupported operator for MongoDB: {op}")
    if op in (FilterOperator.IN, FilterOperator.NOT_IN):
        return {mongo_op: [convert(v) for v in unique(filter_.value)]}
    return {mongo_op: convert(filter_.value)}
