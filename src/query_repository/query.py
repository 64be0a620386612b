"""
Query value objects handed from the cursor to an executor.

``Query`` is a plain snapshot: filters (implicitly AND-ed), sorts in
priority order, limit and offset.  It has no behaviour of its own beyond
building modified copies, which is how ``first()`` / ``last()`` force
their ordering and limit.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from .operators import SortOrder

if TYPE_CHECKING:
    from .filters import Filter


@dataclass(frozen=True)
class Sort:
    """A ``(field, order)`` pair."""

    field: str
    order: SortOrder = SortOrder.ASC

    @property
    def descending(self) -> bool:
        return self.order is SortOrder.DESC

    def inverted(self) -> Sort:
        return Sort(self.field, self.order.inverted())

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "order": self.order.value}


@dataclass(frozen=True)
class Query:
    """
    Immutable query specification.

    Attributes:
        filters: Top-level filters; a record must match all of them.
        sorts: Sort keys, primary first.
        limit: Maximum number of results (``None`` = unbounded).
        offset: Number of results to skip (``None`` = none).
    """

    filters: tuple[Filter, ...] = ()
    sorts: tuple[Sort, ...] = ()
    limit: int | None = None
    offset: int | None = None

    def merge(self, **changes: Any) -> Query:
        """Return a copy with the given attributes replaced."""
        if "filters" in changes:
            changes["filters"] = tuple(changes["filters"])
        if "sorts" in changes:
            changes["sorts"] = tuple(changes["sorts"])
        return replace(self, **changes)

    def with_ordering(self, *sorts: Sort) -> Query:
        """Return a copy with the sorts replaced."""
        return self.merge(sorts=sorts)

    def with_pagination(
        self,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Query:
        """Return a copy with updated pagination; ``None`` keeps the current value."""
        return self.merge(
            limit=limit if limit is not None else self.limit,
            offset=offset if offset is not None else self.offset,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        result: dict[str, Any] = {
            "filters": [f.to_dict() for f in self.filters],
        }
        if self.sorts:
            result["sorts"] = [s.to_dict() for s in self.sorts]
        if self.limit is not None:
            result["limit"] = self.limit
        if self.offset is not None:
            result["offset"] = self.offset
        return result
