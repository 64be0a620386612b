"""
Fluent query builder.

Example::

    users = (
        repo.find()
        .gte("age", 18)
        .not_in("name", ["root", "admin"])
        .sort("age", "desc")
        .sort("name", "asc")
        .limit(10)
        .all()
    )

Builder calls validate their input immediately and return the cursor for
chaining.  Terminal calls (``all``, ``count``, ``first``, ``last``,
``remove``) snapshot the accumulated state into a :class:`Query` and hand
it to the executor.  Builder calls after a terminal call keep
accumulating onto the same state; create a fresh cursor per query.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import InvalidArgumentError
from .factory import FilterFactory
from .filters import Filter
from .operators import SortOrder
from .query import Query, Sort
from .utils import field_name, parse_integer

if TYPE_CHECKING:
    from .ports.executor import IQueryExecutor

_SORT_ORDERS: dict[str, SortOrder] = {
    "asc": SortOrder.ASC,
    "desc": SortOrder.DESC,
}


class Cursor:
    """Accumulates filters, sorts, limit and offset for one executor."""

    def __init__(
        self,
        executor: IQueryExecutor,
        factory: FilterFactory | None = None,
    ) -> None:
        self._executor = executor
        self._factory = factory if factory is not None else FilterFactory()
        self._filters: list[Filter] = []
        self._sorts: list[Sort] = []
        self._limit: int | None = None
        self._offset: int | None = None

    # -- filters -------------------------------------------------------------

    def eq(self, field: Any, value: Any) -> Cursor:
        return self._add(self._factory.eq(field, value))

    def not_eq(self, field: Any, value: Any) -> Cursor:
        return self._add(self._factory.not_eq(field, value))

    def lt(self, field: Any, value: Any) -> Cursor:
        return self._add(self._factory.lt(field, value))

    def lte(self, field: Any, value: Any) -> Cursor:
        return self._add(self._factory.lte(field, value))

    def gt(self, field: Any, value: Any) -> Cursor:
        return self._add(self._factory.gt(field, value))

    def gte(self, field: Any, value: Any) -> Cursor:
        return self._add(self._factory.gte(field, value))

    def in_(self, field: Any, values: Any) -> Cursor:
        return self._add(self._factory.in_(field, values))

    def not_in(self, field: Any, values: Any) -> Cursor:
        return self._add(self._factory.not_in(field, values))

    def like(self, field: Any, value: Any) -> Cursor:
        return self._add(self._factory.like(field, value))

    def or_(self, *filters: Filter) -> Cursor:
        return self._add(self._factory.or_(*filters))

    def where(self, filter_: Filter) -> Cursor:
        """Add an already-constructed filter node."""
        if not isinstance(filter_, Filter):
            raise InvalidArgumentError(
                f"where() takes a Filter but you gave {filter_!r}", argument="filter"
            )
        return self._add(filter_)

    # -- ordering and pagination --------------------------------------------

    def sort(self, field: Any, order: Any = SortOrder.ASC) -> Cursor:
        """Add a sort key; the first call is the primary key, later ones break ties."""
        name = self._factory.validate_field(field)
        direction = _SORT_ORDERS.get(field_name(order) or "")
        if direction is None:
            raise InvalidArgumentError(
                f"Sort order must be 'asc' or 'desc' but you gave {order!r}",
                argument="order",
            )
        self._sorts.append(Sort(name, direction))
        return self

    def limit(self, limit: Any) -> Cursor:
        if limit is not None:
            self._limit = self._integer("Limit", limit)
        return self

    def offset(self, offset: Any) -> Cursor:
        if offset is not None:
            self._offset = self._integer("Offset", offset)
        return self

    # -- terminal operations -------------------------------------------------

    @property
    def query(self) -> Query:
        """Snapshot of the current builder state."""
        return Query(
            filters=tuple(self._filters),
            sorts=tuple(self._sorts),
            limit=self._limit,
            offset=self._offset,
        )

    def all(self) -> list[Any]:
        return self._executor.execute_find(self.query)

    def count(self) -> int:
        return self._executor.execute_count(self.query)

    def remove(self) -> None:
        """Delete every record matching the filters (sorts/limit/offset ignored)."""
        self._executor.execute_remove(self.query)

    def first(self) -> Any | None:
        return self._first_of(self._sorts_for_first())

    def last(self) -> Any | None:
        return self._first_of([s.inverted() for s in self._sorts_for_first()])

    # -- internals -----------------------------------------------------------

    def _first_of(self, sorts: list[Sort]) -> Any | None:
        results = self._executor.execute_find(self.query.merge(sorts=sorts, limit=1))
        return results[0] if results else None

    def _sorts_for_first(self) -> list[Sort]:
        if self._sorts:
            return list(self._sorts)
        return list(self._executor.default_sorts())

    def _add(self, filter_: Filter) -> Cursor:
        self._filters.append(filter_)
        return self

    @staticmethod
    def _integer(name: str, value: Any) -> int:
        parsed = parse_integer(value)
        if parsed is None:
            raise InvalidArgumentError(
                f"{name} must be an integer but you gave {value!r}",
                argument=name.lower(),
            )
        return parsed
