"""IQueryExecutor — what a cursor needs from a backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..query import Query, Sort


@runtime_checkable
class IQueryExecutor(Protocol):
    """
    Executes a :class:`Query` snapshot against one storage backend.

    Sorts, limit and offset are ignored by ``execute_count`` and
    ``execute_remove``: both operate on the whole filtered set.
    """

    def execute_find(self, query: Query) -> list[Any]: ...

    def execute_count(self, query: Query) -> int: ...

    def execute_remove(self, query: Query) -> None: ...

    def default_sorts(self) -> list[Sort]:
        """Ordering used by ``first()`` / ``last()`` when none was given."""
        ...
