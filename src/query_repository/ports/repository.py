"""IRepository — the storage primitives every adapter implements."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from .executor import IQueryExecutor


@runtime_checkable
class IRepository(IQueryExecutor, Protocol):
    """
    Backend polymorphism seam.

    The cursor only depends on :class:`IQueryExecutor`; the repository
    base class builds create/update/remove on top of the remaining
    primitives.
    """

    def find_by_id(self, record_id: Any) -> Any | None: ...

    def store(self, attrs: Mapping[str, Any]) -> Any:
        """Insert when the identity is absent, otherwise overwrite. Returns the id."""
        ...

    def delete(self, record_id: Any) -> None: ...

    def field_names(self) -> set[str]: ...
