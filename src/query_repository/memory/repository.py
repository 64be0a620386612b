"""MemoryRepository — dict-backed repository for tests and small datasets."""

from __future__ import annotations

import copy
import logging
import threading
from typing import TYPE_CHECKING, Any

from ..primitives.id_generator import SequentialIDGenerator
from ..repository import Repository
from .operators import build_default_registry
from .ordering import sort_records

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pydantic import BaseModel

    from ..primitives.clock import Clock
    from ..primitives.id_generator import IIDGenerator
    from ..query import Query
    from .evaluator import MemoryOperatorRegistry

logger = logging.getLogger(__name__)


class MemoryRepository(Repository):
    """
    In-memory implementation of :class:`Repository`.

    Records are stored as plain attribute dicts keyed by identity, in
    insertion order, and validated through ``model_cls`` (a pydantic
    model) on every write.  Results are fresh model instances, so
    mutating a returned object never changes the store.

    All reads and writes hold an internal re-entrant lock.
    """

    def __init__(
        self,
        model_cls: type[BaseModel],
        *,
        primary_key: str = "id",
        domain_model_cls: type[Any] | None = None,
        clock: Clock | None = None,
        id_generator: IIDGenerator | None = None,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        super().__init__(
            model_cls,
            primary_key=primary_key,
            domain_model_cls=domain_model_cls,
            clock=clock,
        )
        self._id_generator = id_generator or SequentialIDGenerator()
        self._registry = registry or build_default_registry()
        self._store: dict[Any, dict[str, Any]] = {}
        self._lock = threading.RLock()

    # -- query execution -----------------------------------------------------

    def execute_find(self, query: Query) -> list[Any]:
        with self._lock:
            records = sort_records(self._select(query), query.sorts)
        start = query.offset or 0
        stop = start + query.limit if query.limit is not None else None
        page = records[start:stop]
        logger.debug(
            "Memory find %s matched %d record(s), returning %d",
            query.to_dict(),
            len(records),
            len(page),
        )
        return [self._build(r) for r in page]

    def execute_count(self, query: Query) -> int:
        with self._lock:
            count = len(self._select(query))
        logger.debug("Memory count %s = %d", query.to_dict(), count)
        return count

    def execute_remove(self, query: Query) -> None:
        with self._lock:
            doomed = [r[self.primary_key] for r in self._select(query)]
            for record_id in doomed:
                self._store.pop(record_id, None)
        logger.debug("Memory remove deleted %d record(s)", len(doomed))

    # -- record primitives ---------------------------------------------------

    def find_by_id(self, record_id: Any) -> Any | None:
        with self._lock:
            try:
                record = self._store.get(record_id)
            except TypeError:
                logger.debug("Unhashable identity %r treated as not found", record_id)
                return None
            return self._build(record) if record is not None else None

    def store(self, attrs: Mapping[str, Any]) -> Any:
        data = dict(attrs)
        with self._lock:
            record_id = data.get(self.primary_key)
            if record_id is None:
                record_id = self._id_generator.next_id()
                data[self.primary_key] = record_id
            self._store[record_id] = self._validated(data)
        logger.debug("Memory stored record %r", record_id)
        return record_id

    def delete(self, record_id: Any) -> None:
        with self._lock:
            self._store.pop(record_id, None)

    def field_names(self) -> set[str]:
        return set(self.model_cls.model_fields)

    # -- test helpers --------------------------------------------------------

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    # -- internals -----------------------------------------------------------

    def _select(self, query: Query) -> list[dict[str, Any]]:
        return [
            record
            for record in self._store.values()
            if all(self._registry.matches(record, f) for f in query.filters)
        ]

    def _validated(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.model_cls.model_validate(data).model_dump()

    def _build(self, attrs: Mapping[str, Any]) -> Any:
        return super()._build(copy.deepcopy(dict(attrs)))
