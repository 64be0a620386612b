"""
Repository base class.

Implements the caller-facing surface (create / update / remove and the
query shortcuts) on top of a handful of storage primitives that each
adapter provides:

- ``execute_find`` / ``execute_count`` / ``execute_remove``: run a
  :class:`Query` snapshot produced by a :class:`Cursor`
- ``find_by_id``: identity lookup, ``None`` when absent or unparsable
- ``store``: insert (no identity) or overwrite (identity present)
- ``delete``: remove one record by identity
- ``field_names``: the storage model's fields

Every query chain starts from a fresh cursor::

    repo.eq("name", "Steve").sort("age", "desc").first()
    repo.in_("age", [18, 25]).remove()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .cursor import Cursor
from .exceptions import InvalidArgumentError, RecordNotFoundError
from .factory import FilterFactory
from .primitives.clock import SystemClock
from .query import Sort
from .utils import field_name

if TYPE_CHECKING:
    from .filters import Filter
    from .primitives.clock import Clock
    from .query import Query

CREATED_AT = "created_at"
UPDATED_AT = "updated_at"


class Repository(ABC):
    """
    Storage-agnostic repository.

    Parameters
    ----------
    model_cls:
        The storage-shape model (a pydantic model, or a declarative ORM
        class for the relational adapter).
    primary_key:
        Name of the identity field.
    domain_model_cls:
        Optional type results are projected into, decoupling what callers
        receive from the storage schema.
    clock:
        Time source for ``created_at`` / ``updated_at``.
    """

    def __init__(
        self,
        model_cls: type[Any],
        *,
        primary_key: str = "id",
        domain_model_cls: type[Any] | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.model_cls = model_cls
        self.domain_model_cls = domain_model_cls
        self.primary_key = primary_key
        self.filters = FilterFactory()
        self._clock = clock if clock is not None else SystemClock()

    # -- storage primitives --------------------------------------------------

    @abstractmethod
    def execute_find(self, query: Query) -> list[Any]: ...

    @abstractmethod
    def execute_count(self, query: Query) -> int: ...

    @abstractmethod
    def execute_remove(self, query: Query) -> None: ...

    @abstractmethod
    def find_by_id(self, record_id: Any) -> Any | None: ...

    @abstractmethod
    def store(self, attrs: Mapping[str, Any]) -> Any: ...

    @abstractmethod
    def delete(self, record_id: Any) -> None: ...

    @abstractmethod
    def field_names(self) -> set[str]: ...

    def default_sorts(self) -> list[Sort]:
        """Creation order: ``created_at`` when the model has it, then identity."""
        sorts = []
        if CREATED_AT in self.field_names():
            sorts.append(Sort(CREATED_AT))
        sorts.append(Sort(self.primary_key))
        return sorts

    # -- create / update / remove -------------------------------------------

    def create(self, model_or_attrs: Any = None) -> Any:
        """Store a new record from ``None``, a mapping, or a model instance."""
        attrs = self._attrs_for_create(model_or_attrs)
        attrs.pop(self.primary_key, None)
        self._verify_attributes(attrs)
        self._stamp(attrs, CREATED_AT, UPDATED_AT)
        record_id = self.store(attrs)
        return self.find_by_id(record_id)

    def update(self, model_or_id: Any, attrs: Mapping[str, Any] | None = None) -> Any:
        """
        Overwrite a stored record.

        Stored attributes are overlaid with the passed model's attributes
        (when a model is given) and then with ``attrs``.  Changes to the
        identity are ignored.
        """
        record_id = self._identity_of(model_or_id)
        current = self.find_by_id(record_id)
        if current is None:
            raise RecordNotFoundError("update", record_id)

        changes = {
            k: v
            for k, v in self._normalise_attrs(attrs or {}).items()
            if k not in self.protected_fields()
        }
        self._verify_attributes(changes)

        known = self.field_names()
        merged = {k: v for k, v in self._attrs_of(current).items() if k in known}
        if self._is_model(model_or_id):
            merged.update(
                (k, v) for k, v in self._attrs_of(model_or_id).items() if k in known
            )
        merged.update(changes)
        self._stamp(merged, UPDATED_AT)
        merged[self.primary_key] = record_id

        self.store(merged)
        return self.find_by_id(record_id)

    def remove(self, model: Any = None) -> None:
        """Remove one record, or every record when no model is given."""
        if model is not None:
            self.remove_by_id(self._identity_of(model))
        else:
            self.find().remove()

    def remove_by_id(self, record_id: Any) -> None:
        if self.find_by_id(record_id) is None:
            raise RecordNotFoundError("remove", record_id)
        self.delete(record_id)

    def protected_fields(self) -> set[str]:
        """Fields ``update`` never lets callers change."""
        return {self.primary_key}

    # -- query shortcuts -----------------------------------------------------

    def find(self) -> Cursor:
        """Start a new query chain."""
        return Cursor(self, self.filters)

    def all(self) -> list[Any]:
        return self.find().all()

    def first(self) -> Any | None:
        return self.find().first()

    def last(self) -> Any | None:
        return self.find().last()

    def count(self) -> int:
        return self.find().count()

    def eq(self, field: Any, value: Any) -> Cursor:
        return self.find().eq(field, value)

    def not_eq(self, field: Any, value: Any) -> Cursor:
        return self.find().not_eq(field, value)

    def lt(self, field: Any, value: Any) -> Cursor:
        return self.find().lt(field, value)

    def lte(self, field: Any, value: Any) -> Cursor:
        return self.find().lte(field, value)

    def gt(self, field: Any, value: Any) -> Cursor:
        return self.find().gt(field, value)

    def gte(self, field: Any, value: Any) -> Cursor:
        return self.find().gte(field, value)

    def in_(self, field: Any, values: Any) -> Cursor:
        return self.find().in_(field, values)

    def not_in(self, field: Any, values: Any) -> Cursor:
        return self.find().not_in(field, values)

    def like(self, field: Any, value: Any) -> Cursor:
        return self.find().like(field, value)

    def or_(self, *filters: Filter) -> Cursor:
        return self.find().or_(*filters)

    def sort(self, field: Any, order: Any = "asc") -> Cursor:
        return self.find().sort(field, order)

    def limit(self, limit: Any) -> Cursor:
        return self.find().limit(limit)

    def offset(self, offset: Any) -> Cursor:
        return self.find().offset(offset)

    # -- model helpers (overridable) -----------------------------------------

    def _model_types(self) -> tuple[type[Any], ...]:
        return tuple(t for t in (self.model_cls, self.domain_model_cls) if t is not None)

    def _is_model(self, obj: Any) -> bool:
        return isinstance(obj, self._model_types())

    def _attrs_of(self, model: Any) -> dict[str, Any]:
        """Attribute map of a model instance."""
        return dict(model.model_dump())

    def _build(self, attrs: Mapping[str, Any]) -> Any:
        """Construct the object returned to callers from a stored attribute map."""
        cls = self.domain_model_cls or self.model_cls
        return cls.model_validate(dict(attrs))

    def _identity_of(self, model_or_id: Any) -> Any:
        if self._is_model(model_or_id):
            return getattr(model_or_id, self.primary_key)
        return model_or_id

    def _attrs_for_create(self, model_or_attrs: Any) -> dict[str, Any]:
        if model_or_attrs is None:
            return {}
        if isinstance(model_or_attrs, Mapping):
            return self._normalise_attrs(model_or_attrs)
        if self._is_model(model_or_attrs):
            return self._attrs_of(model_or_attrs)
        raise InvalidArgumentError(
            f"A mapping or a {self.model_cls.__name__} must be given to create a record",
            argument="model_or_attrs",
        )

    @staticmethod
    def _normalise_attrs(attrs: Any) -> dict[str, Any]:
        if not isinstance(attrs, Mapping):
            raise InvalidArgumentError(
                f"Attributes must be a mapping but you gave {attrs!r}",
                argument="attrs",
            )
        normalised: dict[str, Any] = {}
        for key, value in attrs.items():
            name = field_name(key)
            if name is None:
                raise InvalidArgumentError(
                    f"Field name must be a str but you gave {key!r}", argument="attrs"
                )
            normalised[name] = value
        return normalised

    def _verify_attributes(self, attrs: Mapping[str, Any]) -> None:
        known = self.field_names()
        for name in attrs:
            if name not in known:
                raise InvalidArgumentError(f"Unknown attribute: {name}", argument=name)

    def _stamp(self, attrs: dict[str, Any], *fields: str) -> None:
        known = self.field_names()
        stamped = [f for f in fields if f in known]
        if stamped:
            now = self._clock.now()
            for f in stamped:
                attrs[f] = now
