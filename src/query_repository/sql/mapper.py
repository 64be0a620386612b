"""
ORM instance ↔ attribute map conversion.

Reads only loaded column attributes, so detached instances never trigger
a lazy load.  Drivers that drop time zone information (SQLite, MySQL)
return naive datetimes; those are read back as UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm.attributes import set_committed_value


class RecordMapper:
    """Converts between a declarative model and plain attribute dicts."""

    def __init__(self, db_model_cls: type[Any]) -> None:
        self.db_model_cls = db_model_cls
        mapper = sa_inspect(db_model_cls)
        self.columns: frozenset[str] = frozenset(a.key for a in mapper.column_attrs)
        self.primary_key: str = mapper.get_property_by_column(mapper.primary_key[0]).key

    def to_attrs(self, instance: Any) -> dict[str, Any]:
        unloaded = sa_inspect(instance).unloaded
        return {
            name: _as_utc(getattr(instance, name))
            for name in self.columns
            if name not in unloaded
        }

    def to_instance(self, attrs: dict[str, Any]) -> Any:
        return self.db_model_cls(**attrs)

    def normalise(self, instance: Any) -> Any:
        """Rewrite naive datetime attributes of a detached instance in place."""
        for name, value in self.to_attrs(instance).items():
            if isinstance(value, datetime):
                set_committed_value(instance, name, value)
        return instance


def _as_utc(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
