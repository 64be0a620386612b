"""Attribute map <-> BSON document round-trip (datetime, UUID, Decimal, ObjectId)."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from bson import Decimal128, ObjectId


def serialize_value(value: Any) -> Any:
    """
    Convert Python values to BSON-safe ones.

    Aware datetimes are stored as naive UTC, which is how the driver
    encodes them anyway.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return Decimal128(value)
    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def deserialize_value(value: Any) -> Any:
    """Convert BSON values back; datetimes come back UTC-aware."""
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: deserialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [deserialize_value(v) for v in value]
    return value


def attrs_to_doc(attrs: dict[str, Any], *, id_field: str = "id") -> dict[str, Any]:
    """Convert an attribute map to a document, dropping the identity field."""
    return {
        k: serialize_value(v)
        for k, v in attrs.items()
        if k not in (id_field, "_id")
    }


def doc_to_attrs(doc: dict[str, Any], *, id_field: str = "id") -> dict[str, Any]:
    """Convert a stored document to an attribute map; ``_id`` becomes ``id_field`` as a str."""
    data = dict(doc)
    if "_id" in data:
        data[id_field] = data.pop("_id")
    return deserialize_value(data)


def to_object_id(value: Any) -> ObjectId:
    """
    Parse an identity into an ``ObjectId``.

    Raises:
        InvalidId: ``value`` is a str/bytes that is not a valid ObjectId.
        TypeError: ``value`` is of a type ObjectId cannot parse.
    """
    if isinstance(value, ObjectId):
        return value
    return ObjectId(value)


def coerce_id(value: Any) -> Any:
    """``ObjectId`` when ``value`` parses as one, else ``value`` unchanged."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


