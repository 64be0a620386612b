"""
Exception hierarchy for query-repository.

All exceptions inherit from ``QueryRepositoryError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class QueryRepositoryError(Exception):
    """Base exception for all query-repository errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class InvalidArgumentError(QueryRepositoryError, ValueError):
    """Malformed filter, sort, limit, offset or record payload.

    Always raised synchronously by the builder call that received the
    offending input, never deferred to execution time.
    """

    def __init__(self, message: str, argument: str | None = None) -> None:
        self.message = message
        self.argument = argument
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_ARGUMENT",
            "message": self.message,
            "argument": self.argument,
        }


class RecordNotFoundError(QueryRepositoryError, LookupError):
    """An update or remove targeted an identity with no stored record."""

    def __init__(self, operation: str, record_id: object) -> None:
        self.operation = operation
        self.record_id = record_id
        super().__init__(
            f"Could not {operation} record with id: {record_id} "
            f"because it does not exist"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "RECORD_NOT_FOUND",
            "operation": self.operation,
            "record_id": self.record_id,
        }


class UnsupportedFilterCombinationError(QueryRepositoryError):
    """A backend cannot express the requested combination of filters."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_FILTER_COMBINATION",
            "message": str(self),
            "field": self.field,
        }


class FieldNotFoundError(InvalidArgumentError):
    """
    Filter or sort on a field the storage model does not map.

    Uses fuzzy matching to suggest similar valid field names.

    Example error message::

        Invalid field 'nmae' on 'UserRecord'.
        Did you mean one of these?
          • name

        Available fields: age, created_at, id, name, ...
    """

    def __init__(
        self,
        invalid_field: str,
        model_name: str,
        available_fields: list[str],
        cutoff: float = 0.6,
    ) -> None:
        self.invalid_field = invalid_field
        self.model_name = model_name
        self.available_fields = available_fields
        self.suggestions = get_close_matches(
            invalid_field, available_fields, n=5, cutoff=cutoff
        )
        super().__init__(self._build_message(), argument=invalid_field)

    def _build_message(self) -> str:
        lines = [f"Invalid field '{self.invalid_field}' on '{self.model_name}'."]
        if self.suggestions:
            lines.append("Did you mean one of these?")
            for s in self.suggestions:
                lines.append(f"  • {s}")

        sorted_fields = sorted(self.available_fields)
        preview = ", ".join(sorted_fields[:15])
        if len(sorted_fields) > 15:
            preview += ", ..."
        lines.append(f"Available fields: {preview}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.invalid_field,
            "model": self.model_name,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }
