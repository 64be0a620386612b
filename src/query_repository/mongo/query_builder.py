"""Mongo query builder from filter trees and sorts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pymongo import ASCENDING, DESCENDING

from ..exceptions import UnsupportedFilterCombinationError
from ..filters import And, Or
from ..operators import FilterOperator
from .operators import compile_operator
from .serialization import coerce_id, serialize_value

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ..filters import Filter
    from ..query import Sort


class MongoQueryBuilder:
    """
    Compiles top-level filters to a ``find`` filter document and sorts to
    ``(field, direction)`` pairs.

    Top-level filters are grouped by field.  A field with a single
    equality filter collapses to ``{field: value}``; other operators on a
    field share one operator document::

        builder.build_match([Eq("name", "Steve"), Gte("age", 18), Lt("age", 30)])
        # {"name": "Steve", "age": {"$gte": 18, "$lt": 30}}

    The identity field is stored as ``_id``.
    """

    def __init__(self, id_field: str = "id") -> None:
        self.id_field = id_field

    def field_path(self, field: str) -> str:
        return "_id" if field in (self.id_field, "_id") else field

    def build_match(self, filters: Sequence[Filter]) -> dict[str, Any]:
        """Build the filter document of a query (empty = match everything)."""
        grouped: dict[str, list[Filter]] = {}
        clauses: list[dict[str, Any]] = []
        for f in filters:
            if f.field is None:
                clauses.append(self._compile_node(f))
            else:
                grouped.setdefault(f.field, []).append(f)

        match: dict[str, Any] = {}
        for field, group in grouped.items():
            path = self.field_path(field)
            equals = [f for f in group if f.operator is FilterOperator.EQ]
            if equals:
                if len(equals) > 1:
                    raise UnsupportedFilterCombinationError(
                        f"Cannot have multiple equality filters on the same field: {field}",
                        field=field,
                    )
                if len(group) > 1:
                    raise UnsupportedFilterCombinationError(
                        f"Cannot combine an equality filter with other filters "
                        f"on the same field: {field}",
                        field=field,
                    )
                match[path] = self._equals(path, equals[0].value)
                continue

            operators: dict[str, Any] = {}
            for f in group:
                compiled = compile_operator(f, self._converter(path))
                if compiled.keys() & operators.keys():
                    # same operator twice on one field: needs its own clause
                    clauses.append({path: compiled})
                else:
                    operators.update(compiled)
            match[path] = operators

        if len(clauses) == 1 and not clauses[0].keys() & match.keys():
            match.update(clauses[0])
        elif clauses:
            match["$and"] = clauses
        return match

    def build_sort(self, sorts: Sequence[Sort]) -> list[tuple[str, int]]:
        return [
            (self.field_path(s.field), DESCENDING if s.descending else ASCENDING)
            for s in sorts
        ]

    # -- internals -----------------------------------------------------------

    def _compile_node(self, filter_: Filter) -> dict[str, Any]:
        if isinstance(filter_, Or):
            return {"$or": [self._compile_node(f) for f in filter_.filters]}
        if isinstance(filter_, And):
            return {"$and": [self._compile_node(f) for f in filter_.filters]}
        path = self.field_path(filter_.field)
        if filter_.operator is FilterOperator.EQ:
            return {path: self._equals(path, filter_.value)}
        return {path: compile_operator(filter_, self._converter(path))}

    def _equals(self, path: str, value: Any) -> Any:
        converted = self._converter(path)(value)
        if isinstance(converted, dict):
            return {"$eq": converted}
        return converted

    def _converter(self, path: str) -> Callable[[Any], Any]:
        if path == "_id":
            return coerce_id
        return serialize_value
