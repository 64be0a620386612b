"""
Compile filter trees and queries into SQLAlchemy statements.

Uses the strategy pattern: each leaf operator is an isolated class in
``operators``, registered in a ``SQLAlchemyOperatorRegistry``.
``build_filter`` walks the tree, rendering ``Or`` / ``And`` composites as
parenthesised ``or_`` / ``and_`` groups, and delegates leaf nodes to the
registry.  Column identifiers come from the mapper, so the dialect quotes
them; filter values are always bound parameters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, asc, desc, inspect as sa_inspect, or_, select

from ..exceptions import FieldNotFoundError
from ..filters import And, Or
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement, Select

    from ..filters import Filter
    from ..query import Query, Sort
    from .strategy import SQLAlchemyOperatorRegistry


def column_names(model: type[Any]) -> list[str]:
    """Mapped column attribute names of a declarative model."""
    return [attr.key for attr in sa_inspect(model).column_attrs]


def resolve_column(model: type[Any], field: str) -> Any:
    """Return the instrumented attribute for ``field`` or raise ``FieldNotFoundError``."""
    available = column_names(model)
    if field not in available:
        raise FieldNotFoundError(field, model.__name__, available)
    return getattr(model, field)


def build_filter(
    model: type[Any],
    filter_: Filter,
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> ColumnElement[bool]:
    """
    Build a SQLAlchemy boolean expression from one filter node.

    Args:
        model: The SQLAlchemy model class.
        filter_: A leaf or composite filter.
        registry: Optional custom operator registry.  Falls back to
            ``DEFAULT_SQLA_REGISTRY``.
    """
    reg = registry or DEFAULT_SQLA_REGISTRY
    if isinstance(filter_, Or):
        return or_(*(build_filter(model, f, registry=reg) for f in filter_.filters))
    if isinstance(filter_, And):
        return and_(*(build_filter(model, f, registry=reg) for f in filter_.filters))
    column = resolve_column(model, filter_.field)
    return reg.apply(filter_.operator, column, filter_.value)


def build_where(
    model: type[Any],
    filters: Sequence[Filter],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> list[ColumnElement[bool]]:
    """Compile top-level filters; ``Select.where`` ANDs the list."""
    return [build_filter(model, f, registry=registry) for f in filters]


def build_order_by(model: type[Any], sorts: Sequence[Sort]) -> list[Any]:
    """Nulls sort first ascending and last descending, on every dialect."""
    clauses: list[Any] = []
    for sort in sorts:
        column = resolve_column(model, sort.field)
        if sort.descending:
            clauses.append(desc(column).nulls_last())
        else:
            clauses.append(asc(column).nulls_first())
    return clauses


def build_select(
    model: type[Any],
    query: Query,
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> Select[Any]:
    """Full ``SELECT`` for a query: filters, sorts, limit, offset."""
    stmt = select(model).where(*build_where(model, query.filters, registry=registry))
    if query.sorts:
        stmt = stmt.order_by(*build_order_by(model, query.sorts))
    if query.limit is not None:
        stmt = stmt.limit(query.limit)
    if query.offset is not None:
        stmt = stmt.offset(query.offset)
    return stmt
