"""
Null-aware SQLAlchemy operators.

SQL's three-valued logic drops rows whose column is NULL from ``!=`` and
``NOT IN`` predicates; these operators add explicit ``IS NULL`` /
``IS NOT NULL`` branches so the relational adapter matches the in-memory
one row for row.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, false, or_, true

from ..operators import FilterOperator
from ..utils import split_nulls
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class EqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQ

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is None:
            return cast("ColumnElement[bool]", column.is_(None))
        return cast("ColumnElement[bool]", column == value)


class NotEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is None:
            return cast("ColumnElement[bool]", column.is_not(None))
        return or_(column != value, column.is_(None))


class LessThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LT

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column < value)


class LessEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column <= value)


class GreaterThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GT

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column > value)


class GreaterEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column >= value)


class InOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        values, has_null = split_nulls(value)
        clause = column.in_(values) if values else false()
        if has_null:
            return or_(clause, column.is_(None))
        return cast("ColumnElement[bool]", clause)


class NotInOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        values, has_null = split_nulls(value)
        if has_null:
            if not values:
                return cast("ColumnElement[bool]", column.is_not(None))
            return and_(column.not_in(values), column.is_not(None))
        if not values:
            return true()
        return or_(column.not_in(values), column.is_(None))


class LikeOperator(SQLAlchemyOperator):
    """
    Case-insensitive substring match; ``%`` and ``_`` are escaped.

    Only text columns can match; other column types compile to ``false()``.
    """

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if not _is_text(column):
            return false()
        return cast("ColumnElement[bool]", column.icontains(value, autoescape=True))


def _is_text(column: Any) -> bool:
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        # types without a declared Python type are compared as text
        return True
    return issubclass(python_type, str)


def build_default_registry() -> SQLAlchemyOperatorRegistry:
    registry = SQLAlchemyOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        NotEqualOperator(),
        LessThanOperator(),
        LessEqualOperator(),
        GreaterThanOperator(),
        GreaterEqualOperator(),
        InOperator(),
        NotInOperator(),
        LikeOperator(),
    )
    return registry


DEFAULT_SQLA_REGISTRY = build_default_registry()
