"""
Validating constructors for filter nodes.

``FilterFactory`` is where malformed filter arguments are rejected: every
method checks its inputs and raises :class:`InvalidArgumentError` before a
node is built.  The cursor uses it for every builder call, and callers use
it directly to build the arguments of an ``or_`` group::

    f = FilterFactory()
    repo.or_(f.eq("name", "Steve"), f.lt("age", 18)).all()
"""

from __future__ import annotations

from typing import Any

from .exceptions import InvalidArgumentError
from .filters import (
    And,
    Eq,
    Filter,
    Gt,
    Gte,
    In,
    Like,
    Lt,
    Lte,
    NotEq,
    NotIn,
    Or,
)
from .utils import field_name, is_finite_collection


class FilterFactory:
    """One constructor per operator."""

    def eq(self, field: Any, value: Any) -> Eq:
        return Eq(self.validate_field(field), value)

    def not_eq(self, field: Any, value: Any) -> NotEq:
        return NotEq(self.validate_field(field), value)

    def lt(self, field: Any, value: Any) -> Lt:
        name = self.validate_field(field)
        self._assert_not_none("Less than", value)
        return Lt(name, value)

    def lte(self, field: Any, value: Any) -> Lte:
        name = self.validate_field(field)
        self._assert_not_none("Less than or equal to", value)
        return Lte(name, value)

    def gt(self, field: Any, value: Any) -> Gt:
        name = self.validate_field(field)
        self._assert_not_none("Greater than", value)
        return Gt(name, value)

    def gte(self, field: Any, value: Any) -> Gte:
        name = self.validate_field(field)
        self._assert_not_none("Greater than or equal to", value)
        return Gte(name, value)

    def in_(self, field: Any, values: Any) -> In:
        name = self.validate_field(field)
        self._assert_collection("Inclusion", values)
        return In(name, tuple(values))

    def not_in(self, field: Any, values: Any) -> NotIn:
        name = self.validate_field(field)
        self._assert_collection("Exclusion", values)
        return NotIn(name, tuple(values))

    def like(self, field: Any, value: Any) -> Like:
        name = self.validate_field(field)
        pattern = field_name(value)
        if pattern is None:
            raise InvalidArgumentError(
                f"Value must be a str but you gave {value!r}", argument="value"
            )
        return Like(name, pattern)

    def or_(self, *filters: Filter) -> Or:
        return Or(self._filters(filters))

    def and_(self, *filters: Filter) -> And:
        return And(self._filters(filters))

    # -- validation ----------------------------------------------------------

    @staticmethod
    def validate_field(field: Any) -> str:
        """Normalise a field identifier or raise :class:`InvalidArgumentError`."""
        name = field_name(field)
        if name is None:
            raise InvalidArgumentError(
                f"Field name must be a str but you gave {field!r}", argument="field"
            )
        return name

    @staticmethod
    def _assert_not_none(label: str, value: Any) -> None:
        if value is None:
            raise InvalidArgumentError(
                f"{label} filter value cannot be None", argument="value"
            )

    @staticmethod
    def _assert_collection(label: str, values: Any) -> None:
        if not is_finite_collection(values):
            raise InvalidArgumentError(
                f"{label} filter value must be a finite collection "
                f"but {values!r} is not",
                argument="values",
            )

    @staticmethod
    def _filters(filters: tuple[Any, ...]) -> tuple[Filter, ...]:
        for item in filters:
            if not isinstance(item, Filter):
                raise InvalidArgumentError(
                    f"Composite filters take Filter nodes but you gave {item!r}",
                    argument="filters",
                )
        return tuple(filters)
