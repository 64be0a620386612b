"""
Filter nodes of the query predicate tree.

Each operator is its own frozen dataclass so that a node only carries the
data it needs: leaf comparisons hold a ``field`` and a ``value``,
membership tests hold a tuple of values, and the ``And`` / ``Or``
composites hold a tuple of sub-filters with no field at all.

All nodes expose the same read-only triple ``(field, operator, value)``
so adapters can dispatch on ``operator`` without ``isinstance`` chains::

    node = Lt("age", 19)
    node.field, node.operator, node.value
    # → ("age", FilterOperator.LT, 19)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from .exceptions import InvalidArgumentError
from .operators import FilterOperator


class Filter(ABC):
    """Base class of every filter node."""

    operator: ClassVar[FilterOperator]
    field: str | None
    value: Any

    @abstractmethod
    def to_dict(self) -> dict[str, Any]: ...


# -- leaf nodes --------------------------------------------------------------


@dataclass(frozen=True)
class _FieldFilter(Filter):
    field: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.operator.value, "attr": self.field, "val": self.value}


class Eq(_FieldFilter):
    """``field == value``; a ``None`` value means ``field IS NULL``."""

    operator = FilterOperator.EQ


class NotEq(_FieldFilter):
    """``field != value OR field IS NULL``; ``None`` means ``IS NOT NULL``."""

    operator = FilterOperator.NE


@dataclass(frozen=True)
class _OrderingFilter(_FieldFilter):
    label: ClassVar[str]

    def __post_init__(self) -> None:
        if self.value is None:
            raise InvalidArgumentError(
                f"{self.label} filter value cannot be None", argument="value"
            )


class Lt(_OrderingFilter):
    operator = FilterOperator.LT
    label = "Less than"


class Lte(_OrderingFilter):
    operator = FilterOperator.LE
    label = "Less than or equal to"


class Gt(_OrderingFilter):
    operator = FilterOperator.GT
    label = "Greater than"


class Gte(_OrderingFilter):
    operator = FilterOperator.GE
    label = "Greater than or equal to"


@dataclass(frozen=True)
class _MembershipFilter(Filter):
    field: str
    value: tuple[Any, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.operator.value, "attr": self.field, "val": list(self.value)}


class In(_MembershipFilter):
    operator = FilterOperator.IN


class NotIn(_MembershipFilter):
    operator = FilterOperator.NOT_IN


@dataclass(frozen=True)
class Like(_FieldFilter):
    """Case-insensitive substring match. ``value`` is a literal fragment."""

    value: str
    operator = FilterOperator.LIKE


# -- composite nodes ---------------------------------------------------------


@dataclass(frozen=True)
class _CompositeFilter(Filter):
    value: tuple[Filter, ...]
    field: ClassVar[None] = None

    def __post_init__(self) -> None:
        if not self.value:
            raise InvalidArgumentError(
                "Composite filters need at least one Filter", argument="filters"
            )

    @property
    def filters(self) -> tuple[Filter, ...]:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.operator.value,
            "conditions": [f.to_dict() for f in self.value],
        }


class And(_CompositeFilter):
    operator = FilterOperator.AND


class Or(_CompositeFilter):
    operator = FilterOperator.OR
