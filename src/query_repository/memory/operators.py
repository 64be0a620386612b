"""
Null-aware comparison operators for in-memory evaluation.

A ``None`` field value is "unknown": it equals only a ``None`` condition,
is unequal to every concrete value, and never satisfies an ordering
comparison.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

from ..operators import FilterOperator
from ..utils import split_nulls
from .evaluator import MemoryOperator, MemoryOperatorRegistry


class EqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if condition_value is None:
            return field_value is None
        return field_value is not None and bool(field_value == condition_value)


class NotEqualOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if condition_value is None:
            return field_value is not None
        return field_value is None or bool(field_value != condition_value)


class _OrderingOperator(MemoryOperator):
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return bool(self.compare(field_value, condition_value))

    @abstractmethod
    def compare(self, field_value: Any, condition_value: Any) -> bool: ...


class LessThanOperator(_OrderingOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LT

    def compare(self, field_value: Any, condition_value: Any) -> bool:
        return field_value < condition_value


class LessEqualOperator(_OrderingOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LE

    def compare(self, field_value: Any, condition_value: Any) -> bool:
        return field_value <= condition_value


class GreaterThanOperator(_OrderingOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GT

    def compare(self, field_value: Any, condition_value: Any) -> bool:
        return field_value > condition_value


class GreaterEqualOperator(_OrderingOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GE

    def compare(self, field_value: Any, condition_value: Any) -> bool:
        return field_value >= condition_value


class InOperator(MemoryOperator):
    """Membership; a ``None`` member makes null field values match too."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        values, has_null = split_nulls(condition_value)
        if field_value is None:
            return has_null
        return field_value in values


class NotInOperator(MemoryOperator):
    """Exact negation of :class:`InOperator` for the same values."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return not InOperator().evaluate(field_value, condition_value)


class LikeOperator(MemoryOperator):
    """Case-insensitive substring containment on string values."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if not isinstance(field_value, str):
            return False
        return condition_value.casefold() in field_value.casefold()


def build_default_registry() -> MemoryOperatorRegistry:
    """Create a registry with every leaf operator registered."""
    registry = MemoryOperatorRegistry()
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
