"""
In-memory operator evaluation strategy.

Provides the MemoryOperator protocol and a registry mapping
FilterOperator → evaluation strategy.  Composite filters (``and`` /
``or``) are walked by :func:`matches`; leaf filters are dispatched to
the registry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..filters import And, Filter, Or
from ..operators import FilterOperator


class MemoryOperator(ABC):
    """
    Strategy interface for in-memory operator evaluation.

    Each operator is an isolated class with a single ``evaluate`` method.
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        """
        Evaluate the operator against concrete values.

        Args:
            field_value: The value stored on the candidate record (``None``
                when the record has no value for the field).
            condition_value: The value carried by the filter.

        Returns:
            True if the condition is satisfied.
        """
        ...


class MemoryOperatorRegistry:
    """
    Registry of MemoryOperator instances keyed by FilterOperator.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register(EqualOperator())

        result = registry.evaluate(FilterOperator.EQ, actual, expected)
    """

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, MemoryOperator] = {}

    def register(self, operator: MemoryOperator) -> None:
        """Register an operator strategy instance."""
        self._operators[operator.name] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        for op in operators:
            self.register(op)

    def get(self, name: FilterOperator) -> MemoryOperator | None:
        return self._operators.get(name)

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators.keys())

    def evaluate(
        self,
        name: FilterOperator,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Look up the operator and evaluate.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(f"Unsupported operator for in-memory evaluation: {name}")
        return op.evaluate(field_value, condition_value)

    def matches(self, record: Mapping[str, Any], filter_: Filter) -> bool:
        """Evaluate a filter tree against one stored record."""
        if isinstance(filter_, Or):
            return any(self.matches(record, f) for f in filter_.filters)
        if isinstance(filter_, And):
            return all(self.matches(record, f) for f in filter_.filters)
        return self.evaluate(filter_.operator, record.get(filter_.field), filter_.value)
