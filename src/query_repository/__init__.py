"""
query-repository — storage-agnostic query abstraction.

Build queries with a fluent :class:`Cursor` and run them unchanged
against the in-memory, SQLAlchemy or MongoDB adapter::

    from query_repository.memory import MemoryRepository

    repo = MemoryRepository(User)
    repo.create({"name": "Steve", "age": 30})
    repo.gte("age", 18).sort("name").all()

Relational and document adapters live in :mod:`query_repository.sql`
and :mod:`query_repository.mongo`.
"""

from .cursor import Cursor
from .exceptions import (
    FieldNotFoundError,
    InvalidArgumentError,
    QueryRepositoryError,
    RecordNotFoundError,
    UnsupportedFilterCombinationError,
)
from .factory import FilterFactory
from .filters import And, Eq, Filter, Gt, Gte, In, Like, Lt, Lte, NotEq, NotIn, Or
from .operators import FilterOperator, SortOrder
from .ports import IQueryExecutor, IRepository
from .primitives import (
    Clock,
    FixedClock,
    IIDGenerator,
    SequentialIDGenerator,
    SystemClock,
    UUID4Generator,
)
from .query import Query, Sort
from .repository import Repository

__all__ = [
    # Query building
    "Cursor",
    "FilterFactory",
    "Query",
    "Sort",
    "SortOrder",
    # Filter nodes
    "Filter",
    "FilterOperator",
    "Eq",
    "NotEq",
    "Lt",
    "Lte",
    "Gt",
    "Gte",
    "In",
    "NotIn",
    "Like",
    "And",
    "Or",
    # Repositories
    "IQueryExecutor",
    "IRepository",
    "Repository",
    # Primitives
    "Clock",
    "SystemClock",
    "FixedClock",
    "IIDGenerator",
    "SequentialIDGenerator",
    "UUID4Generator",
    # Exceptions
    "QueryRepositoryError",
    "InvalidArgumentError",
    "RecordNotFoundError",
    "UnsupportedFilterCombinationError",
    "FieldNotFoundError",
]
