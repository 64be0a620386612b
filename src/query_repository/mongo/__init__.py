"""Document-store adapter (MongoDB)."""

from .query_builder import MongoQueryBuilder
from .repository import MongoRepository

__all__ = [
    "MongoQueryBuilder",
    "MongoRepository",
]
