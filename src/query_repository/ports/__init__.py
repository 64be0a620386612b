from .executor import IQueryExecutor
from .repository import IRepository

__all__ = [
    "IQueryExecutor",
    "IRepository",
]
