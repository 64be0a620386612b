"""In-memory adapter."""

from .evaluator import MemoryOperator, MemoryOperatorRegistry
from .operators import build_default_registry
from .repository import MemoryRepository

__all__ = [
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "MemoryRepository",
    "build_default_registry",
]
