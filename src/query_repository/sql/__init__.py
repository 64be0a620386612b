"""Relational adapter (SQLAlchemy)."""

from .compiler import build_filter, build_order_by, build_select, build_where
from .operators import DEFAULT_SQLA_REGISTRY, build_default_registry
from .repository import SQLAlchemyRepository
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "SQLAlchemyRepository",
    "build_default_registry",
    "build_filter",
    "build_order_by",
    "build_select",
    "build_where",
]
