"""SQLAlchemy query context for the resource query pipeline."""

from __future__ import annotations

from .operators import (
    DEFAULT_COMPARISONS,
    ComparisonRegistry,
    SQLAlchemyComparison,
    build_default_registry,
)
from .query import SQLAlchemyQueryContext, SQLAlchemyRelationQuery

__all__ = [
    "DEFAULT_COMPARISONS",
    "ComparisonRegistry",
    "SQLAlchemyComparison",
    "SQLAlchemyQueryContext",
    "SQLAlchemyRelationQuery",
    "build_default_registry",
]
