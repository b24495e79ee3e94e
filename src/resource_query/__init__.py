"""Resource query resolution: allow-listed filters, ordering, relations, pages."""

from __future__ import annotations

from .exceptions import (
    ConfigurationError,
    InvalidFilterValueError,
    InvalidOperatorError,
    InvalidOrderError,
    InvalidRelationError,
    MalformedInputError,
    ResourceQueryError,
)
from .filters import ResourceFilters, coerce_value
from .identity import request_identity
from .operators import OPERATORS, TYPES, FieldType, FilterOperator, resolve_operators
from .orders import ResourceOrders
from .pagination import Page, PaginateResults, PaginationConfig
from .pipeline import ResourcePipeline, build_pipeline
from .ports import IQueryContext, IRelationQuery, IResourceStage
from .query_string import QueryStringBuilder, parse_query_string
from .relations import ResourceRelations
from .request import ResourceRequest

__all__ = [
    "OPERATORS",
    "TYPES",
    "ConfigurationError",
    "FieldType",
    "FilterOperator",
    "IQueryContext",
    "IRelationQuery",
    "IResourceStage",
    "InvalidFilterValueError",
    "InvalidOperatorError",
    "InvalidOrderError",
    "InvalidRelationError",
    "MalformedInputError",
    "Page",
    "PaginateResults",
    "PaginationConfig",
    "QueryStringBuilder",
    "ResourceFilters",
    "ResourceOrders",
    "ResourcePipeline",
    "ResourceQueryError",
    "ResourceRelations",
    "ResourceRequest",
    "build_pipeline",
    "coerce_value",
    "parse_query_string",
    "request_identity",
    "resolve_operators",
]
