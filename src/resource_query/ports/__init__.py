from .handlers import FilterHandler, NextHandler, OrderHandler, RelationLoader
from .query import IQueryContext, IRelationQuery
from .stage import IResourceStage

__all__ = [
    "FilterHandler",
    "IQueryContext",
    "IRelationQuery",
    "IResourceStage",
    "NextHandler",
    "OrderHandler",
    "RelationLoader",
]
