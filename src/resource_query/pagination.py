"""Pagination: terminal stage materializing the query as a page or in full."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .query_string import QueryStringBuilder

if TYPE_CHECKING:
    from .ports import IQueryContext, NextHandler
    from .request import ResourceRequest

T = TypeVar("T")

logger = logging.getLogger("resource_query.pagination")


@dataclass(frozen=True)
class PaginationConfig:
    """Request parameter names and page size limits.

    Built once per resource (or application) and passed to
    :class:`PaginateResults`; never mutated afterwards.
    """

    all_key: str = "all"
    per_page_key: str = "perPage"
    page_key: str = "page"
    default_per_page: int = 15
    max_per_page: int | None = 100


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results with links that keep the request's query string."""

    items: list[T]
    total: int
    per_page: int
    current_page: int = 1
    path: str = ""
    query_params: dict[str, Any] = field(default_factory=dict)
    page_key: str = "page"

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    def url(self, page: int) -> str:
        """URL of ``page``; every other query parameter is preserved."""
        query_string = QueryStringBuilder().build(
            self.query_params, **{self.page_key: page}
        )
        return f"{self.path}?{query_string}"

    @property
    def links(self) -> dict[str, str | None]:
        return {
            "first": self.url(1),
            "last": self.url(self.last_page),
            "prev": self.url(self.current_page - 1) if self.current_page > 1 else None,
            "next": (
                self.url(self.current_page + 1)
                if self.current_page < self.last_page
                else None
            ),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": list(self.items),
            "links": self.links,
            "meta": {
                "current_page": self.current_page,
                "last_page": self.last_page,
                "per_page": self.per_page,
                "total": self.total,
                "path": self.path,
            },
        }


class PaginateResults:
    """Terminal stage: ``all=true`` returns everything, otherwise one page."""

    def __init__(self, config: PaginationConfig | None = None) -> None:
        self.config = config or PaginationConfig()

    def __call__(
        self,
        request: ResourceRequest,
        query: IQueryContext,
        next_handler: NextHandler,
    ) -> Any:
        return next_handler(self.paginate(request, query))

    def paginate(self, request: ResourceRequest, query: IQueryContext) -> Any:
        """Return ``list`` of every row, or a :class:`Page`."""
        if request.boolean(self.config.all_key):
            return query.get()
        per_page = self.per_page(request.query_value(self.config.per_page_key))
        page = self.page(request.query_value(self.config.page_key))
        logger.debug("Paginating %s: page %d, %d per page", request.uri, page, per_page)
        return query.paginate(
            per_page,
            page,
            query_params=request.query,
            page_key=self.config.page_key,
            path=request.path,
        )

    def per_page(self, value: Any) -> int:
        """Requested page size, clamped; invalid values use the default."""
        try:
            per_page = max(1, int(value))
        except (TypeError, ValueError):
            return self.config.default_per_page
        if self.config.max_per_page is not None:
            per_page = min(self.config.max_per_page, per_page)
        return per_page

    @staticmethod
    def page(value: Any) -> int:
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            return 1
