"""build_pipeline: chain resolution stages over a shared query."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from .exceptions import MalformedInputError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .filters import ResourceFilters
    from .orders import ResourceOrders
    from .pagination import PaginateResults
    from .ports import IResourceStage, NextHandler
    from .relations import ResourceRelations
    from .request import ResourceRequest

logger = logging.getLogger("resource_query.pipeline")


def _identity(value: Any) -> Any:
    return value


def build_pipeline(
    stages: Sequence[IResourceStage],
    handler_fn: NextHandler | None = None,
) -> Callable[[ResourceRequest, Any], Any]:
    """Build a stage chain ending at *handler_fn*.

    The first stage in the list runs first. Each stage must implement
    ``__call__(request, query, next_handler)``. The returned callable takes
    ``(request, query)`` and returns whatever the chain returns; without
    *handler_fn* that is the constrained query (or the terminal stage's
    result).
    """
    terminal: NextHandler = handler_fn or _identity

    def run(request: ResourceRequest, query: Any) -> Any:
        pipeline = terminal
        for stage in reversed(stages):
            current_next = pipeline  # capture for closure

            def _wrapper(
                value: Any,
                _stage: IResourceStage = stage,
                _next: NextHandler = current_next,
            ) -> Any:
                return _stage(request, value, _next)

            pipeline = _wrapper
        return pipeline(query)

    return run


class ResourcePipeline:
    """The read pipeline of one resource: filters, orders, relations, pages.

    Every stage is optional. Stages run in that order; pagination, when
    present, is terminal and the result is the materialized rows.
    """

    def __init__(
        self,
        *,
        filters: ResourceFilters | None = None,
        orders: ResourceOrders | None = None,
        relations: ResourceRelations | None = None,
        pagination: PaginateResults | None = None,
        name: str | None = None,
    ) -> None:
        self.name = name or "resource"
        self.stages: list[IResourceStage] = [
            stage
            for stage in (filters, orders, relations, pagination)
            if stage is not None
        ]

    def resolve(
        self,
        request: ResourceRequest,
        query: Any,
        handler_fn: NextHandler | None = None,
    ) -> Any:
        """Run the stages for ``request`` over ``query``."""
        start = time.perf_counter()
        try:
            result = build_pipeline(self.stages, handler_fn)(request, query)
        except MalformedInputError as e:
            logger.warning("Rejected %s request: %s", self.name, e)
            raise
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            logger.exception(
                "Resolving %s failed after %.2fms (%s %s)",
                self.name,
                elapsed,
                request.method,
                request.path,
            )
            raise
        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Resolved %s in %.2fms", self.name, elapsed)
        return result
