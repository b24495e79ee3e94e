"""IResourceStage: protocol for pipeline stages."""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from ..request import ResourceRequest
    from .handlers import NextHandler


@runtime_checkable
class IResourceStage(Protocol):
    """Protocol for a resolution stage.

    A stage constrains ``query`` from ``request`` and calls ``next_handler``
    to proceed, or raises to abort the remaining stages. Terminal stages
    call ``next_handler`` with a materialized result instead of the query.
    """

    def __call__(
        self,
        request: ResourceRequest,
        query: Any,
        next_handler: NextHandler,
    ) -> Any:
        ...
