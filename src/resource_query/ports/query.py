"""IQueryContext: protocol for the query builder the pipeline constrains."""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from ..pagination import Page
    from .handlers import RelationLoader


@runtime_checkable
class IRelationQuery(Protocol):
    """Constraints on an eager-loaded (or counted) relation.

    Custom relation loaders receive an object implementing this protocol
    and own how the related rows are narrowed.
    """

    def where(self, column: str, operator: str, value: Any) -> Any:
        ...

    def where_in(self, column: str, values: Sequence[Any]) -> Any:
        ...

    def where_between(self, column: str, values: Sequence[Any]) -> Any:
        ...


@runtime_checkable
class IQueryContext(IRelationQuery, Protocol):
    """
    Mutable query builder owned by the caller for the pipeline duration.

    Stages only ever call the operations below; materialization
    (``get``/``paginate``) happens once, at the end of the pipeline.
    """

    def where_group(self, callback: Callable[[Any], None]) -> Any:
        """AND a parenthesized group of conditions built by ``callback``."""
        ...

    def order_by(self, column: str, direction: str = "asc") -> Any:
        """Append an ordering; ``direction`` is matched case-insensitively."""
        ...

    def with_relations(self, relations: Mapping[str, RelationLoader | None]) -> Any:
        """Register eager loads; a loader constrains its relation query."""
        ...

    def with_counts(self, counts: Mapping[str, RelationLoader | None]) -> Any:
        """Register relation counts; a loader constrains the counted rows."""
        ...

    def get(self) -> list[Any]:
        """Materialize the whole result set."""
        ...

    def paginate(
        self,
        per_page: int,
        page: int = 1,
        query_params: Mapping[str, Any] | None = None,
        page_key: str = "page",
        path: str = "",
    ) -> Page[Any]:
        """Materialize one page; links keep ``query_params``."""
        ...
