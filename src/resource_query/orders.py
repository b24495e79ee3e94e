"""ResourceOrders: allow-listed ``order[i][direction]=field`` sorting."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidOrderError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .ports import IQueryContext, NextHandler, OrderHandler
    from .request import ResourceRequest

logger = logging.getLogger("resource_query.orders")

DIRECTIONS = ("asc", "desc")

_SYNTAX_HELP = (
    "Order parameter must have a numeric index, a direction and a field name, "
    "example: order[0][asc]=field_name"
)


def normalize_direction(direction: Any) -> str:
    """Return ``ASC`` or ``DESC``; anything unrecognised becomes ``ASC``."""
    upper = str(direction).upper()
    return upper if upper in ("ASC", "DESC") else "ASC"


def _is_index(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    return isinstance(key, int) or (isinstance(key, str) and key.isdigit())


class ResourceOrders:
    """Apply request ordering to a query, restricted to sortable columns.

    ``allowed_columns`` is either a list of sortable names or a mapping of
    request name to storage column. Without an ``order`` parameter the
    ``default_order`` is applied instead.
    """

    def __init__(
        self,
        *,
        default_order: Mapping[str, str] | Sequence[str | tuple[str, str]] | None = None,
        allowed_columns: Mapping[str, str] | Sequence[str] | None = None,
        overrides: Mapping[str, OrderHandler] | None = None,
        order_key: str = "order",
    ) -> None:
        """
        Initialize ResourceOrders.

        Args:
            default_order: Column -> direction, or column names (ascending),
                or ``(column, direction)`` pairs.
            allowed_columns: Sortable names, or name -> storage column.
            overrides: Column -> handler receiving ``(query, direction)``.
            order_key: Query parameter holding the order directive.
        """
        if isinstance(default_order, Mapping):
            self.default_order = list(default_order.items())
        else:
            self.default_order = [
                entry if isinstance(entry, tuple) else (entry, "ASC")
                for entry in (default_order or [])
            ]
        if isinstance(allowed_columns, Mapping):
            self.allowed_columns = dict(allowed_columns)
        else:
            self.allowed_columns = {name: name for name in allowed_columns or []}
        self.overrides = dict(overrides or {})
        self.order_key = order_key

    def __call__(
        self,
        request: ResourceRequest,
        query: IQueryContext,
        next_handler: NextHandler,
    ) -> Any:
        self.apply(query, request.query_value(self.order_key))
        return next_handler(query)

    def apply(self, query: IQueryContext, order: Any) -> None:
        """Apply ``order`` (or the default order when ``None``) to ``query``.

        Every entry is validated before the first one is applied.

        Raises:
            InvalidOrderError: If ``order`` does not follow the syntax.
        """
        if order is None:
            self._apply_default(query)
            return

        for column, direction in self.clean(order):
            self._add_order(query, column, direction)

    def clean(self, order: Any) -> list[tuple[str, str]]:
        """Validate the directive and return ``(column, direction)`` pairs.

        Entries keep the order they were given in. Columns outside the
        allow-list and repeated columns (after their first occurrence) are
        dropped.
        """
        if isinstance(order, Mapping):
            entries = list(order.items())
        elif isinstance(order, list):
            entries = list(enumerate(order))
        else:
            raise InvalidOrderError(_SYNTAX_HELP, parameter=self.order_key)

        cleaned: list[tuple[str, str]] = []
        already_added: set[str] = set()
        for index, value in entries:
            if not _is_index(index) or not isinstance(value, Mapping) or len(value) != 1:
                raise InvalidOrderError(_SYNTAX_HELP, parameter=self.order_key)

            direction, column = next(iter(value.items()))
            if direction not in DIRECTIONS or not isinstance(column, str) or not column:
                raise InvalidOrderError(_SYNTAX_HELP, parameter=self.order_key)

            if column not in self.allowed_columns or column in already_added:
                logger.debug("Ignoring order on %r", column)
                continue

            already_added.add(column)
            cleaned.append((column, direction))
        return cleaned

    def _add_order(self, query: IQueryContext, column: str, direction: str) -> None:
        handler = self.overrides.get(column)
        if handler is not None:
            handler(query, direction)
        else:
            query.order_by(self.allowed_columns.get(column, column), direction)

    def _apply_default(self, query: IQueryContext) -> None:
        for column, direction in self.default_order:
            query.order_by(column, normalize_direction(direction))
