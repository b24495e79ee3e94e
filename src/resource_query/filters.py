"""ResourceFilters: allow-listed ``column[operator]=value`` filtering."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidFilterValueError, InvalidOperatorError
from .operators import OPERATORS, FilterOperator, is_known_operator, resolve_operators

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from .ports import FilterHandler, IQueryContext, NextHandler
    from .request import ResourceRequest

logger = logging.getLogger("resource_query.filters")

_BOOLEAN_LITERALS = {"true": True, "false": False}


def coerce_value(operator: str, value: Any) -> Any:
    """Convert a raw filter value into the value the condition uses.

    Raises:
        InvalidFilterValueError: If a ``btw`` value does not have two parts.
    """
    if operator == FilterOperator.EQ and isinstance(value, str):
        return _BOOLEAN_LITERALS.get(value, value)

    if operator == FilterOperator.HAS:
        return f"%{value}%"

    if operator == FilterOperator.IN and not isinstance(value, list):
        return str(value).split(",")

    if operator == FilterOperator.BETWEEN:
        parts = value if isinstance(value, list) else str(value).split(",")
        if len(parts) != 2:
            raise InvalidFilterValueError(
                'Invalid value count for "btw" filter, expected two comma '
                "separated values, example: column[btw]=1,10"
            )
        return parts

    return value


class ResourceFilters:
    """Apply request filters to a query, restricted to an allow-list.

    ``allowed_columns`` maps each filterable column to either a list of
    operator symbols or a field type (``string``, ``numeric``, ``boolean``,
    ``date``). Parameters for other columns, and operators outside a
    column's list, are ignored.

    Example::

        filters = ResourceFilters(
            allowed_columns={
                "name": "string",
                "age": ["gte", "lte"],
                "search": ["has"],
            },
            column_mappings={"name": "full_name"},
            overrides={"search": search_filter},
        )
    """

    def __init__(
        self,
        *,
        allowed_columns: Mapping[str, Sequence[str] | str] | None = None,
        column_mappings: Mapping[str, str] | None = None,
        overrides: Mapping[str, FilterHandler] | None = None,
        before: Callable[[IQueryContext], None] | None = None,
        after: Callable[[IQueryContext], None] | None = None,
    ) -> None:
        """
        Initialize ResourceFilters.

        Args:
            allowed_columns: Filterable columns with their operators or type.
            column_mappings: Request column name -> storage column name.
            overrides: Column -> handler owning the condition for that column.
                The handler receives a grouped query, the operator's concrete
                symbol, the coerced value and the raw value.
            before: Called with the query before any filter is applied.
            after: Called with the query after all filters are applied.

        Raises:
            ConfigurationError: If a column declares an unknown field type.
        """
        self.allowed_columns = dict(allowed_columns or {})
        self.column_mappings = dict(column_mappings or {})
        self.overrides = dict(overrides or {})
        self._before = before
        self._after = after
        for spec in self.allowed_columns.values():
            resolve_operators(spec)

    def __call__(
        self,
        request: ResourceRequest,
        query: IQueryContext,
        next_handler: NextHandler,
    ) -> Any:
        self.apply(query, request.query)
        return next_handler(query)

    def apply(self, query: IQueryContext, params: Mapping[str, Any]) -> None:
        """Apply every allow-listed filter present in ``params`` to ``query``."""
        if self._before is not None:
            self._before(query)

        for column, spec in self.allowed_columns.items():
            param = params.get(column)
            if param is None:
                continue

            if isinstance(param, str):
                # a value without an operator behaves as an equal filter
                param = {FilterOperator.EQ.value: param}
            elif not isinstance(param, dict):
                logger.debug("Ignoring filter %r without operators", column)
                continue

            for operator in resolve_operators(spec):
                if operator not in param:
                    continue
                if not is_known_operator(operator):
                    raise InvalidOperatorError(operator, column)
                self._add_filter(query, column, operator, param[operator])

        if self._after is not None:
            self._after(query)

    def _add_filter(
        self, query: IQueryContext, column: str, operator: str, value: Any
    ) -> None:
        if isinstance(value, dict) or (
            isinstance(value, list)
            and operator not in (FilterOperator.IN, FilterOperator.BETWEEN)
        ):
            raise InvalidFilterValueError(
                f'Filter "{column}[{operator}]" must have a single value',
                parameter=column,
            )

        handler = self.overrides.get(column)
        if handler is not None:
            symbol = OPERATORS[operator]
            coerced = coerce_value(operator, value)
            query.where_group(lambda group: handler(group, symbol, coerced, value))
        elif operator == FilterOperator.IN:
            query.where_in(
                self.column_mappings.get(column, column),
                coerce_value(operator, value),
            )
        elif operator == FilterOperator.BETWEEN:
            query.where_between(
                self.column_mappings.get(column, column),
                coerce_value(operator, value),
            )
        else:
            query.where(
                self.column_mappings.get(column, column),
                OPERATORS[operator],
                coerce_value(operator, value),
            )
        logger.debug("Applied %s[%s] filter", column, operator)
