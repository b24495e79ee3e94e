"""Filter operator and field-type tables."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


class FilterOperator(str, Enum):
    """Operator symbols accepted in ``column[operator]=value`` parameters."""

    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    HAS = "has"
    IN = "in"
    BETWEEN = "btw"


class FieldType(str, Enum):
    """Semantic column types usable instead of an explicit operator list."""

    STRING = "string"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    DATE = "date"


# Maps API operator symbols to the comparison the query context applies.
# For example, ``?age[gte]=18`` becomes ``where("age", ">=", "18")``.
OPERATORS: dict[str, str] = {
    FilterOperator.EQ.value: "=",
    FilterOperator.LT.value: "<",
    FilterOperator.LTE.value: "<=",
    FilterOperator.GT.value: ">",
    FilterOperator.GTE.value: ">=",
    FilterOperator.NE.value: "!=",
    FilterOperator.HAS.value: "like",
    FilterOperator.IN.value: "in",
    FilterOperator.BETWEEN.value: "between",
}

# Default operators for each field type.
TYPES: dict[str, list[str]] = {
    FieldType.STRING.value: ["eq", "ne", "has"],
    FieldType.NUMERIC.value: ["eq", "ne", "lt", "lte", "gt", "gte", "in", "btw"],
    FieldType.BOOLEAN.value: ["eq", "ne"],
    FieldType.DATE.value: ["eq", "ne", "lt", "lte", "gt", "gte", "btw"],
}


def resolve_operators(spec: Sequence[str] | str) -> list[str]:
    """Return the operator allow-list for a column spec.

    A string is treated as a type tag and expanded through ``TYPES``;
    anything else is taken as an explicit operator list.

    Raises:
        ConfigurationError: If the type tag is not configured.
    """
    if isinstance(spec, str):
        if spec not in TYPES:
            raise ConfigurationError(f'Invalid "{spec}" field type')
        return list(TYPES[spec])
    return list(spec)


def is_known_operator(symbol: str) -> bool:
    return symbol in OPERATORS
