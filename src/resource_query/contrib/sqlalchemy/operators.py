"""
Comparison strategies turning operator symbols into SQLAlchemy clauses.

Each symbol of the operator table (``=``, ``!=``, ``<``, ``<=``, ``>``,
``>=``, ``like``, ``in``, ``between``) is an isolated class registered in a
``ComparisonRegistry``. Register extra strategies to let override handlers
use additional symbols.
"""

from __future__ import annotations

import operator as op_module
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class SQLAlchemyComparison(ABC):
    """Strategy interface compiling one symbol to a ``ColumnElement[bool]``."""

    @property
    @abstractmethod
    def symbol(self) -> str:
        """The operator symbol this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        ...


class EqualComparison(SQLAlchemyComparison):
    symbol = "="

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.eq(column, value))


class NotEqualComparison(SQLAlchemyComparison):
    symbol = "!="

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.ne(column, value))


class LessThanComparison(SQLAlchemyComparison):
    symbol = "<"

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.lt(column, value))


class LessEqualComparison(SQLAlchemyComparison):
    symbol = "<="

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.le(column, value))


class GreaterThanComparison(SQLAlchemyComparison):
    symbol = ">"

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.gt(column, value))


class GreaterEqualComparison(SQLAlchemyComparison):
    symbol = ">="

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.ge(column, value))


class LikeComparison(SQLAlchemyComparison):
    symbol = "like"

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.like(value))


class InComparison(SQLAlchemyComparison):
    symbol = "in"

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.in_(list(value)))


class BetweenComparison(SQLAlchemyComparison):
    symbol = "between"

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.between(value[0], value[1]))


class ComparisonRegistry:
    """Registry of ``SQLAlchemyComparison`` instances keyed by symbol."""

    def __init__(self) -> None:
        self._comparisons: dict[str, SQLAlchemyComparison] = {}

    def register(self, comparison: SQLAlchemyComparison) -> None:
        self._comparisons[comparison.symbol] = comparison

    def register_all(self, *comparisons: SQLAlchemyComparison) -> None:
        for comparison in comparisons:
            self.register(comparison)

    def get(self, symbol: str) -> SQLAlchemyComparison | None:
        return self._comparisons.get(symbol.lower())

    def apply(self, symbol: str, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Look up the comparison and apply.

        Raises:
            ValueError: If the symbol is not registered.
        """
        comparison = self.get(symbol)
        if comparison is None:
            raise ValueError(f"Unsupported operator for SQLAlchemy: {symbol}")
        return comparison.apply(column, value)


def build_default_registry() -> ComparisonRegistry:
    registry = ComparisonRegistry()
    registry.register_all(
        EqualComparison(),
        NotEqualComparison(),
        LessThanComparison(),
        LessEqualComparison(),
        GreaterThanComparison(),
        GreaterEqualComparison(),
        LikeComparison(),
        InComparison(),
        BetweenComparison(),
    )
    return registry


DEFAULT_COMPARISONS = build_default_registry()
