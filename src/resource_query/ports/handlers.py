"""Callable signatures of per-field override handlers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

# handler(query, operator_symbol, coerced_value, raw_value)
FilterHandler = Callable[[Any, str, Any, Any], None]

# handler(query, direction)
OrderHandler = Callable[[Any, str], None]

# loader(relation_query)
RelationLoader = Callable[[Any], None]

# next_handler(query_or_result)
NextHandler = Callable[[Any], Any]
