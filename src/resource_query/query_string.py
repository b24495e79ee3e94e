"""Bracket-notation query strings: parse to nested params and build back.

``order[0][asc]=name&with[]=author&age[gte]=18`` parses to::

    {"order": [{"asc": "name"}], "with": ["author"], "age": {"gte": "18"}}

Nested keys become dicts; ``[]`` appends. A dict whose keys are exactly
``"0".."n-1"`` in that order is collapsed into a list, any other key
order is kept as a dict so request-supplied ordering survives.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import parse_qsl, urlencode

_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def split_key(key: str) -> list[str]:
    """Split ``a[b][]`` into ``["a", "b", ""]``; malformed keys stay whole."""
    match = _KEY_RE.match(key)
    if match is None:
        return [key]
    return [match.group(1), *_SEGMENT_RE.findall(match.group(2))]


def parse_query_string(query_string: str) -> dict[str, Any]:
    """Parse a raw query string into nested parameters."""
    params: dict[str, Any] = {}
    for key, value in parse_qsl(query_string or "", keep_blank_values=True):
        _assign(params, split_key(key), value)
    return {k: _collapse(v) for k, v in params.items()}


def _assign(container: dict[str, Any], segments: list[str], value: str) -> None:
    key, rest = segments[0], segments[1:]
    if key == "":
        key = str(_next_index(container))
    if not rest:
        container[key] = value
        return
    child = container.get(key)
    if not isinstance(child, dict):
        child = {}
        container[key] = child
    _assign(child, rest, value)


def _next_index(container: dict[str, Any]) -> int:
    indexes = [int(k) for k in container if k.isdigit()]
    return max(indexes) + 1 if indexes else 0


def _collapse(value: Any) -> Any:
    if not isinstance(value, dict):
        return value
    collapsed = {k: _collapse(v) for k, v in value.items()}
    if list(collapsed) == [str(i) for i in range(len(collapsed))]:
        return list(collapsed.values())
    return collapsed


def flatten_params(params: dict[str, Any], prefix: str = "") -> list[tuple[str, str]]:
    """Flatten nested params back into ``(bracket_key, value)`` pairs."""
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        full_key = f"{prefix}[{key}]" if prefix else str(key)
        if isinstance(value, dict):
            pairs.extend(flatten_params(value, full_key))
        elif isinstance(value, (list, tuple)):
            pairs.extend(
                flatten_params({str(i): v for i, v in enumerate(value)}, full_key)
            )
        elif isinstance(value, bool):
            pairs.append((full_key, "1" if value else "0"))
        elif value is not None:
            pairs.append((full_key, str(value)))
    return pairs


class QueryStringBuilder:
    """Build query strings (e.g. pagination links) from nested params."""

    def build(self, params: dict[str, Any] | None = None, **overrides: Any) -> str:
        """Return ``params`` with ``overrides`` applied, url-encoded.

        Keys in ``overrides`` replace existing keys and keep their position;
        new keys are appended.
        """
        merged = dict(params or {})
        merged.update(overrides)
        pairs = flatten_params(merged)
        return urlencode(pairs) if pairs else ""
