"""Request identity: deterministic cache keys for resource requests.

The key has the form::

    GET users/42/posts [users.posts.index@1a2b3c4d5e:9f8e7d]

where the first hash covers the query string (without any ``cache``
parameter) and the optional second one covers a caller supplied
context string. Keys partition caches; they are not a security token.
"""

from __future__ import annotations

import hashlib
import re
from typing import TYPE_CHECKING
from urllib.parse import unquote_plus

if TYPE_CHECKING:
    from collections.abc import Mapping

CACHE_PARAMETER = "cache"
QUERY_HASH_LENGTH = 10
CONTEXT_HASH_LENGTH = 6

# {name}, {name?} and converter forms such as {name:path}
_PLACEHOLDER = re.compile(r"\{(\w+)(?::[^}]*)?\??\}")


def _short_hash(value: str, length: int) -> str:
    return hashlib.md5(value.encode("utf-8"), usedforsecurity=False).hexdigest()[
        :length
    ]


def strip_cache_parameter(query_string: str) -> str:
    """Drop every ``cache=...`` pair, keeping the other pairs verbatim."""
    kept = []
    for pair in (query_string or "").split("&"):
        if not pair:
            continue
        key = unquote_plus(pair.split("=", 1)[0])
        if key == CACHE_PARAMETER:
            continue
        kept.append(pair)
    return "&".join(kept)


def substitute_path_parameters(uri: str, parameters: Mapping[str, object]) -> str:
    """Replace route placeholders with parameter values in a single pass.

    Placeholders without a value are left as they are.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in parameters:
            return match.group(0)
        value = parameters[name]
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(_replace, uri)


def request_identity(
    method: str,
    uri: str,
    route_name: str | None = None,
    path_params: Mapping[str, object] | None = None,
    query_string: str = "",
    append: str | None = None,
) -> str:
    """Build the identity string of a request.

    Args:
        method: HTTP method, upper-cased in the result.
        uri: Route URI template (``users/{user}``).
        route_name: Logical route name, empty when the route is unnamed.
        path_params: Values substituted into the template.
        query_string: Raw query string.
        append: Optional context contributing an extra short hash.
    """
    query_hash = _short_hash(strip_cache_parameter(query_string), QUERY_HASH_LENGTH)
    if append:
        query_hash += ":" + _short_hash(append, CONTEXT_HASH_LENGTH)
    return "{} {} [{}@{}]".format(
        method.upper(),
        substitute_path_parameters(uri, path_params or {}),
        route_name or "",
        query_hash,
    )
