"""ResourceRequest: immutable view of an incoming resource request."""

from __future__ import annotations

from functools import cached_property
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

from .identity import request_identity, substitute_path_parameters
from .query_string import parse_query_string

_TRUE_VALUES = frozenset({"1", "true", "on", "yes"})


def as_boolean(value: Any, default: bool = False) -> bool:
    """Interpret a request value as a boolean flag (``1/true/on/yes``)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return False


class ResourceRequest(BaseModel):
    """The parts of an HTTP request the resolution pipeline reads.

    Attributes:
        method: HTTP method (``GET``, ``POST``, ...).
        uri: Route URI template, e.g. ``users/{user}/posts``.
        route_name: Logical route name, e.g. ``users.posts.index``.
        path_params: Values of the template placeholders.
        query_string: Raw, still encoded query string.
    """

    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    uri: str = ""
    route_name: str | None = None
    path_params: dict[str, Any] = Field(default_factory=dict)
    query_string: str = ""

    @classmethod
    def from_url(cls, url: str, method: str = "GET", **kwargs: Any) -> ResourceRequest:
        """Build a request from a path or URL, taking its query string."""
        parts = urlsplit(url)
        kwargs.setdefault("uri", parts.path.lstrip("/"))
        return cls(method=method, query_string=parts.query, **kwargs)

    @property
    def path(self) -> str:
        """Concrete request path (template with parameters substituted)."""
        return "/" + substitute_path_parameters(self.uri, self.path_params).lstrip("/")

    @cached_property
    def query(self) -> dict[str, Any]:
        """Query parameters parsed with bracket notation."""
        return parse_query_string(self.query_string)

    def query_value(self, key: str, default: Any = None) -> Any:
        return self.query.get(key, default)

    def boolean(self, key: str, default: bool = False) -> bool:
        return as_boolean(self.query.get(key), default)

    def hash(self, append: str | None = None) -> str:
        """Deterministic identifier of this request, for cache partitioning."""
        return request_identity(
            self.method,
            self.uri,
            self.route_name,
            self.path_params,
            self.query_string,
            append,
        )
