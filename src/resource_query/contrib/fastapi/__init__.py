"""FastAPI integration: request dependency and error responses."""

from __future__ import annotations

from .dependencies import get_resource_request
from .handlers import register_exception_handlers, resource_query_error_handler

__all__ = [
    "get_resource_request",
    "register_exception_handlers",
    "resource_query_error_handler",
]
