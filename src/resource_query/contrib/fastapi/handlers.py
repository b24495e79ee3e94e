"""Exception handlers mapping resource query errors to JSON responses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse

from ...exceptions import ResourceQueryError

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger("resource_query.fastapi")


async def resource_query_error_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Client errors return their details; server errors stay opaque."""
    if not isinstance(exc, ResourceQueryError):
        raise exc
    if exc.status_code >= 500:
        logger.error("Resource configuration error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.__class__.__name__, "message": "Server error"},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResourceQueryError, resource_query_error_handler)
