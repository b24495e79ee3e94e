"""FastAPI dependencies for resource requests."""

from __future__ import annotations

from fastapi import Request  # noqa: TC002 - resolved by FastAPI at runtime

from ...request import ResourceRequest


def get_resource_request(request: Request) -> ResourceRequest:
    """Build a :class:`ResourceRequest` from the current HTTP request.

    The URI is the matched route's path template and the route name its
    endpoint name, so the request identity is stable across path values.

    Example:
        ```python
        from fastapi import APIRouter, Depends
        from resource_query.contrib.fastapi import get_resource_request

        router = APIRouter()

        @router.get("/users/{user}/posts", name="users.posts.index")
        def index(resource: ResourceRequest = Depends(get_resource_request)):
            return pipeline.resolve(resource, query).to_dict()
        ```
    """
    route = request.scope.get("route")
    uri = getattr(route, "path", None) or request.url.path
    return ResourceRequest(
        method=request.method,
        uri=uri.lstrip("/"),
        route_name=getattr(route, "name", None),
        path_params=dict(request.path_params),
        query_string=request.url.query,
    )
