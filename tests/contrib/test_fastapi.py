"""Tests for the FastAPI request dependency and exception handlers."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from resource_query import (
    ConfigurationError,
    PaginateResults,
    ResourceFilters,
    ResourceOrders,
    ResourcePipeline,
    ResourceRequest,
)
from resource_query.contrib.fastapi import (
    get_resource_request,
    register_exception_handlers,
)


def _app(query_factory) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    pipeline = ResourcePipeline(
        filters=ResourceFilters(allowed_columns={"title": ["eq", "like"]}),
        orders=ResourceOrders(allowed_columns=["title"]),
        pagination=PaginateResults(),
    )

    @app.get("/users/{user}/posts", name="users.posts.index")
    def index(
        user: int, resource: ResourceRequest = Depends(get_resource_request)
    ) -> dict:
        page = pipeline.resolve(resource, query_factory())
        return {
            "uri": resource.uri,
            "path": resource.path,
            "route_name": resource.route_name,
            "hash": resource.hash(),
            "page": page.to_dict(),
        }

    @app.get("/files/{file_path:path}", name="files.show")
    def show(
        file_path: str, resource: ResourceRequest = Depends(get_resource_request)
    ) -> dict:
        return {"path": resource.path, "hash": resource.hash()}

    @app.get("/broken")
    def broken() -> dict:
        raise ConfigurationError('Invalid "money" field type')

    return app


@pytest.fixture
def client(query_factory) -> TestClient:
    return TestClient(_app(query_factory))


def test_request_is_built_from_route(client: TestClient) -> None:
    body = client.get("/users/7/posts?title=a").json()

    assert body["uri"] == "users/{user}/posts"
    assert body["path"] == "/users/7/posts"
    assert body["route_name"] == "users.posts.index"
    assert body["hash"].startswith("GET users/7/posts [users.posts.index@")
    assert body["page"]["links"]["first"] == "/users/7/posts?title=a&page=1"


def test_identity_ignores_cache_parameter(client: TestClient) -> None:
    first = client.get("/users/7/posts?title=a").json()["hash"]
    second = client.get("/users/7/posts?title=a&cache=99").json()["hash"]
    other = client.get("/users/8/posts?title=a").json()["hash"]

    assert first == second
    assert first != other


def test_converter_routes_have_distinct_identities(client: TestClient) -> None:
    first = client.get("/files/docs/a.txt").json()
    second = client.get("/files/docs/b.txt").json()

    assert first["path"] == "/files/docs/a.txt"
    assert first["hash"].startswith("GET files/docs/a.txt [files.show@")
    assert first["hash"] != second["hash"]


def test_malformed_input_is_bad_request(client: TestClient) -> None:
    response = client.get("/users/7/posts?title[like]=a")

    assert response.status_code == 400
    assert response.json() == {
        "error": "InvalidOperatorError",
        "message": 'Invalid "like" operator',
        "errors": {"title": ['Invalid "like" operator']},
    }


def test_invalid_order_is_bad_request(client: TestClient) -> None:
    response = client.get("/users/7/posts?order=title")

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidOrderError"


def test_configuration_error_is_opaque(client: TestClient) -> None:
    response = client.get("/broken")

    assert response.status_code == 500
    assert response.json() == {"error": "ConfigurationError", "message": "Server error"}
