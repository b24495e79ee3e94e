"""Shared fixtures: an in-memory query context recording every call."""

from __future__ import annotations

from typing import Any

import pytest

from resource_query.pagination import Page


class RecordingQuery:
    """Query context that records calls instead of building SQL."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def where(self, column: str, operator: str, value: Any) -> RecordingQuery:
        self.calls.append(("where", column, operator, value))
        return self

    def where_in(self, column: str, values: Any) -> RecordingQuery:
        self.calls.append(("where_in", column, list(values)))
        return self

    def where_between(self, column: str, values: Any) -> RecordingQuery:
        self.calls.append(("where_between", column, list(values)))
        return self

    def where_group(self, callback: Any) -> RecordingQuery:
        group = RecordingQuery()
        callback(group)
        self.calls.append(("group", group.calls))
        return self

    def order_by(self, column: str, direction: str = "asc") -> RecordingQuery:
        self.calls.append(("order_by", column, direction))
        return self

    def with_relations(self, relations: Any) -> RecordingQuery:
        self.calls.append(("with", dict(relations)))
        return self

    def with_counts(self, counts: Any) -> RecordingQuery:
        self.calls.append(("with_count", dict(counts)))
        return self

    def get(self) -> list[Any]:
        self.calls.append(("get",))
        return ["row"]

    def paginate(
        self,
        per_page: int,
        page: int = 1,
        query_params: Any = None,
        page_key: str = "page",
        path: str = "",
    ) -> Page[Any]:
        self.calls.append(("paginate", per_page, page))
        return Page(
            items=["row"],
            total=1,
            per_page=per_page,
            current_page=page,
            path=path,
            query_params=dict(query_params or {}),
            page_key=page_key,
        )

    def named(self, name: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def query() -> RecordingQuery:
    return RecordingQuery()


@pytest.fixture
def query_factory():
    """Create fresh recording queries (e.g. to compare two resolutions)."""
    return RecordingQuery
