"""Tests for ResourceRelations."""

from __future__ import annotations

import pytest

from resource_query.exceptions import InvalidRelationError
from resource_query.relations import ResourceRelations, parse_requested
from resource_query.request import ResourceRequest


def _apply(relations: ResourceRelations, url: str, query) -> None:
    relations(ResourceRequest.from_url(url), query, lambda q: q)


def load_published(relation) -> None:
    relation.where("published", "=", True)


def count_approved(relation) -> None:
    relation.where("approved", "=", True)


class TestAlwaysLoaded:
    def test_registered_without_request_parameter(self, query) -> None:
        relations = ResourceRelations(with_=["author"], with_count=["comments"])
        _apply(relations, "/posts", query)
        assert query.calls == [
            ("with", {"author": None}),
            ("with_count", {"comments": None}),
        ]

    def test_empty_sets_still_applied_once(self, query) -> None:
        _apply(ResourceRelations(), "/posts", query)
        assert query.calls == [("with", {}), ("with_count", {})]

    def test_loader_attached_by_relation_name(self, query) -> None:
        relations = ResourceRelations(with_=["comments"], loaders={"comments": load_published})
        _apply(relations, "/posts", query)
        assert query.named("with") == [("with", {"comments": load_published})]

    def test_explicit_loader_in_with(self, query) -> None:
        relations = ResourceRelations(with_={"comments": load_published})
        _apply(relations, "/posts", query)
        assert query.named("with") == [("with", {"comments": load_published})]


class TestRequested:
    @pytest.mark.parametrize(
        "url",
        [
            "/posts?with=comments,tags",
            "/posts?with[]=comments&with[]=tags",
            "/posts?with[0]=tags&with[1]=comments",
        ],
    )
    def test_accepted_forms(self, query, url: str) -> None:
        relations = ResourceRelations(allowed_relations=["comments", "tags", "author"])
        _apply(relations, url, query)
        assert query.named("with") == [("with", {"comments": None, "tags": None})]

    def test_single_name_without_comma(self, query) -> None:
        relations = ResourceRelations(allowed_relations=["comments"])
        _apply(relations, "/posts?with=comments", query)
        assert query.named("with") == [("with", {"comments": None})]

    def test_unlisted_relation_is_ignored(self, query) -> None:
        relations = ResourceRelations(allowed_relations=["comments"])
        _apply(relations, "/posts?with=secrets,comments", query)
        assert query.named("with") == [("with", {"comments": None})]

    def test_alias_to_several_relations(self, query) -> None:
        relations = ResourceRelations(
            allowed_relations={"people": ["author", "editor"], "labels": "tags"}
        )
        _apply(relations, "/posts?with=people,labels", query)
        assert query.named("with") == [
            ("with", {"author": None, "editor": None, "tags": None})
        ]

    def test_requested_relation_uses_loader(self, query) -> None:
        relations = ResourceRelations(
            allowed_relations=["comments"], loaders={"comments": load_published}
        )
        _apply(relations, "/posts?with=comments", query)
        assert query.named("with") == [("with", {"comments": load_published})]

    def test_dotted_alias_uses_loader_of_first_segment(self, query) -> None:
        relations = ResourceRelations(
            allowed_relations=["author.posts"], loaders={"author": load_published}
        )
        _apply(relations, "/posts?with=author.posts", query)
        assert query.named("with") == [("with", {"author.posts": load_published})]

    def test_always_loaded_relation_not_duplicated(self, query) -> None:
        relations = ResourceRelations(with_=["author"], allowed_relations=["author"])
        _apply(relations, "/posts?with=author", query)
        assert query.named("with") == [("with", {"author": None})]

    @pytest.mark.parametrize("url", ["/posts?with[0][x]=a", "/posts?with[a][]=b"])
    def test_malformed_directive(self, query, url: str) -> None:
        relations = ResourceRelations(allowed_relations=["comments"])
        with pytest.raises(InvalidRelationError) as exc_info:
            _apply(relations, url, query)
        assert exc_info.value.status_code == 400
        assert query.calls == []


class TestCounts:
    def test_load_and_count_overrides_are_independent(self, query) -> None:
        relations = ResourceRelations(
            with_count=["comments"],
            allowed_relations=["comments"],
            loaders={"comments": load_published},
            count_loaders={"comments": count_approved},
        )
        _apply(relations, "/posts?with=comments", query)
        assert query.calls == [
            ("with", {"comments": load_published}),
            ("with_count", {"comments": count_approved}),
        ]

    def test_count_without_loader(self, query) -> None:
        relations = ResourceRelations(
            with_count=["comments", "likes"], count_loaders={"likes": count_approved}
        )
        _apply(relations, "/posts", query)
        assert query.named("with_count") == [
            ("with_count", {"comments": None, "likes": count_approved})
        ]


def test_resolution_does_not_accumulate(query_factory) -> None:
    relations = ResourceRelations(
        with_=["author"], allowed_relations=["comments"], loaders={"comments": load_published}
    )
    first, second = query_factory(), query_factory()
    _apply(relations, "/posts?with=comments", first)
    _apply(relations, "/posts?with=comments", second)
    assert first.calls == second.calls
    assert relations.with_ == {"author": None}


def test_parse_requested_strips_blanks() -> None:
    assert parse_requested("a, b,,") == {"a", "b"}
    with pytest.raises(InvalidRelationError):
        parse_requested(5)
