"""ResourceRelations: allow-listed eager loading and relation counts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidRelationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .ports import IQueryContext, NextHandler, RelationLoader
    from .request import ResourceRequest

logger = logging.getLogger("resource_query.relations")

RelationSet = dict[str, "RelationLoader | None"]


def parse_requested(requested: Any) -> set[str]:
    """Normalize the ``with`` parameter into a set of relation aliases.

    Accepts ``"a,b"``, ``"a"``, ``["a", "b"]`` and ``{"0": "a"}``.

    Raises:
        InvalidRelationError: For any other shape.
    """
    if isinstance(requested, str):
        return {part.strip() for part in requested.split(",") if part.strip()}
    if isinstance(requested, Mapping):
        values = list(requested.values())
    elif isinstance(requested, (list, tuple)):
        values = list(requested)
    else:
        values = None
    if values is None or not all(isinstance(v, str) for v in values):
        raise InvalidRelationError(
            'Parameter "with" must be a list of relation names, '
            "example: with=author,comments or with[]=author",
            parameter="with",
        )
    return set(values)


class ResourceRelations:
    """Register eager loads and counts on a query.

    ``with_`` and ``with_count`` are always applied. Request-selected
    relations come from ``allowed_relations``, mapping an alias to one or
    more relation names (a plain list means alias == relation name).

    Custom loaders replace default eager loading for a relation:
    ``loaders`` is keyed by relation name, or by the first segment of a
    dotted alias (``author`` handles ``author.posts``); ``count_loaders``
    is keyed by relation name and is independent of ``loaders``. A loader
    receives the relation's own query and constrains it.
    """

    def __init__(
        self,
        *,
        with_: Mapping[str, RelationLoader | None] | Sequence[str] | None = None,
        with_count: Sequence[str] | None = None,
        allowed_relations: Mapping[str, str | Sequence[str]] | Sequence[str] | None = None,
        loaders: Mapping[str, RelationLoader] | None = None,
        count_loaders: Mapping[str, RelationLoader] | None = None,
        with_key: str = "with",
    ) -> None:
        if isinstance(with_, Mapping):
            self.with_: RelationSet = dict(with_)
        else:
            self.with_ = dict.fromkeys(with_ or [])
        self.with_count = list(with_count or [])
        if isinstance(allowed_relations, Mapping):
            self.allowed_relations = {
                alias: [names] if isinstance(names, str) else list(names)
                for alias, names in allowed_relations.items()
            }
        else:
            self.allowed_relations = {name: [name] for name in allowed_relations or []}
        self.loaders = dict(loaders or {})
        self.count_loaders = dict(count_loaders or {})
        self.with_key = with_key

    def __call__(
        self,
        request: ResourceRequest,
        query: IQueryContext,
        next_handler: NextHandler,
    ) -> Any:
        self.apply(query, request.query_value(self.with_key))
        return next_handler(query)

    def apply(self, query: IQueryContext, requested: Any) -> None:
        relations, counts = self.resolve(requested)
        query.with_relations(relations)
        query.with_counts(counts)

    def resolve(self, requested: Any) -> tuple[RelationSet, RelationSet]:
        """Return the ``(relations, counts)`` to register for ``requested``."""
        relations: RelationSet = dict(self.with_)

        if requested is not None:
            aliases = parse_requested(requested)
            for alias, relation_names in self.allowed_relations.items():
                if alias not in aliases:
                    continue
                loader = self.loaders.get(alias.split(".", 1)[0])
                for relation_name in relation_names:
                    if loader is not None:
                        relations[relation_name] = loader
                    else:
                        relations.setdefault(relation_name, None)
            for alias in aliases.difference(self.allowed_relations):
                logger.debug("Ignoring relation %r", alias)

        relations = self._attach_loaders(relations, self.loaders)
        counts = self._attach_loaders(dict.fromkeys(self.with_count), self.count_loaders)
        return relations, counts

    @staticmethod
    def _attach_loaders(
        relations: RelationSet, registry: Mapping[str, RelationLoader]
    ) -> RelationSet:
        return {
            name: loader if loader is not None else registry.get(name)
            for name, loader in relations.items()
        }
