"""
SQLAlchemy implementation of the query context.

``SQLAlchemyQueryContext`` accumulates criteria, orderings, eager loads and
relation counts for a mapped model and builds a single ``Select`` when it
is materialized. Eager loads use ``selectinload``; a custom relation loader
receives a ``SQLAlchemyRelationQuery`` whose criteria are attached with
``relationship.and_()``. Counts are correlated ``count(*)`` subqueries
exposed on each loaded entity as ``<relation>_count``.

Example::

    with Session(engine) as session:
        query = SQLAlchemyQueryContext(UserRecord, session)
        page = pipeline.resolve(request, query)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, asc, desc, func, select
from sqlalchemy.orm import RelationshipProperty, selectinload

from ...pagination import Page
from .operators import DEFAULT_COMPARISONS

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.orm import Session
    from sqlalchemy.orm.strategy_options import _AbstractLoad

    from ...ports import RelationLoader
    from .operators import ComparisonRegistry


class SQLAlchemyRelationQuery:
    """Conditions on one mapped model, combined with AND."""

    def __init__(
        self,
        model: type[Any],
        registry: ComparisonRegistry | None = None,
    ) -> None:
        self.model = model
        self.criteria: list[ColumnElement[bool]] = []
        self._registry = registry or DEFAULT_COMPARISONS

    def column(self, name: str) -> Any:
        """Return the mapped attribute ``name`` of the model.

        Raises:
            AttributeError: If the model has no such attribute.
        """
        column = getattr(self.model, name, None)
        if column is None:
            raise AttributeError(f"Model {self.model.__name__} has no column {name!r}")
        return column

    def where(self, column: str, operator: str, value: Any) -> SQLAlchemyRelationQuery:
        self.criteria.append(self._registry.apply(operator, self.column(column), value))
        return self

    def where_in(self, column: str, values: Sequence[Any]) -> SQLAlchemyRelationQuery:
        return self.where(column, "in", values)

    def where_between(
        self, column: str, values: Sequence[Any]
    ) -> SQLAlchemyRelationQuery:
        return self.where(column, "between", values)

    def where_group(self, callback: Callable[[Any], None]) -> SQLAlchemyRelationQuery:
        group = SQLAlchemyRelationQuery(self.model, self._registry)
        callback(group)
        if group.criteria:
            self.criteria.append(and_(*group.criteria))
        return self

    def filter(self, *criteria: ColumnElement[bool]) -> SQLAlchemyRelationQuery:
        """Add raw SQLAlchemy criteria (for override handlers)."""
        self.criteria.extend(criteria)
        return self


class SQLAlchemyQueryContext(SQLAlchemyRelationQuery):
    """Query context over a mapped model, executed with a sync ``Session``."""

    def __init__(
        self,
        model: type[Any],
        session: Session,
        stmt: Select[Any] | None = None,
        registry: ComparisonRegistry | None = None,
    ) -> None:
        """
        Initialize the query context.

        Args:
            model: The SQLAlchemy model class.
            session: Session used by ``get`` and ``paginate``.
            stmt: Base statement; defaults to ``select(model)``.
            registry: Optional custom comparison registry.
        """
        super().__init__(model, registry)
        self.session = session
        self.stmt = stmt if stmt is not None else select(model)
        self.orderings: list[ColumnElement[Any]] = []
        self.load_options: list[_AbstractLoad] = []
        self.counts: list[tuple[str, ColumnElement[Any]]] = []

    def order_by(self, column: str, direction: str = "asc") -> SQLAlchemyQueryContext:
        attr = self.column(column)
        self.orderings.append(desc(attr) if direction.lower() == "desc" else asc(attr))
        return self

    def with_relations(
        self, relations: Mapping[str, RelationLoader | None]
    ) -> SQLAlchemyQueryContext:
        for name, loader in relations.items():
            self.load_options.append(self._load_option(name, loader))
        return self

    def with_counts(
        self, counts: Mapping[str, RelationLoader | None]
    ) -> SQLAlchemyQueryContext:
        for name, loader in counts.items():
            label = f"{name}_count"
            self.counts.append((label, self._count_subquery(name, loader).label(label)))
        return self

    def statement(self) -> Select[Any]:
        """The full ``Select`` with criteria, counts, loads and ordering."""
        stmt = self.stmt
        if self.criteria:
            stmt = stmt.where(*self.criteria)
        if self.counts:
            stmt = stmt.add_columns(*(column for _, column in self.counts))
        if self.load_options:
            stmt = stmt.options(*self.load_options)
        if self.orderings:
            stmt = stmt.order_by(*self.orderings)
        return stmt

    def count(self) -> int:
        base = self.stmt.where(*self.criteria) if self.criteria else self.stmt
        total = self.session.scalar(
            select(func.count()).select_from(base.order_by(None).subquery())
        )
        return int(total or 0)

    def get(self) -> list[Any]:
        return self._fetch(self.statement())

    def paginate(
        self,
        per_page: int,
        page: int = 1,
        query_params: Mapping[str, Any] | None = None,
        page_key: str = "page",
        path: str = "",
    ) -> Page[Any]:
        total = self.count()
        stmt = self.statement().limit(per_page).offset((page - 1) * per_page)
        return Page(
            items=self._fetch(stmt),
            total=total,
            per_page=per_page,
            current_page=page,
            path=path,
            query_params=dict(query_params or {}),
            page_key=page_key,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fetch(self, stmt: Select[Any]) -> list[Any]:
        if not self.counts:
            return list(self.session.scalars(stmt).all())
        items = []
        for row in self.session.execute(stmt).all():
            entity = row[0]
            for (label, _), value in zip(self.counts, row[1:]):
                setattr(entity, label, value)
            items.append(entity)
        return items

    @staticmethod
    def _relationship(model: type[Any], name: str) -> Any:
        attr = getattr(model, name, None)
        if attr is None or not isinstance(
            getattr(attr, "property", None), RelationshipProperty
        ):
            raise AttributeError(f"Model {model.__name__} has no relationship {name!r}")
        return attr

    def _load_option(self, name: str, loader: RelationLoader | None) -> _AbstractLoad:
        # "author.posts" loads author, then the author's posts
        parts = name.split(".")
        model = self.model
        option: Any = None
        for index, part in enumerate(parts):
            attr = self._relationship(model, part)
            target = attr.property.mapper.class_
            if loader is not None and index == len(parts) - 1:
                relation_query = SQLAlchemyRelationQuery(target, self._registry)
                loader(relation_query)
                if relation_query.criteria:
                    attr = attr.and_(*relation_query.criteria)
            option = selectinload(attr) if option is None else option.selectinload(attr)
            model = target
        return option

    def _count_subquery(self, name: str, loader: RelationLoader | None) -> Any:
        prop = self._relationship(self.model, name).property
        target = prop.mapper.class_
        sub = select(func.count()).select_from(target)
        if prop.secondary is not None:
            sub = sub.join(prop.secondary, prop.secondaryjoin)
        sub = sub.where(prop.primaryjoin)
        if loader is not None:
            relation_query = SQLAlchemyRelationQuery(target, self._registry)
            loader(relation_query)
            if relation_query.criteria:
                sub = sub.where(*relation_query.criteria)
        return sub.scalar_subquery()
