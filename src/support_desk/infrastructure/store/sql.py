"""
SQLAlchemy Entity Store
=======================

Entity store over PostgreSQL using async SQLAlchemy.

Predicates are translated into SQL expressions; the store works on one
``AsyncSession`` whose commit/rollback is owned by the caller.
"""

from typing import Any, Dict, List, Optional, Type
from uuid import uuid4

from sqlalchemy import Select, and_, case, delete, false, func, null, or_, select, true, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.core import RepositoryException
from support_desk.infrastructure.database import Base
from support_desk.infrastructure.store.base import (
    CASE_ID_FIELD, Collection, Document, EntityStore, case_already_exists
)
from support_desk.infrastructure.store.models import SupportCaseModel, SupportPersonModel
from support_desk.shared.domain.query import (
    And, Contains, Eq, Lt, MatchAll, Ne, Or, Predicate, SortKey
)

_MODELS: Dict[Collection, Type[Base]] = {
    Collection.CASES: SupportCaseModel,
    Collection.PERSONS: SupportPersonModel,
}


def _column(model: Type[Base], field: str):
    if field == "position" or field not in model.__table__.columns:
        raise RepositoryException(f"Unknown field '{field}' for {model.__tablename__}")
    return model.__table__.columns[field]


def build_where(model: Type[Base], predicate: Predicate):
    """Translate a predicate into a SQL boolean expression."""
    if isinstance(predicate, MatchAll):
        return true()
    if isinstance(predicate, Eq):
        column = _column(model, predicate.field)
        return column.is_(None) if predicate.value is None else column == predicate.value
    if isinstance(predicate, Ne):
        column = _column(model, predicate.field)
        if predicate.value is None:
            return column.is_not(None)
        return or_(column.is_(None), column != predicate.value)
    if isinstance(predicate, Lt):
        return _column(model, predicate.field) < predicate.value
    if isinstance(predicate, Contains):
        return _column(model, predicate.field).contains([predicate.value])
    if isinstance(predicate, And):
        return and_(*(build_where(model, c) for c in predicate.clauses))
    if isinstance(predicate, Or):
        if not predicate.clauses:
            return false()
        return or_(*(build_where(model, c) for c in predicate.clauses))
    raise RepositoryException(f"Unsupported predicate: {type(predicate).__name__}")


def build_order_by(model: Type[Base], sort: Optional[SortKey]) -> list:
    """Order clauses for a sort key, always tie-broken by insertion order."""
    position = model.__table__.columns["position"]
    if sort is None:
        return [position.asc()]

    expression = _column(model, sort.field)
    if sort.rank is not None:
        # NULL stays NULL so it keeps sorting lowest, as in the memory store
        column = expression
        expression = case(
            (column.is_(None), null()),
            *((column == value, index) for index, value in enumerate(sort.rank)),
            else_=len(sort.rank),
        )
    if sort.descending:
        ordered = expression.desc().nulls_last()
    else:
        ordered = expression.asc().nulls_first()
    return [ordered, position.asc()]


def build_find(
    model: Type[Base],
    predicate: Predicate,
    sort: Optional[SortKey] = None,
    skip: int = 0,
    limit: Optional[int] = None
) -> Select:
    """Build the SELECT statement for a find call."""
    stmt = (
        select(model.__table__)
        .where(build_where(model, predicate))
        .order_by(*build_order_by(model, sort))
    )
    if skip:
        stmt = stmt.offset(skip)
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt


class SQLAlchemyEntityStore(EntityStore):
    """SQLAlchemy implementation of the entity store."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find(
        self,
        collection: Collection,
        predicate: Predicate,
        sort: Optional[SortKey] = None,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> List[Document]:
        model = _MODELS[collection]
        stmt = build_find(model, predicate, sort, skip, limit)
        result = await self._execute(stmt)
        return [self._to_document(row) for row in result.mappings().all()]

    async def find_one(self, collection: Collection, predicate: Predicate) -> Optional[Document]:
        model = _MODELS[collection]
        result = await self._execute(build_find(model, predicate, limit=1))
        row = result.mappings().first()
        return self._to_document(row) if row is not None else None

    async def count(self, collection: Collection, predicate: Predicate = MatchAll()) -> int:
        model = _MODELS[collection]
        stmt = select(func.count()).select_from(model).where(build_where(model, predicate))
        result = await self._execute(stmt)
        return int(result.scalar_one())

    async def insert(self, collection: Collection, document: Document) -> Document:
        model = _MODELS[collection]
        values = dict(document)
        if collection is Collection.CASES and not values.get(CASE_ID_FIELD):
            values[CASE_ID_FIELD] = uuid4().hex

        self._session.add(model(**values))
        try:
            await self._session.flush()
        except IntegrityError as e:
            # support_cases.id is the only unique column on cases
            if collection is Collection.CASES:
                raise case_already_exists(values[CASE_ID_FIELD]) from e
            raise RepositoryException(f"Insert into {collection.value} failed: {e}") from e
        except SQLAlchemyError as e:
            raise RepositoryException(f"Insert into {collection.value} failed: {e}") from e
        return values

    async def replace_if_matched(
        self,
        collection: Collection,
        predicate: Predicate,
        document: Document
    ) -> int:
        model = _MODELS[collection]
        position = await self._first_position(model, predicate)
        if position is None:
            return 0
        values = {k: v for k, v in document.items() if k != "position"}
        await self._execute(
            update(model).where(model.__table__.columns["position"] == position).values(**values)
        )
        return 1

    async def update_field(
        self,
        collection: Collection,
        predicate: Predicate,
        field: str,
        value: Any
    ) -> int:
        model = _MODELS[collection]
        _column(model, field)
        position = await self._first_position(model, predicate)
        if position is None:
            return 0
        await self._execute(
            update(model).where(model.__table__.columns["position"] == position).values({field: value})
        )
        return 1

    async def delete(self, collection: Collection, predicate: Predicate) -> int:
        model = _MODELS[collection]
        position = await self._first_position(model, predicate)
        if position is None:
            return 0
        await self._execute(delete(model).where(model.__table__.columns["position"] == position))
        return 1

    async def _first_position(self, model: Type[Base], predicate: Predicate) -> Optional[int]:
        position = model.__table__.columns["position"]
        stmt = (
            select(position)
            .where(build_where(model, predicate))
            .order_by(position.asc())
            .limit(1)
        )
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def _execute(self, stmt):
        try:
            return await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryException(f"Entity store query failed: {e}") from e

    @staticmethod
    def _to_document(row) -> Document:
        return {key: value for key, value in row.items() if key != "position"}
