"""
Support Case Repositories
=========================

Entity-store implementations backing the case module: the case
repository itself and the person directory used for assignment checks.
"""

from typing import List, Optional

from support_desk.cases.application import IPersonDirectory, ISupportCaseRepository
from support_desk.cases.domain import PersonStatus, SupportCase
from support_desk.infrastructure.store import CASE_ID_FIELD, Collection, EntityStore
from support_desk.shared.domain import And, Eq, MatchAll, StoreQuery


class StoreSupportCaseRepository(ISupportCaseRepository):
    """Support case repository over an ``EntityStore``."""

    def __init__(self, store: EntityStore):
        self._store = store

    async def get(self, case_id: str) -> Optional[SupportCase]:
        document = await self._store.find_one(Collection.CASES, Eq(CASE_ID_FIELD, case_id))
        return SupportCase.from_document(document) if document is not None else None

    async def find(self, query: StoreQuery) -> List[SupportCase]:
        documents = await self._store.find(
            Collection.CASES,
            query.predicate,
            sort=query.sort,
            skip=query.skip,
            limit=query.limit,
        )
        return [SupportCase.from_document(d) for d in documents]

    async def create(self, case: SupportCase) -> SupportCase:
        stored = await self._store.insert(Collection.CASES, case.to_document())
        return SupportCase.from_document(stored)

    async def replace(self, case_id: str, case: SupportCase) -> int:
        document = case.to_document()
        document[CASE_ID_FIELD] = case_id
        return await self._store.replace_if_matched(
            Collection.CASES, Eq(CASE_ID_FIELD, case_id), document
        )

    async def delete(self, case_id: str) -> int:
        return await self._store.delete(Collection.CASES, Eq(CASE_ID_FIELD, case_id))

    async def count_all(self) -> int:
        return await self._store.count(Collection.CASES, MatchAll())


class StorePersonDirectory(IPersonDirectory):
    """
    Resolves assignment targets straight from the person collection.

    Soft-deleted records are consulted too, so an inactive alias is told
    apart from one that never existed.
    """

    def __init__(self, store: EntityStore):
        self._store = store

    async def resolve(self, alias: str) -> PersonStatus:
        if await self._store.exists(
            Collection.PERSONS, And.of(Eq("alias", alias), Eq("is_active", True))
        ):
            return PersonStatus.active()
        if await self._store.exists(Collection.PERSONS, Eq("alias", alias)):
            return PersonStatus.inactive()
        return PersonStatus.missing()
