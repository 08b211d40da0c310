"""
Support Person Repositories
===========================

Entity-store implementation of the support person repository.
"""

from typing import List, Optional

from support_desk.infrastructure.store import CASE_ID_FIELD, Collection, EntityStore
from support_desk.persons.application import ISupportPersonRepository
from support_desk.persons.domain import SupportPerson
from support_desk.shared.domain import And, Eq, MatchAll, Ne, Predicate, StoreQuery

# Field on case documents that references a person alias
ASSIGNED_PERSON_FIELD = "assigned_support_person"


class StoreSupportPersonRepository(ISupportPersonRepository):
    """Support person repository over an ``EntityStore``."""

    def __init__(self, store: EntityStore):
        self._store = store

    @staticmethod
    def _scoped(predicate: Predicate, include_deleted: bool = False) -> Predicate:
        """Restrict a predicate to active persons unless told otherwise."""
        if include_deleted:
            return predicate
        return And.of(Eq("is_active", True), predicate)

    async def get(self, alias: str, include_deleted: bool = False) -> Optional[SupportPerson]:
        document = await self._store.find_one(
            Collection.PERSONS, self._scoped(Eq("alias", alias), include_deleted)
        )
        return SupportPerson.from_document(document) if document is not None else None

    async def find(self, query: StoreQuery, include_deleted: bool = False) -> List[SupportPerson]:
        documents = await self._store.find(
            Collection.PERSONS,
            self._scoped(query.predicate, include_deleted),
            sort=query.sort,
            skip=query.skip,
            limit=query.limit,
        )
        return [SupportPerson.from_document(d) for d in documents]

    async def count(self, predicate: Predicate, include_deleted: bool = False) -> int:
        return await self._store.count(Collection.PERSONS, self._scoped(predicate, include_deleted))

    async def exists(self, alias: str) -> bool:
        return await self._store.exists(Collection.PERSONS, self._scoped(Eq("alias", alias)))

    async def find_by_email(self, email: str, exclude_alias: Optional[str] = None) -> Optional[SupportPerson]:
        predicate = Eq("email", email)
        if exclude_alias is not None:
            predicate = And.of(predicate, Ne("alias", exclude_alias))
        document = await self._store.find_one(Collection.PERSONS, self._scoped(predicate))
        return SupportPerson.from_document(document) if document is not None else None

    async def create(self, person: SupportPerson) -> SupportPerson:
        stored = await self._store.insert(Collection.PERSONS, person.to_document())
        return SupportPerson.from_document(stored)

    async def replace(self, alias: str, person: SupportPerson) -> int:
        return await self._store.replace_if_matched(
            Collection.PERSONS, self._scoped(Eq("alias", alias)), person.to_document()
        )

    async def deactivate(self, alias: str) -> int:
        return await self._store.update_field(
            Collection.PERSONS, self._scoped(Eq("alias", alias)), "is_active", False
        )

    async def count_all(self) -> int:
        return await self._store.count(Collection.PERSONS, MatchAll())

    async def count_assigned_cases(self, alias: str) -> int:
        return await self._store.count(Collection.CASES, Eq(ASSIGNED_PERSON_FIELD, alias))

    async def assigned_case_ids(self, alias: str, limit: int) -> List[str]:
        documents = await self._store.find(
            Collection.CASES, Eq(ASSIGNED_PERSON_FIELD, alias), limit=limit
        )
        return [d[CASE_ID_FIELD] for d in documents]
