"""
In-Memory Entity Store
======================

Process-local fallback store. Each collection is guarded by its own
reader/writer lock: writes are exclusive, reads may overlap each other.
"""

import asyncio
import copy
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from support_desk.infrastructure.store.base import (
    CASE_ID_FIELD, Collection, Document, EntityStore, case_already_exists
)
from support_desk.shared.domain.query import MatchAll, Predicate, SortKey


class ReadWriteLock:
    """Asyncio reader/writer lock."""

    def __init__(self):
        self._condition = asyncio.Condition()
        self._readers = 0
        self._writing = False

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._condition:
            await self._condition.wait_for(lambda: not self._writing)
            self._readers += 1
        try:
            yield
        finally:
            async with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._condition:
            await self._condition.wait_for(lambda: not self._writing and self._readers == 0)
            self._writing = True
        try:
            yield
        finally:
            async with self._condition:
                self._writing = False
                self._condition.notify_all()


class InMemoryEntityStore(EntityStore):
    """Entity store keeping documents in insertion-ordered lists."""

    def __init__(self):
        self._documents: Dict[Collection, List[Document]] = {c: [] for c in Collection}
        self._locks: Dict[Collection, ReadWriteLock] = {c: ReadWriteLock() for c in Collection}
        self._next_id = 0

    async def find(
        self,
        collection: Collection,
        predicate: Predicate,
        sort: Optional[SortKey] = None,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> List[Document]:
        async with self._locks[collection].read():
            matched = [d for d in self._documents[collection] if predicate.matches(d)]
            # list.sort is stable in both directions, so ties keep insertion order
            if sort is not None:
                matched.sort(key=sort.key, reverse=sort.descending)
            end = None if limit is None else skip + limit
            return [copy.deepcopy(d) for d in matched[skip:end]]

    async def find_one(self, collection: Collection, predicate: Predicate) -> Optional[Document]:
        async with self._locks[collection].read():
            document = self._first(collection, predicate)
            return copy.deepcopy(document) if document is not None else None

    async def count(self, collection: Collection, predicate: Predicate = MatchAll()) -> int:
        async with self._locks[collection].read():
            return sum(1 for d in self._documents[collection] if predicate.matches(d))

    async def insert(self, collection: Collection, document: Document) -> Document:
        stored = copy.deepcopy(document)
        async with self._locks[collection].write():
            if collection is Collection.CASES:
                stored[CASE_ID_FIELD] = self._claim_case_id(stored.get(CASE_ID_FIELD))
            self._documents[collection].append(stored)
            return copy.deepcopy(stored)

    async def replace_if_matched(
        self,
        collection: Collection,
        predicate: Predicate,
        document: Document
    ) -> int:
        async with self._locks[collection].write():
            documents = self._documents[collection]
            for index, current in enumerate(documents):
                if predicate.matches(current):
                    documents[index] = copy.deepcopy(document)
                    return 1
            return 0

    async def update_field(
        self,
        collection: Collection,
        predicate: Predicate,
        field: str,
        value: Any
    ) -> int:
        async with self._locks[collection].write():
            document = self._first(collection, predicate)
            if document is None:
                return 0
            document[field] = copy.deepcopy(value)
            return 1

    async def delete(self, collection: Collection, predicate: Predicate) -> int:
        async with self._locks[collection].write():
            documents = self._documents[collection]
            for index, current in enumerate(documents):
                if predicate.matches(current):
                    del documents[index]
                    return 1
            return 0

    def _claim_case_id(self, case_id: Optional[str]) -> str:
        taken = {d.get(CASE_ID_FIELD) for d in self._documents[Collection.CASES]}
        if case_id:
            if case_id in taken:
                raise case_already_exists(case_id)
            return case_id
        # skip counter values already supplied by clients
        while True:
            self._next_id += 1
            if str(self._next_id) not in taken:
                return str(self._next_id)

    def _first(self, collection: Collection, predicate: Predicate) -> Optional[Document]:
        for document in self._documents[collection]:
            if predicate.matches(document):
                return document
        return None
