"""
Entity Store Interface
======================

Document-store abstraction over the two logical collections (cases and
persons). Implementations must raise ``RepositoryException`` when the
underlying store fails; callers surface it unchanged.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from support_desk.core import ConflictException
from support_desk.shared.domain.query import MatchAll, Predicate, SortKey

Document = Dict[str, Any]


class Collection(str, Enum):
    """Logical collections held by the store."""
    CASES = "support_cases"
    PERSONS = "support_persons"


# Field that identifies a case document; assigned on insert when absent
CASE_ID_FIELD = "id"


def case_already_exists(case_id: str) -> ConflictException:
    """Failure for an insert reusing an existing case id."""
    return ConflictException(
        "CASE_ALREADY_EXISTS",
        f"Support case with id '{case_id}' already exists",
        {"id": case_id}
    )


class EntityStore(ABC):
    """
    Interface for document access.

    Mutating calls act on the first document (in insertion order) matching
    the predicate and report how many documents matched (0 or 1).
    """

    @abstractmethod
    async def find(
        self,
        collection: Collection,
        predicate: Predicate,
        sort: Optional[SortKey] = None,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> List[Document]:
        """Return matching documents, sorted then windowed by skip/limit."""

    @abstractmethod
    async def find_one(self, collection: Collection, predicate: Predicate) -> Optional[Document]:
        """Return the first matching document, or None."""

    @abstractmethod
    async def count(self, collection: Collection, predicate: Predicate = MatchAll()) -> int:
        """Count matching documents."""

    async def exists(self, collection: Collection, predicate: Predicate) -> bool:
        """Check whether any document matches."""
        return await self.find_one(collection, predicate) is not None

    @abstractmethod
    async def insert(self, collection: Collection, document: Document) -> Document:
        """
        Insert a document and return it as stored (with its assigned id).

        Raises:
            ConflictException: ``CASE_ALREADY_EXISTS`` for a supplied case id already in use
        """

    @abstractmethod
    async def replace_if_matched(
        self,
        collection: Collection,
        predicate: Predicate,
        document: Document
    ) -> int:
        """Replace the first matching document."""

    @abstractmethod
    async def update_field(
        self,
        collection: Collection,
        predicate: Predicate,
        field: str,
        value: Any
    ) -> int:
        """Set one field on the first matching document."""

    @abstractmethod
    async def delete(self, collection: Collection, predicate: Predicate) -> int:
        """Delete the first matching document."""
