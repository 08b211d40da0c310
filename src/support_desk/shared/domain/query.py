"""
Query Primitives
================

Store-agnostic predicates, sort keys and pagination shared by the case and
person listings.

Predicates are plain immutable values. Each one can evaluate itself against a
document (``matches``), which is what the in-memory store uses; the SQL store
translates the same values into SQLAlchemy expressions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

from support_desk.config import MAX_LIST_LIMIT

T = TypeVar("T")


class Predicate(ABC):
    """Base class for filter predicates over a document."""

    @abstractmethod
    def matches(self, document: Mapping[str, Any]) -> bool:
        """Whether the document satisfies the predicate."""

    def __and__(self, other: "Predicate") -> "Predicate":
        return And.of(self, other)


@dataclass(frozen=True)
class MatchAll(Predicate):
    """Matches every document."""

    def matches(self, document: Mapping[str, Any]) -> bool:
        return True


@dataclass(frozen=True)
class Eq(Predicate):
    field: str
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        return document.get(self.field) == self.value


@dataclass(frozen=True)
class Ne(Predicate):
    field: str
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        return document.get(self.field) != self.value


@dataclass(frozen=True)
class Lt(Predicate):
    field: str
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        current = document.get(self.field)
        return current is not None and current < self.value


@dataclass(frozen=True)
class Contains(Predicate):
    """Array membership: ``value in document[field]``."""
    field: str
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        return self.value in (document.get(self.field) or ())


@dataclass(frozen=True)
class And(Predicate):
    clauses: Tuple[Predicate, ...]

    @classmethod
    def of(cls, *clauses: Predicate) -> Predicate:
        """Conjunction that flattens nested ``And`` and drops ``MatchAll``."""
        flat: List[Predicate] = []
        for clause in clauses:
            if isinstance(clause, MatchAll):
                continue
            if isinstance(clause, And):
                flat.extend(clause.clauses)
            else:
                flat.append(clause)
        if not flat:
            return MatchAll()
        if len(flat) == 1:
            return flat[0]
        return cls(tuple(flat))

    def matches(self, document: Mapping[str, Any]) -> bool:
        return all(clause.matches(document) for clause in self.clauses)


@dataclass(frozen=True)
class Or(Predicate):
    clauses: Tuple[Predicate, ...]

    @classmethod
    def of(cls, *clauses: Predicate) -> Predicate:
        return cls(tuple(clauses))

    def matches(self, document: Mapping[str, Any]) -> bool:
        return any(clause.matches(document) for clause in self.clauses)


@dataclass(frozen=True)
class SortKey:
    """
    Sort on a single document field.

    ``rank`` optionally maps field values to their position in an ordered
    vocabulary; values outside it sort after the ranked ones. ``None`` field
    values always sort lowest.
    """
    field: str
    descending: bool = False
    rank: Optional[Tuple[Any, ...]] = None

    def key(self, document: Mapping[str, Any]) -> Tuple[int, Any]:
        value = document.get(self.field)
        if value is None:
            return (0, 0)
        if self.rank is not None:
            return (1, self.rank.index(value) if value in self.rank else len(self.rank))
        return (1, value)


def clamp_limit(limit: Optional[int], default: int, maximum: int = MAX_LIST_LIMIT) -> int:
    """Apply the default for a missing limit and clamp it to ``[1, maximum]``."""
    if limit is None:
        return default
    return max(1, min(limit, maximum))


@dataclass(frozen=True)
class StoreQuery:
    """A fully built listing request for the entity store."""
    predicate: Predicate = field(default_factory=MatchAll)
    sort: Optional[SortKey] = None
    skip: int = 0
    limit: Optional[int] = None


@dataclass
class Page(Generic[T]):
    """One page of a listing plus the size of the whole filtered set."""
    items: Sequence[T]
    total: int
    limit: int
    offset: int

    @property
    def has_next(self) -> bool:
        return self.offset + self.limit < self.total

    @property
    def has_previous(self) -> bool:
        return self.offset > 0
