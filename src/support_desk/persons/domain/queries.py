"""
Support Person Queries
======================

Builds the store query behind the support person listing.

The active-only restriction is not part of these predicates; the
repository applies it to every read.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from support_desk.config import (
    AVAILABILITY_WORKLOAD_THRESHOLD,
    DEFAULT_LIST_LIMIT,
    PersonSortField,
    SENIORITY_LEVELS,
    SortOrder,
)
from support_desk.shared.domain.query import (
    And, Contains, Eq, Lt, Predicate, SortKey, StoreQuery, clamp_limit
)


# Listing sort keys mapped to document fields
_SORT_FIELDS: Dict[str, str] = {
    PersonSortField.NAME: "name",
    PersonSortField.SENIORITY: "seniority",
    PersonSortField.WORKLOAD: "current_workload",
    PersonSortField.RATING: "customer_satisfaction_rating",
}


@dataclass
class PersonFilter:
    """Listing parameters for support persons."""
    specialization: Optional[str] = None
    seniority: Optional[str] = None
    available: Optional[bool] = None
    limit: Optional[int] = None
    offset: int = 0
    sort_by: Optional[str] = PersonSortField.NAME
    sort_order: Optional[str] = SortOrder.ASC

    @property
    def effective_limit(self) -> int:
        return clamp_limit(self.limit, DEFAULT_LIST_LIMIT)

    @property
    def effective_offset(self) -> int:
        return max(0, self.offset or 0)


def build_person_predicate(person_filter: PersonFilter) -> Predicate:
    """Conjunction of the optional listing filters."""
    clauses = []
    if person_filter.specialization:
        clauses.append(Contains("specializations", person_filter.specialization))
    if person_filter.seniority:
        clauses.append(Eq("seniority", person_filter.seniority))
    if person_filter.available:
        clauses.append(Lt("current_workload", AVAILABILITY_WORKLOAD_THRESHOLD))
    return And.of(*clauses)


def build_person_sort(sort_by: Optional[str], sort_order: Optional[str]) -> SortKey:
    """
    Resolve the listing sort.

    Unknown sort keys fall back to ascending by name whatever the requested
    order. Seniority sorts by level rank rather than alphabetically.
    """
    key = (sort_by or PersonSortField.NAME).lower()
    if key not in _SORT_FIELDS:
        return SortKey("name")

    descending = (sort_order or SortOrder.ASC).lower() == SortOrder.DESC
    rank = tuple(SENIORITY_LEVELS) if key == PersonSortField.SENIORITY else None
    return SortKey(_SORT_FIELDS[key], descending=descending, rank=rank)


def build_person_query(person_filter: PersonFilter) -> StoreQuery:
    """Full store query for one page of the listing."""
    return StoreQuery(
        predicate=build_person_predicate(person_filter),
        sort=build_person_sort(person_filter.sort_by, person_filter.sort_order),
        skip=person_filter.effective_offset,
        limit=person_filter.effective_limit,
    )
