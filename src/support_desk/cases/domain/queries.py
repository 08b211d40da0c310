"""
Support Case Queries
====================

Store queries for the two case listing shapes:

- Paged: fixed pages of 10 in insertion order, kept for older clients
- Filtered: assignment filters with limit/offset
"""

from dataclasses import dataclass
from typing import Optional

from support_desk.config import DEFAULT_LIST_LIMIT, LEGACY_PAGE_SIZE
from support_desk.shared.domain.query import (
    And, Eq, MatchAll, Ne, Or, Predicate, StoreQuery, clamp_limit
)
from support_desk.cases.domain.validators import ASSIGNED_PERSON_FIELD


@dataclass
class CaseFilter:
    """Filtered listing parameters for support cases."""
    assigned_to: Optional[str] = None
    unassigned: Optional[bool] = None
    limit: Optional[int] = None
    offset: int = 0


def normalize_page_number(page_number: Optional[int]) -> int:
    """1-based page number; missing or non-positive values mean page 1."""
    if page_number is None or page_number < 1:
        return 1
    return page_number


def build_paged_case_query(page_number: Optional[int]) -> StoreQuery:
    page = normalize_page_number(page_number)
    return StoreQuery(
        predicate=MatchAll(),
        skip=(page - 1) * LEGACY_PAGE_SIZE,
        limit=LEGACY_PAGE_SIZE,
    )


def build_case_predicate(case_filter: CaseFilter) -> Predicate:
    """Conjunction of the assignment filters."""
    clauses = []
    if case_filter.assigned_to:
        clauses.append(Eq(ASSIGNED_PERSON_FIELD, case_filter.assigned_to))

    if case_filter.unassigned is True:
        clauses.append(Or.of(Eq(ASSIGNED_PERSON_FIELD, None), Eq(ASSIGNED_PERSON_FIELD, "")))
    elif case_filter.unassigned is False:
        clauses.append(And.of(Ne(ASSIGNED_PERSON_FIELD, None), Ne(ASSIGNED_PERSON_FIELD, "")))

    return And.of(*clauses)


def build_filtered_case_query(case_filter: CaseFilter) -> StoreQuery:
    return StoreQuery(
        predicate=build_case_predicate(case_filter),
        skip=max(0, case_filter.offset or 0),
        limit=clamp_limit(case_filter.limit, DEFAULT_LIST_LIMIT),
    )
