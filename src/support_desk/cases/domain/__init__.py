"""
Support Case Domain Layer
=========================

Contains:
- Entities: SupportCase
- Validators: AssignmentValidator, PersonStatus
- Queries: paged and filtered listing builders
"""

from support_desk.cases.domain.entities import SupportCase
from support_desk.cases.domain.queries import (
    CaseFilter,
    build_case_predicate,
    build_filtered_case_query,
    build_paged_case_query,
    normalize_page_number,
)
from support_desk.cases.domain.validators import AssignmentValidator, PersonStatus

__all__ = [
    "SupportCase",
    "AssignmentValidator",
    "PersonStatus",
    "CaseFilter",
    "build_case_predicate",
    "build_filtered_case_query",
    "build_paged_case_query",
    "normalize_page_number",
]
