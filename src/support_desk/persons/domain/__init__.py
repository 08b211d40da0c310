"""
Support Person Domain Layer
===========================

Contains:
- Entities: SupportPerson
- Validators: SupportPersonValidator (field and business rules)
- Queries: PersonFilter and the listing query builder

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from support_desk.persons.domain.entities import SupportPerson
from support_desk.persons.domain.queries import (
    PersonFilter,
    build_person_predicate,
    build_person_query,
    build_person_sort,
)
from support_desk.persons.domain.validators import SupportPersonValidator

__all__ = [
    "SupportPerson",
    "SupportPersonValidator",
    "PersonFilter",
    "build_person_predicate",
    "build_person_query",
    "build_person_sort",
]
