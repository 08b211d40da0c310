"""
Support Case Application Services
=================================

Orchestrates assignment validation and case persistence.

Assignment targets are resolved asynchronously through ``IPersonDirectory``
before the synchronous ``AssignmentValidator`` runs. A directory failure
counts as an invalid person, never as a pass.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from support_desk.cases.domain import (
    AssignmentValidator,
    CaseFilter,
    PersonStatus,
    SupportCase,
    build_filtered_case_query,
    build_paged_case_query,
)
from support_desk.core import RepositoryException
from support_desk.shared.domain import StoreQuery
from support_desk.shared.infrastructure.logging import get_logger
from support_desk.shared.infrastructure.telemetry import NULL_OBSERVER, ServiceObserver

logger = get_logger(__name__)


# ========== Repository Interfaces ==========

class ISupportCaseRepository(ABC):
    """Interface for support case data access."""

    @abstractmethod
    async def get(self, case_id: str) -> Optional[SupportCase]:
        """Get case by id."""

    @abstractmethod
    async def find(self, query: StoreQuery) -> List[SupportCase]:
        """List cases for a built query."""

    @abstractmethod
    async def create(self, case: SupportCase) -> SupportCase:
        """Insert a case; the returned case carries its id."""

    @abstractmethod
    async def replace(self, case_id: str, case: SupportCase) -> int:
        """Replace the case with the id; returns the matched count."""

    @abstractmethod
    async def delete(self, case_id: str) -> int:
        """Delete the case with the id; returns the matched count."""

    @abstractmethod
    async def count_all(self) -> int:
        """Count stored cases."""


class IPersonDirectory(ABC):
    """Resolves whether an alias can be assigned to."""

    @abstractmethod
    async def resolve(self, alias: str) -> PersonStatus:
        """Look up existence and active state of a support person."""


# ========== Application Services ==========

class SupportCaseService:
    """
    Service for support case lifecycle and listing.

    Update follows read-then-write: callers check the case exists before
    calling ``update_case``. A delete landing in between is not detected.
    """

    def __init__(
        self,
        repository: ISupportCaseRepository,
        directory: IPersonDirectory,
        validator: Optional[AssignmentValidator] = None,
        observer: ServiceObserver = NULL_OBSERVER
    ):
        self._repo = repository
        self._directory = directory
        self._validator = validator or AssignmentValidator()
        self._observer = observer

    async def list_cases_paged(self, page_number: Optional[int] = 1) -> List[SupportCase]:
        """Legacy listing: pages of 10 in insertion order."""
        with self._observer.span("SupportCaseService.list_cases_paged", statement="find") as span:
            cases = await self._repo.find(build_paged_case_query(page_number))
            span.set_tag("result_count", len(cases))
            return cases

    async def list_cases_filtered(self, case_filter: CaseFilter) -> List[SupportCase]:
        """Listing with assignment filters and limit/offset."""
        with self._observer.span(
            "SupportCaseService.list_cases_filtered",
            statement="find with assignment filters"
        ) as span:
            cases = await self._repo.find(build_filtered_case_query(case_filter))
            span.set_tag("result_count", len(cases))
            return cases

    async def get_case(self, case_id: str) -> Optional[SupportCase]:
        with self._observer.span("SupportCaseService.get_case", statement="get", entity_id=case_id):
            return await self._repo.get(case_id)

    async def create_case(self, case: SupportCase) -> SupportCase:
        """
        Validate and insert a case.

        Raises:
            ValidationException: Invalid assignment or reasoning
            ConflictException: ``CASE_ALREADY_EXISTS`` for a supplied id already in use
        """
        with self._observer.span("SupportCaseService.create_case", statement="insert") as span:
            await self._validate(None, case)
            created = await self._repo.create(case)
            span.set_tag("entity_id", created.id)

            logger.info(
                "Support case created",
                extra={"case_id": created.id, "assigned_support_person": created.assigned_support_person}
            )
            return created

    async def update_case(self, case_id: str, case: SupportCase) -> SupportCase:
        """
        Validate and fully replace a case.

        Raises:
            ValidationException: Invalid assignment or reasoning
        """
        with self._observer.span("SupportCaseService.update_case", statement="update", entity_id=case_id):
            await self._validate(case_id, case)
            case.id = case_id
            matched = await self._repo.replace(case_id, case)

            logger.info(
                "Support case updated",
                extra={
                    "case_id": case_id,
                    "matched": matched,
                    "assigned_support_person": case.assigned_support_person
                }
            )
            return case

    async def delete_case(self, case_id: str) -> None:
        """Hard delete; deleting an unknown id is not an error."""
        with self._observer.span("SupportCaseService.delete_case", statement="delete", entity_id=case_id):
            deleted = await self._repo.delete(case_id)
            logger.info("Support case deleted", extra={"case_id": case_id, "matched": deleted})

    async def count_cases(self) -> int:
        return await self._repo.count_all()

    async def _validate(self, case_id: Optional[str], case: SupportCase) -> None:
        status = None
        if case.assigned_support_person:
            status = await self._resolve_person(case.assigned_support_person)
        self._validator.validate_assignment(case_id, case.assigned_support_person, status)
        self._validator.validate_reasoning(case.support_person_assignment_reasoning)

    async def _resolve_person(self, alias: str) -> PersonStatus:
        try:
            return await self._directory.resolve(alias)
        except RepositoryException as e:
            return PersonStatus.failed(e.message)
