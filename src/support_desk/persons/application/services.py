"""
Support Person Application Services
===================================

Orchestrates validation, uniqueness checks and the referential-integrity
rule on delete.

Validation and conflict checks always run before the first mutating store
call, so a rejected request leaves no trace in the store.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from support_desk.config import DELETE_CONFLICT_SAMPLE_SIZE
from support_desk.core import (
    ConflictException, FieldError, ResourceNotFoundException, ValidationException
)
from support_desk.persons.domain import (
    PersonFilter, SupportPerson, SupportPersonValidator, build_person_query
)
from support_desk.shared.domain import Page, Predicate, StoreQuery
from support_desk.shared.infrastructure.logging import get_logger
from support_desk.shared.infrastructure.telemetry import NULL_OBSERVER, ServiceObserver

logger = get_logger(__name__)


# ========== Repository Interfaces ==========

class ISupportPersonRepository(ABC):
    """
    Interface for support person data access.

    Every read is restricted to active persons unless ``include_deleted``
    is passed explicitly.
    """

    @abstractmethod
    async def get(self, alias: str, include_deleted: bool = False) -> Optional[SupportPerson]:
        """Get a person by alias."""

    @abstractmethod
    async def find(self, query: StoreQuery, include_deleted: bool = False) -> List[SupportPerson]:
        """List persons for a built query."""

    @abstractmethod
    async def count(self, predicate: Predicate, include_deleted: bool = False) -> int:
        """Count persons matching a predicate."""

    @abstractmethod
    async def exists(self, alias: str) -> bool:
        """Check whether an active person holds the alias."""

    @abstractmethod
    async def find_by_email(self, email: str, exclude_alias: Optional[str] = None) -> Optional[SupportPerson]:
        """Find the active person using an email, optionally ignoring one alias."""

    @abstractmethod
    async def create(self, person: SupportPerson) -> SupportPerson:
        """Insert a new person."""

    @abstractmethod
    async def replace(self, alias: str, person: SupportPerson) -> int:
        """Replace the active person with the alias; returns the matched count."""

    @abstractmethod
    async def deactivate(self, alias: str) -> int:
        """Soft-delete the active person with the alias; returns the matched count."""

    @abstractmethod
    async def count_all(self) -> int:
        """Count every person document, active or not."""

    @abstractmethod
    async def count_assigned_cases(self, alias: str) -> int:
        """Count cases referencing the alias, whatever their completion state."""

    @abstractmethod
    async def assigned_case_ids(self, alias: str, limit: int) -> List[str]:
        """Ids of up to ``limit`` cases referencing the alias."""


# ========== Application Services ==========

class SupportPersonService:
    """
    Service for support person lifecycle and listing.

    Coordinates the validator and the repository; telemetry goes to the
    injected observer.
    """

    def __init__(
        self,
        repository: ISupportPersonRepository,
        validator: Optional[SupportPersonValidator] = None,
        observer: ServiceObserver = NULL_OBSERVER
    ):
        self._repo = repository
        self._validator = validator or SupportPersonValidator()
        self._observer = observer

    async def list_persons(self, person_filter: PersonFilter) -> Page[SupportPerson]:
        """
        List active persons.

        Returns:
            Page whose ``total`` counts the whole filtered active set
        """
        with self._observer.span("SupportPersonService.list_persons", statement="find") as span:
            query = build_person_query(person_filter)
            items = await self._repo.find(query)
            total = await self._repo.count(query.predicate)
            span.set_tag("result_count", len(items))
            return Page(items=items, total=total, limit=query.limit, offset=query.skip)

    async def get_person(self, alias: str) -> Optional[SupportPerson]:
        """Get an active person by alias."""
        with self._observer.span("SupportPersonService.get_person", statement="get", entity_id=alias):
            return await self._repo.get(alias)

    async def create_person(self, person: SupportPerson) -> SupportPerson:
        """
        Create a support person.

        Raises:
            ValidationException: Rule violations or an email already in use
            ConflictException: ``ALIAS_ALREADY_EXISTS``
        """
        with self._observer.span("SupportPersonService.create_person", statement="insert") as span:
            self._validator.validate(person)

            if await self._repo.exists(person.alias):
                logger.warning("Support person alias conflict", extra={"alias": person.alias})
                raise ConflictException(
                    "ALIAS_ALREADY_EXISTS",
                    f"Support person with alias '{person.alias}' already exists"
                )

            await self._ensure_email_available(person.email)

            person.reset_server_managed_fields()
            created = await self._repo.create(person)
            span.set_tag("entity_id", created.alias)

            logger.info(
                "Support person created",
                extra={"alias": created.alias, "seniority": created.seniority}
            )
            return created

    async def update_person(self, alias: str, person: SupportPerson) -> SupportPerson:
        """
        Replace an active support person.

        The alias always comes from ``alias``; any alias in the payload is
        ignored.

        Raises:
            ValidationException: Rule violations or an email already in use
            ResourceNotFoundException: ``SUPPORT_PERSON_NOT_FOUND``
        """
        with self._observer.span("SupportPersonService.update_person", statement="update", entity_id=alias):
            person.alias = alias
            self._validator.validate(person, is_update=True)
            await self._ensure_email_available(person.email, exclude_alias=alias)

            matched = await self._repo.replace(alias, person)
            if matched == 0:
                raise self._not_found(alias)

            logger.info("Support person updated", extra={"alias": alias})
            return person

    async def delete_person(self, alias: str) -> None:
        """
        Soft-delete a support person.

        Refused while any case references the alias, completed or not.

        Raises:
            ConflictException: ``CANNOT_DELETE_ACTIVE_ASSIGNMENTS``
            ResourceNotFoundException: ``SUPPORT_PERSON_NOT_FOUND``
        """
        with self._observer.span("SupportPersonService.delete_person", statement="delete", entity_id=alias):
            assigned = await self._repo.count_assigned_cases(alias)
            if assigned > 0:
                sample = await self._repo.assigned_case_ids(alias, DELETE_CONFLICT_SAMPLE_SIZE)
                logger.warning(
                    "Support person delete refused",
                    extra={"alias": alias, "active_tickets": assigned}
                )
                raise ConflictException(
                    "CANNOT_DELETE_ACTIVE_ASSIGNMENTS",
                    "Support person cannot be deleted while having active ticket assignments",
                    details={"active_tickets": assigned, "ticket_ids": sample}
                )

            matched = await self._repo.deactivate(alias)
            if matched == 0:
                raise self._not_found(alias)

            logger.info("Support person deactivated", extra={"alias": alias})

    async def count_persons(self) -> int:
        """Count every stored person document."""
        return await self._repo.count_all()

    async def _ensure_email_available(self, email: Optional[str], exclude_alias: Optional[str] = None) -> None:
        if await self._repo.find_by_email(email, exclude_alias=exclude_alias) is not None:
            raise ValidationException(
                "VALIDATION_ERROR",
                "Invalid input data",
                errors=[FieldError("email", "Email address is already in use", email)]
            )

    @staticmethod
    def _not_found(alias: str) -> ResourceNotFoundException:
        return ResourceNotFoundException(
            "SupportPerson",
            alias,
            code="SUPPORT_PERSON_NOT_FOUND",
            message=f"Support person with alias '{alias}' was not found"
        )
