"""
Assignment Validator
====================

Cross-entity rules for linking a support case to a support person, and
the privacy screen on the assignment reasoning text.

The validator is synchronous. Person existence is resolved beforehand by
the caller and handed in as a ``PersonStatus``.
"""

from dataclasses import dataclass
from typing import Optional

from support_desk.config import BLOCKED_REASONING_PATTERNS, MAX_REASONING_LENGTH
from support_desk.core import FieldError, ValidationException
from support_desk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

ASSIGNED_PERSON_FIELD = "assigned_support_person"
REASONING_FIELD = "support_person_assignment_reasoning"


@dataclass(frozen=True)
class PersonStatus:
    """Result of looking up an assignment target."""
    exists: bool
    is_active: bool
    lookup_failed: bool = False
    error: Optional[str] = None

    @classmethod
    def active(cls) -> "PersonStatus":
        return cls(exists=True, is_active=True)

    @classmethod
    def inactive(cls) -> "PersonStatus":
        return cls(exists=True, is_active=False)

    @classmethod
    def missing(cls) -> "PersonStatus":
        return cls(exists=False, is_active=False)

    @classmethod
    def failed(cls, error: str) -> "PersonStatus":
        return cls(exists=False, is_active=False, lookup_failed=True, error=error)

    @property
    def is_assignable(self) -> bool:
        return self.exists and self.is_active and not self.lookup_failed


class AssignmentValidator:
    """Validates case assignment and reasoning text."""

    def validate_assignment(
        self,
        case_id: Optional[str],
        alias: Optional[str],
        status: Optional[PersonStatus]
    ) -> None:
        """
        Validate assigning ``alias`` to a case.

        An empty alias (unassignment) is always valid. A failed lookup is
        treated as an invalid person.

        Raises:
            ValidationException: ``INVALID_SUPPORT_PERSON`` or ``CASE_NOT_ASSIGNABLE``
        """
        if not alias:
            return

        if status is None or not status.is_assignable:
            details = None
            if status is not None and status.lookup_failed:
                logger.warning(
                    "Support person lookup failed during assignment validation",
                    extra={"alias": alias, "case_id": case_id, "error": status.error}
                )
                details = {"lookup_failed": True}
            raise ValidationException(
                "INVALID_SUPPORT_PERSON",
                f"Cannot assign support person '{alias}' - person not found or inactive",
                errors=[FieldError(ASSIGNED_PERSON_FIELD, "Support person not found or inactive", alias)],
                details=details
            )

        if case_id and not self.can_assign_to_case(case_id):
            raise ValidationException(
                "CASE_NOT_ASSIGNABLE",
                f"Support case '{case_id}' does not accept assignments"
            )

    def can_assign_to_case(self, case_id: str) -> bool:
        """Case-state gate for assignment; every existing case currently accepts one."""
        return True

    def validate_reasoning(self, reasoning: Optional[str]) -> None:
        """
        Screen assignment reasoning.

        Raises:
            ValidationException: ``REASONING_TOO_LONG`` or ``INAPPROPRIATE_REASONING_CONTENT``
        """
        if not reasoning:
            return

        if len(reasoning) > MAX_REASONING_LENGTH:
            raise ValidationException(
                "REASONING_TOO_LONG",
                f"Reasoning text cannot exceed {MAX_REASONING_LENGTH} characters",
                errors=[FieldError(REASONING_FIELD, "Reasoning text is too long", len(reasoning))]
            )

        if self.contains_inappropriate_content(reasoning):
            raise ValidationException(
                "INAPPROPRIATE_REASONING_CONTENT",
                "Reasoning text contains inappropriate content",
                errors=[FieldError(REASONING_FIELD, "Reasoning text contains inappropriate content")]
            )

    @staticmethod
    def contains_inappropriate_content(text: str) -> bool:
        """Coarse PII screen: emails and a few personal-data phrases."""
        lowered = text.lower()
        return any(pattern in lowered for pattern in BLOCKED_REASONING_PATTERNS)
