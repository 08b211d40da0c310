"""
Support Person Validator
========================

Field-level and business-rule validation for support person records.

Every rule runs independently and all violations are collected, so one
failed call reports every bad field. Specialization rules stop at the
first offending entry.
"""

import re
from typing import Any, List, Optional

from email_validator import EmailNotValidError, validate_email

from support_desk.config import (
    ALIAS_MAX_LENGTH,
    ALIAS_MIN_LENGTH,
    ALIAS_PATTERN,
    APPROVED_SPECIALIZATIONS,
    MAX_SATISFACTION_RATING,
    MAX_SPECIALIZATIONS,
    MAX_WORKLOAD,
    MIN_SATISFACTION_RATING,
    MIN_WORKLOAD,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    SENIORITY_LEVELS,
    SPECIALIZATION_MAX_LENGTH,
    SPECIALIZATION_MIN_LENGTH,
)
from support_desk.core import FieldError, ValidationException
from support_desk.persons.domain.entities import SupportPerson

_ALIAS_RE = re.compile(ALIAS_PATTERN)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class SupportPersonValidator:
    """Validates a support person before create or update."""

    def validate(self, person: SupportPerson, is_update: bool = False) -> None:
        """
        Validate a person.

        Args:
            person: Candidate record
            is_update: Alias is supplied separately on update and may be absent

        Raises:
            ValidationException: ``VALIDATION_ERROR`` listing every violation
        """
        errors = self.collect_errors(person, is_update)
        if errors:
            raise ValidationException("VALIDATION_ERROR", "Invalid input data", errors=errors)

    def collect_errors(self, person: SupportPerson, is_update: bool = False) -> List[FieldError]:
        """Return every rule violation without raising."""
        errors: List[FieldError] = []
        errors.extend(self._check_alias(person.alias, is_update))
        errors.extend(self._check_name(person.name))
        errors.extend(self._check_email(person.email))
        errors.extend(self._check_specializations(person.specializations))
        errors.extend(self._check_seniority(person.seniority))
        errors.extend(self._check_workload(person.current_workload))
        errors.extend(self._check_rating(person.customer_satisfaction_rating))
        errors.extend(self._check_resolution_time(person.average_resolution_time))
        return errors

    def _check_alias(self, alias: Optional[str], is_update: bool) -> List[FieldError]:
        if _is_blank(alias):
            return [] if is_update else [FieldError("alias", "Alias is required")]

        errors = []
        if not ALIAS_MIN_LENGTH <= len(alias) <= ALIAS_MAX_LENGTH:
            errors.append(FieldError(
                "alias",
                f"Alias must be between {ALIAS_MIN_LENGTH}-{ALIAS_MAX_LENGTH} characters",
                alias
            ))
        if not _ALIAS_RE.fullmatch(alias):
            errors.append(FieldError(
                "alias",
                "Alias can only contain alphanumeric characters, underscore, hyphen, and period",
                alias
            ))
        return errors

    def _check_name(self, name: Optional[str]) -> List[FieldError]:
        if _is_blank(name):
            return [FieldError("name", "Name is required")]
        if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
            return [FieldError(
                "name", f"Name must be between {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters"
            )]
        return []

    def _check_email(self, email: Optional[str]) -> List[FieldError]:
        if _is_blank(email):
            return [FieldError("email", "Email is required")]
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            return [FieldError("email", "Invalid email format", email)]
        return []

    def _check_specializations(self, specializations: Optional[List[str]]) -> List[FieldError]:
        if not specializations:
            return [FieldError("specializations", "At least one specialization is required")]

        errors = []
        if len(specializations) > MAX_SPECIALIZATIONS:
            errors.append(FieldError(
                "specializations", f"Maximum {MAX_SPECIALIZATIONS} specializations allowed"
            ))

        for specialization in specializations:
            if _is_blank(specialization) or not (
                SPECIALIZATION_MIN_LENGTH <= len(specialization) <= SPECIALIZATION_MAX_LENGTH
            ):
                errors.append(FieldError(
                    "specializations",
                    f"Each specialization must be between "
                    f"{SPECIALIZATION_MIN_LENGTH}-{SPECIALIZATION_MAX_LENGTH} characters",
                    specialization
                ))
                break
            if specialization not in APPROVED_SPECIALIZATIONS:
                errors.append(FieldError(
                    "specializations",
                    f"Specialization '{specialization}' is not from the approved list",
                    specialization
                ))
                break
        return errors

    def _check_seniority(self, seniority: Optional[str]) -> List[FieldError]:
        if _is_blank(seniority):
            return [FieldError("seniority", "Seniority is required")]
        if seniority not in SENIORITY_LEVELS:
            return [FieldError(
                "seniority",
                f"Seniority must be one of: {', '.join(SENIORITY_LEVELS)}",
                seniority
            )]
        return []

    def _check_workload(self, workload: Any) -> List[FieldError]:
        # bool is an int subclass but not a workload
        if (not isinstance(workload, int) or isinstance(workload, bool)
                or not MIN_WORKLOAD <= workload <= MAX_WORKLOAD):
            return [FieldError(
                "current_workload",
                f"Current workload must be between {MIN_WORKLOAD}-{MAX_WORKLOAD}",
                workload
            )]
        return []

    def _check_rating(self, rating: Optional[float]) -> List[FieldError]:
        if rating is not None and not MIN_SATISFACTION_RATING <= rating <= MAX_SATISFACTION_RATING:
            return [FieldError(
                "customer_satisfaction_rating",
                f"Customer satisfaction rating must be between "
                f"{MIN_SATISFACTION_RATING}-{MAX_SATISFACTION_RATING}",
                rating
            )]
        return []

    def _check_resolution_time(self, resolution_time: Optional[float]) -> List[FieldError]:
        if resolution_time is not None and resolution_time < 0:
            return [FieldError(
                "average_resolution_time", "Average resolution time must be >= 0", resolution_time
            )]
        return []
