"""
Support Case Application DTOs
=============================

Pydantic models for the support case API.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from support_desk.cases.domain import SupportCase


# ========== Request DTOs ==========

class SupportCaseRequest(BaseModel):
    """Request body for creating or replacing a support case."""
    id: Optional[str] = Field(None, description="Ignored on update; assigned by the store when absent")
    title: Optional[str] = None
    description: Optional[str] = None
    owner: Optional[str] = None
    is_complete: bool = False
    assigned_support_person: Optional[str] = Field(None, description="Alias of an active support person")
    support_person_assignment_reasoning: Optional[str] = Field(
        None, description="Why the person was chosen (max 2000 characters, no personal data)"
    )

    def to_domain(self) -> SupportCase:
        return SupportCase(**self.model_dump())


# ========== Response DTOs ==========

class SupportCaseResponse(BaseModel):
    """Support case as returned by the API."""
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    owner: Optional[str] = None
    is_complete: bool = False
    assigned_support_person: Optional[str] = None
    support_person_assignment_reasoning: Optional[str] = None

    @classmethod
    def from_domain(cls, case: SupportCase) -> "SupportCaseResponse":
        return cls(
            id=case.id,
            title=case.title,
            description=case.description,
            owner=case.owner,
            is_complete=case.is_complete,
            assigned_support_person=case.assigned_support_person,
            support_person_assignment_reasoning=case.support_person_assignment_reasoning,
        )


class SupportCaseEnvelope(BaseModel):
    """Single support case response."""
    success: bool = True
    data: SupportCaseResponse


class SupportCaseListEnvelope(BaseModel):
    """Support case listing response."""
    success: bool = True
    data: List[SupportCaseResponse]

    @classmethod
    def from_cases(cls, cases: List[SupportCase]) -> "SupportCaseListEnvelope":
        return cls(data=[SupportCaseResponse.from_domain(c) for c in cases])
