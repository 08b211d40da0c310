"""
Support Person Application DTOs
===============================

Pydantic models for the support person API.

Request models only enforce JSON types. Business rules are checked by
``SupportPersonValidator`` so that every violation is reported in a single
response.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from support_desk.persons.domain import SupportPerson
from support_desk.shared.domain import Page


# ========== Request DTOs ==========

class SupportPersonRequest(BaseModel):
    """Request body for creating or replacing a support person."""
    alias: Optional[str] = Field(None, description="Unique alias; ignored on update")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Contact email, unique among active persons")
    specializations: List[str] = Field(default_factory=list, description="Approved specializations")
    current_workload: int = Field(default=0, description="Open case count (0-100)")
    average_resolution_time: Optional[float] = Field(None, description="Average resolution time in hours")
    customer_satisfaction_rating: Optional[float] = Field(None, description="Rating between 1.0 and 5.0")
    seniority: Optional[str] = Field(None, description="Junior, MidLevel, Senior, Lead or Manager")

    def to_domain(self) -> SupportPerson:
        """Convert to domain entity."""
        return SupportPerson(
            alias=self.alias,
            name=self.name,
            email=self.email,
            specializations=list(self.specializations),
            current_workload=self.current_workload,
            average_resolution_time=self.average_resolution_time,
            customer_satisfaction_rating=self.customer_satisfaction_rating,
            seniority=self.seniority,
        )


# ========== Response DTOs ==========

class SupportPersonResponse(BaseModel):
    """Support person as returned by the API."""
    alias: str
    name: Optional[str] = None
    email: Optional[str] = None
    specializations: List[str] = Field(default_factory=list)
    current_workload: int = 0
    average_resolution_time: Optional[float] = None
    customer_satisfaction_rating: Optional[float] = None
    seniority: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_domain(cls, person: SupportPerson) -> "SupportPersonResponse":
        return cls(**person.to_document())


class PaginationInfo(BaseModel):
    """Pagination block of a listing response."""
    total: int = Field(..., description="Matching active persons, ignoring limit/offset")
    limit: int
    offset: int
    has_next: bool
    has_previous: bool


class SupportPersonEnvelope(BaseModel):
    """Single support person response."""
    success: bool = True
    data: SupportPersonResponse


class SupportPersonListEnvelope(BaseModel):
    """Support person listing response."""
    success: bool = True
    data: List[SupportPersonResponse]
    pagination: PaginationInfo

    @classmethod
    def from_page(cls, page: Page[SupportPerson]) -> "SupportPersonListEnvelope":
        return cls(
            data=[SupportPersonResponse.from_domain(p) for p in page.items],
            pagination=PaginationInfo(
                total=page.total,
                limit=page.limit,
                offset=page.offset,
                has_next=page.has_next,
                has_previous=page.has_previous,
            ),
        )
