"""
Support Person Application Layer
================================

Contains:
- Services: SupportPersonService
- DTOs: Request/response models for the API

Depends on the domain layer and repository interfaces, not on concrete
infrastructure.
"""

from support_desk.persons.application.dto import (
    PaginationInfo,
    SupportPersonEnvelope,
    SupportPersonListEnvelope,
    SupportPersonRequest,
    SupportPersonResponse,
)
from support_desk.persons.application.services import (
    ISupportPersonRepository,
    SupportPersonService,
)

__all__ = [
    # DTOs
    "PaginationInfo",
    "SupportPersonEnvelope",
    "SupportPersonListEnvelope",
    "SupportPersonRequest",
    "SupportPersonResponse",
    # Services
    "SupportPersonService",
    # Repository Interfaces
    "ISupportPersonRepository",
]
