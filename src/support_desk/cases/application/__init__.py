"""
Support Case Application Layer
==============================

Contains:
- Services: SupportCaseService
- DTOs: Request/response models for the API
- Interfaces: case repository and person directory
"""

from support_desk.cases.application.dto import (
    SupportCaseEnvelope,
    SupportCaseListEnvelope,
    SupportCaseRequest,
    SupportCaseResponse,
)
from support_desk.cases.application.services import (
    IPersonDirectory,
    ISupportCaseRepository,
    SupportCaseService,
)

__all__ = [
    # DTOs
    "SupportCaseEnvelope",
    "SupportCaseListEnvelope",
    "SupportCaseRequest",
    "SupportCaseResponse",
    # Services
    "SupportCaseService",
    # Interfaces
    "IPersonDirectory",
    "ISupportCaseRepository",
]
