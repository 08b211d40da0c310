"""
Support Case Infrastructure Layer
=================================

Concrete repositories and the demo data initializer for the case module.
"""

from support_desk.cases.infrastructure.repositories import (
    StorePersonDirectory,
    StoreSupportCaseRepository,
)
from support_desk.cases.infrastructure.seed import (
    SAMPLE_CASES,
    build_sample_cases,
    seed_sample_cases,
)

__all__ = [
    "StorePersonDirectory",
    "StoreSupportCaseRepository",
    "SAMPLE_CASES",
    "build_sample_cases",
    "seed_sample_cases",
]
