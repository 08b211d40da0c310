"""
Demo Data Initializer
=====================

Fills an empty case collection with sample support cases on startup.
"""

from typing import List

from support_desk.cases.application import SupportCaseService
from support_desk.cases.domain import SupportCase
from support_desk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

# (owner, is_complete, description) for "Support Case 1" through "Support Case 12"
SAMPLE_CASES = [
    ("Shehab Fawzy", True, "Sign-in loop after password reset on the partner portal."),
    ("Devidas Gupta", False, "Nightly backup job reports success but the restore test finds no data."),
    ("Nick Hauenstein", False, "Report queries time out when the date range exceeds one quarter."),
    ("Tim Colbert", False, "New laptops fail to join the domain during provisioning."),
    ("Anne Hamilton", False, "Shared mailbox stopped receiving external mail overnight."),
    ("Shehab Fawzy", True, "VPN clients drop every few minutes on the guest network."),
    ("Nick Hauenstein", True, "Database failover left the reporting replica read-only."),
    ("Devidas Gupta", False, "Multi-factor prompts are not delivered to one region."),
    ("Tim Colbert", True, "File server disk latency spikes during business hours."),
    ("Tim Colbert", False, "Mobile app crashes on launch after the latest OS update."),
    ("Anne Hamilton", False, "Directory group changes take hours to reach cloud services."),
    ("Shehab Fawzy", True, "Printer fleet firmware rollout stalled halfway."),
]


def build_sample_cases() -> List[SupportCase]:
    return [
        SupportCase(
            title=f"Support Case {index}",
            owner=owner,
            is_complete=is_complete,
            description=description,
        )
        for index, (owner, is_complete, description) in enumerate(SAMPLE_CASES, start=1)
    ]


async def seed_sample_cases(service: SupportCaseService) -> int:
    """
    Insert the sample cases when no case exists yet.

    Returns:
        Number of cases inserted
    """
    if await service.count_cases() > 0:
        return 0

    for case in build_sample_cases():
        await service.create_case(case)

    logger.info("Sample support cases inserted", extra={"count": len(SAMPLE_CASES)})
    return len(SAMPLE_CASES)
