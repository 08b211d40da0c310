"""
Support Case Domain Entities
============================

Pure Python domain entities for support cases.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class SupportCase:
    """
    Support case entity.

    ``assigned_support_person`` is a weak reference to a support person
    alias; ``None`` and ``""`` both mean unassigned.
    """

    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    owner: Optional[str] = None
    is_complete: bool = False
    assigned_support_person: Optional[str] = None
    support_person_assignment_reasoning: Optional[str] = None

    @property
    def is_assigned(self) -> bool:
        return bool(self.assigned_support_person)

    def to_document(self) -> Dict[str, Any]:
        """Convert to a store document; a missing id is left for the store to assign."""
        document = asdict(self)
        if not document.get("id"):
            document.pop("id", None)
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "SupportCase":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in document.items() if k in known})
