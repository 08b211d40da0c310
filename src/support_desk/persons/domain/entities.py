"""
Support Person Domain Entities
==============================

Pure Python domain entities for support staff.

A support person is identified by an alias that never changes after
creation. Removal is a soft delete: the record stays in the store with
``is_active`` cleared.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional


@dataclass
class SupportPerson:
    """
    Support person entity.

    Fields are intentionally permissive; rule checking belongs to
    ``SupportPersonValidator`` so every violation can be reported at once.
    """

    alias: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    specializations: List[str] = field(default_factory=list)
    current_workload: int = 0
    average_resolution_time: Optional[float] = None
    customer_satisfaction_rating: Optional[float] = None
    seniority: Optional[str] = None
    is_active: bool = True

    def reset_server_managed_fields(self) -> None:
        """Apply the defaults every newly created person starts with."""
        self.current_workload = 0
        self.average_resolution_time = None
        self.customer_satisfaction_rating = None
        self.is_active = True

    def to_document(self) -> Dict[str, Any]:
        """Convert to a store document."""
        document = asdict(self)
        document["specializations"] = list(self.specializations or [])
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "SupportPerson":
        """Build from a store document, ignoring store-only keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in document.items() if k in known}
        values["specializations"] = list(values.get("specializations") or [])
        return cls(**values)
