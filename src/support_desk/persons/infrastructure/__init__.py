"""
Support Person Infrastructure Layer
===================================

Concrete repository implementations for the support person module.
"""

from support_desk.persons.infrastructure.repositories import StoreSupportPersonRepository

__all__ = [
    "StoreSupportPersonRepository",
]
