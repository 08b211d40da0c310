"""
Shared Domain Layer
===================

Query primitives common to every bounded context.
"""

from support_desk.shared.domain.query import (
    Predicate,
    MatchAll,
    Eq,
    Ne,
    Lt,
    Contains,
    And,
    Or,
    SortKey,
    StoreQuery,
    Page,
    clamp_limit,
)

__all__ = [
    "Predicate",
    "MatchAll",
    "Eq",
    "Ne",
    "Lt",
    "Contains",
    "And",
    "Or",
    "SortKey",
    "StoreQuery",
    "Page",
    "clamp_limit",
]
