"""
Shared API Layer
================

Middleware, error envelopes and dependencies used by every router.
"""

from support_desk.shared.api.dependencies import (
    RESOURCE_PREFIX,
    ResourceScope,
    get_entity_store,
    get_observer,
    get_resource_scope,
)
from support_desk.shared.api.errors import error_response, register_exception_handlers
from support_desk.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    ResponseTimeMiddleware,
)

__all__ = [
    "RESOURCE_PREFIX",
    "CorrelationIDMiddleware",
    "LoggingMiddleware",
    "ResourceScope",
    "ResponseTimeMiddleware",
    "error_response",
    "get_entity_store",
    "get_observer",
    "get_resource_scope",
    "register_exception_handlers",
]
