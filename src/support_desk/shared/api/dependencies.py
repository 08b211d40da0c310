"""
Shared API Dependencies
=======================

FastAPI dependencies resolving the entity store and telemetry observer
from application state.
"""

from dataclasses import dataclass
from typing import AsyncGenerator

from fastapi import Request

from support_desk.config import StorageBackend
from support_desk.infrastructure.database import get_database
from support_desk.infrastructure.store import EntityStore, build_entity_store
from support_desk.shared.infrastructure.telemetry import NULL_OBSERVER, ServiceObserver


async def get_entity_store(request: Request) -> AsyncGenerator[EntityStore, None]:
    """
    Entity store for the current request.

    The in-memory store is shared by the whole application; the postgres
    store gets its own session, committed when the request succeeds.
    """
    state = request.app.state
    backend = state.settings.storage_backend

    if backend == StorageBackend.POSTGRES:
        async with get_database().session() as session:
            yield build_entity_store(backend, session=session)
    else:
        yield build_entity_store(backend, memory_store=state.memory_store)


def get_observer(request: Request) -> ServiceObserver:
    """Telemetry observer configured at startup, or the null observer."""
    return getattr(request.app.state, "observer", None) or NULL_OBSERVER


@dataclass(frozen=True)
class ResourceScope:
    """Tenant path segments every support endpoint is nested under."""
    subscription_id: str
    resource_group: str
    resource_id: str

    @property
    def base_path(self) -> str:
        return f"/{self.subscription_id}/{self.resource_group}/{self.resource_id}"

    @property
    def resource_path(self) -> str:
        return (
            f"subscriptions/{self.subscription_id}/resourceGroups/{self.resource_group}"
            f"/providers/SupportDesk/ticketingSystem/{self.resource_id}"
        )


def get_resource_scope(subscription_id: str, resource_group: str, resource_id: str) -> ResourceScope:
    """Collect the tenant path parameters."""
    return ResourceScope(subscription_id, resource_group, resource_id)


# Router prefix shared by the case and person endpoints
RESOURCE_PREFIX = "/{subscription_id}/{resource_group}/{resource_id}"
