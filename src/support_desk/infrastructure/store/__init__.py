"""
Entity Store
============

Document-style access to the case and person collections.

Two backends:
- ``memory``: process-local store, one instance per application
- ``postgres``: SQLAlchemy store bound to a request-scoped session
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.config import StorageBackend
from support_desk.core import ConfigurationException
from support_desk.infrastructure.store.base import (
    CASE_ID_FIELD,
    Collection,
    Document,
    EntityStore,
)
from support_desk.infrastructure.store.memory import InMemoryEntityStore, ReadWriteLock
from support_desk.infrastructure.store.sql import SQLAlchemyEntityStore


def build_entity_store(
    backend: str,
    session: Optional[AsyncSession] = None,
    memory_store: Optional[InMemoryEntityStore] = None
) -> EntityStore:
    """
    Resolve the entity store for a backend name.

    Raises:
        ConfigurationException: Unknown backend, or postgres without a session
    """
    backend = (backend or "").lower()
    if backend == StorageBackend.MEMORY:
        return memory_store if memory_store is not None else InMemoryEntityStore()
    if backend == StorageBackend.POSTGRES:
        if session is None:
            raise ConfigurationException("The postgres entity store requires a database session")
        return SQLAlchemyEntityStore(session)
    raise ConfigurationException(
        f"Unknown storage backend '{backend}'",
        details={"allowed": [StorageBackend.MEMORY, StorageBackend.POSTGRES]}
    )


__all__ = [
    "CASE_ID_FIELD",
    "Collection",
    "Document",
    "EntityStore",
    "InMemoryEntityStore",
    "ReadWriteLock",
    "SQLAlchemyEntityStore",
    "build_entity_store",
]
