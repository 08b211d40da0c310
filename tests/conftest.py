"""Shared pytest fixtures: in-memory store, services and an HTTP client."""

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from support_desk.cases.application import SupportCaseService
from support_desk.cases.infrastructure import StorePersonDirectory, StoreSupportCaseRepository
from support_desk.config import Settings
from support_desk.infrastructure.store import InMemoryEntityStore
from support_desk.main import create_app
from support_desk.persons.application import SupportPersonService
from support_desk.persons.domain import SupportPerson
from support_desk.persons.infrastructure import StoreSupportPersonRepository
from support_desk.shared.infrastructure.telemetry import RecordingObserver

BASE_PATH = "/sub-1/rg-1/desk-1"


def person_payload(alias: str = "jdoe", **overrides: Any) -> Dict[str, Any]:
    payload = {
        "alias": alias,
        "name": "Jane Doe",
        "email": f"{alias}@example.com",
        "specializations": ["Authentication", "Database"],
        "seniority": "Senior",
    }
    payload.update(overrides)
    return payload


def make_person(alias: str = "jdoe", **overrides: Any) -> SupportPerson:
    return SupportPerson(**person_payload(alias, **overrides))


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def person_service(store, observer) -> SupportPersonService:
    return SupportPersonService(StoreSupportPersonRepository(store), observer=observer)


@pytest.fixture
def case_service(store, observer) -> SupportCaseService:
    return SupportCaseService(
        StoreSupportCaseRepository(store),
        StorePersonDirectory(store),
        observer=observer
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(storage_backend="memory", seed_demo_data=False, environment="development")


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
