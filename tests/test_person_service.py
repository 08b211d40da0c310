"""Tests for the support person service over the in-memory store."""

import pytest

from support_desk.core import (
    ConflictException, RepositoryException, ResourceNotFoundException, ValidationException
)
from support_desk.infrastructure.store import Collection
from support_desk.persons.application import SupportPersonService
from support_desk.persons.domain import PersonFilter
from support_desk.persons.infrastructure import StoreSupportPersonRepository
from support_desk.shared.domain import MatchAll

from tests.conftest import make_person


async def _assign_case(store, alias, is_complete=False):
    stored = await store.insert(Collection.CASES, {
        "title": "case",
        "is_complete": is_complete,
        "assigned_support_person": alias,
    })
    return stored["id"]


# =============================================================================
# TEST: Create
# =============================================================================

class TestCreate:

    async def test_create_applies_server_defaults(self, person_service):
        person = make_person(
            current_workload=7, customer_satisfaction_rating=4.0, average_resolution_time=3.5
        )

        created = await person_service.create_person(person)

        assert created.alias == "jdoe"
        assert created.current_workload == 0
        assert created.customer_satisfaction_rating is None
        assert created.average_resolution_time is None
        assert created.is_active is True

    async def test_duplicate_alias_conflicts_without_insert(self, person_service, store):
        await person_service.create_person(make_person())

        with pytest.raises(ConflictException) as exc_info:
            await person_service.create_person(make_person(email="other@example.com"))

        assert exc_info.value.code == "ALIAS_ALREADY_EXISTS"
        assert await store.count(Collection.PERSONS) == 1

    async def test_duplicate_email_rejected(self, person_service, store):
        await person_service.create_person(make_person("jdoe", email="shared@example.com"))

        with pytest.raises(ValidationException) as exc_info:
            await person_service.create_person(make_person("asmith", email="shared@example.com"))

        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.field == "email"
        assert await store.count(Collection.PERSONS) == 1

    async def test_invalid_person_not_inserted(self, person_service, store):
        with pytest.raises(ValidationException):
            await person_service.create_person(make_person(seniority="Intern"))
        assert await store.count(Collection.PERSONS) == 0

    async def test_alias_of_deactivated_person_reusable(self, person_service):
        await person_service.create_person(make_person())
        await person_service.delete_person("jdoe")

        recreated = await person_service.create_person(make_person())

        assert recreated.is_active
        assert await person_service.count_persons() == 2


# =============================================================================
# TEST: Update
# =============================================================================

class TestUpdate:

    async def test_update_replaces_record_and_keeps_alias(self, person_service):
        await person_service.create_person(make_person())

        updated = await person_service.update_person(
            "jdoe", make_person("ignored", name="Janet Doe", email="jdoe@example.com")
        )

        assert updated.alias == "jdoe"
        stored = await person_service.get_person("jdoe")
        assert stored.name == "Janet Doe"
        assert await person_service.get_person("ignored") is None

    async def test_update_may_keep_own_email(self, person_service):
        await person_service.create_person(make_person())
        person = make_person(seniority="Lead")
        person.alias = None
        await person_service.update_person("jdoe", person)
        assert (await person_service.get_person("jdoe")).seniority == "Lead"

    async def test_update_cannot_take_anothers_email(self, person_service):
        await person_service.create_person(make_person("jdoe"))
        await person_service.create_person(make_person("asmith"))

        with pytest.raises(ValidationException) as exc_info:
            await person_service.update_person("asmith", make_person(email="jdoe@example.com"))

        assert exc_info.value.errors[0].message == "Email address is already in use"

    async def test_update_unknown_alias(self, person_service):
        with pytest.raises(ResourceNotFoundException) as exc_info:
            await person_service.update_person("ghost", make_person("ghost"))

        assert exc_info.value.code == "SUPPORT_PERSON_NOT_FOUND"
        assert exc_info.value.message == "Support person with alias 'ghost' was not found"


# =============================================================================
# TEST: Delete
# =============================================================================

class TestDelete:

    @pytest.mark.parametrize("is_complete", [False, True])
    async def test_referenced_person_cannot_be_deleted(self, person_service, store, is_complete):
        await person_service.create_person(make_person())
        case_id = await _assign_case(store, "jdoe", is_complete=is_complete)

        with pytest.raises(ConflictException) as exc_info:
            await person_service.delete_person("jdoe")

        assert exc_info.value.code == "CANNOT_DELETE_ACTIVE_ASSIGNMENTS"
        assert exc_info.value.details == {"active_tickets": 1, "ticket_ids": [case_id]}
        assert await person_service.get_person("jdoe") is not None

    async def test_conflict_samples_at_most_three_cases(self, person_service, store):
        await person_service.create_person(make_person())
        ids = [await _assign_case(store, "jdoe") for _ in range(5)]

        with pytest.raises(ConflictException) as exc_info:
            await person_service.delete_person("jdoe")

        assert exc_info.value.details["active_tickets"] == 5
        assert exc_info.value.details["ticket_ids"] == ids[:3]

    async def test_delete_after_unassigning(self, person_service, store):
        await person_service.create_person(make_person())
        await _assign_case(store, "jdoe")

        with pytest.raises(ConflictException):
            await person_service.delete_person("jdoe")

        await store.delete(Collection.CASES, MatchAll())
        await person_service.delete_person("jdoe")

        page = await person_service.list_persons(PersonFilter())
        assert [p.alias for p in page.items] == []
        assert await person_service.get_person("jdoe") is None
        # soft delete keeps the document
        assert await person_service.count_persons() == 1

    async def test_delete_unknown_alias(self, person_service):
        with pytest.raises(ResourceNotFoundException):
            await person_service.delete_person("ghost")


# =============================================================================
# TEST: Listing
# =============================================================================

@pytest.fixture
async def staffed_service(person_service):
    for alias, seniority in [("lead1", "Lead"), ("junior1", "Junior"), ("manager1", "Manager"),
                             ("mid1", "MidLevel"), ("senior1", "Senior")]:
        await person_service.create_person(make_person(alias, seniority=seniority))
    return person_service


class TestListing:

    async def test_limit_clamped(self, person_service):
        for index in range(105):
            await person_service.create_person(make_person(f"agent{index:03d}"))

        page = await person_service.list_persons(PersonFilter(limit=500))

        assert len(page.items) == 100
        assert page.limit == 100
        assert page.total == 105
        assert page.has_next

    async def test_pagination_flags(self, person_service):
        for index in range(25):
            await person_service.create_person(make_person(f"agent{index:02d}"))

        page = await person_service.list_persons(PersonFilter(limit=10, offset=20))

        assert len(page.items) == 5
        assert (page.total, page.limit, page.offset) == (25, 10, 20)
        assert page.has_next is False
        assert page.has_previous is True

    async def test_zero_limit_still_advances(self, person_service):
        for index in range(3):
            await person_service.create_person(make_person(f"agent{index:02d}"))

        seen, offset = [], 0
        while True:
            page = await person_service.list_persons(PersonFilter(limit=0, offset=offset))
            seen.extend(p.alias for p in page.items)
            if not page.has_next:
                break
            offset += page.limit

        assert page.limit == 1
        assert seen == ["agent00", "agent01", "agent02"]

    async def test_seniority_descending_reverses_ascending(self, staffed_service):
        ascending = await staffed_service.list_persons(PersonFilter(sort_by="seniority"))
        descending = await staffed_service.list_persons(
            PersonFilter(sort_by="seniority", sort_order="desc")
        )

        ascending_aliases = [p.alias for p in ascending.items]
        assert ascending_aliases == ["junior1", "mid1", "senior1", "lead1", "manager1"]
        assert [p.alias for p in descending.items] == list(reversed(ascending_aliases))

    async def test_default_sort_by_name(self, person_service):
        await person_service.create_person(make_person("bbb", name="Zed"))
        await person_service.create_person(make_person("aaa", name="Amy"))

        page = await person_service.list_persons(PersonFilter())

        assert [p.name for p in page.items] == ["Amy", "Zed"]

    async def test_filters(self, person_service, store):
        await person_service.create_person(
            make_person("dba1", specializations=["Database"], seniority="Lead")
        )
        await person_service.create_person(
            make_person("net1", specializations=["Network Security"], seniority="Lead")
        )
        await store.update_field(Collection.PERSONS, MatchAll(), "current_workload", 12)

        by_specialization = await person_service.list_persons(PersonFilter(specialization="Database"))
        available = await person_service.list_persons(PersonFilter(available=True))
        leads = await person_service.list_persons(PersonFilter(seniority="Lead"))

        assert [p.alias for p in by_specialization.items] == ["dba1"]
        assert [p.alias for p in available.items] == ["net1"]
        assert available.total == 1
        assert leads.total == 2

    async def test_operations_emit_spans(self, person_service, observer):
        await person_service.create_person(make_person())
        with pytest.raises(ConflictException):
            await person_service.create_person(make_person())

        names = [span.name for span in observer.spans]
        assert names == ["SupportPersonService.create_person"] * 2
        assert observer.spans[0].status == "ok"
        assert observer.spans[0].tags["entity_id"] == "jdoe"
        assert observer.spans[1].status == "error"


# =============================================================================
# TEST: Store failures
# =============================================================================

class _FailingRepository(StoreSupportPersonRepository):

    async def find(self, query, include_deleted=False):
        raise RepositoryException("connection refused")


class TestStoreFailure:

    async def test_repository_failure_propagates(self, store):
        service = SupportPersonService(_FailingRepository(store))
        with pytest.raises(RepositoryException):
            await service.list_persons(PersonFilter())
