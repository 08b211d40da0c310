"""Tests for the support case service over the in-memory store."""

import pytest

from support_desk.cases.application import IPersonDirectory, SupportCaseService
from support_desk.cases.domain import CaseFilter, SupportCase
from support_desk.cases.infrastructure import (
    SAMPLE_CASES, StorePersonDirectory, StoreSupportCaseRepository, seed_sample_cases
)
from support_desk.core import RepositoryException, ValidationException

from tests.conftest import make_person


async def _add_cases(service, count, **fields):
    created = []
    for index in range(count):
        created.append(await service.create_case(SupportCase(title=f"Case {index}", **fields)))
    return created


# =============================================================================
# TEST: Create / update / delete
# =============================================================================

class TestLifecycle:

    async def test_create_assigns_id(self, case_service):
        created = await case_service.create_case(SupportCase(title="Printer offline"))

        assert created.id == "1"
        assert (await case_service.get_case("1")).title == "Printer offline"

    async def test_assign_to_active_person(self, case_service, person_service):
        await person_service.create_person(make_person("jdoe"))

        created = await case_service.create_case(SupportCase(
            title="VPN",
            assigned_support_person="jdoe",
            support_person_assignment_reasoning="Network Security specialist",
        ))

        assert created.assigned_support_person == "jdoe"

    async def test_assign_to_unknown_alias_rejected(self, case_service, store):
        with pytest.raises(ValidationException) as exc_info:
            await case_service.create_case(SupportCase(title="x", assigned_support_person="ghost"))

        assert exc_info.value.code == "INVALID_SUPPORT_PERSON"
        assert await case_service.count_cases() == 0

    async def test_assign_to_deactivated_person_rejected(self, case_service, person_service):
        await person_service.create_person(make_person("jdoe"))
        await person_service.delete_person("jdoe")

        with pytest.raises(ValidationException) as exc_info:
            await case_service.create_case(SupportCase(title="x", assigned_support_person="jdoe"))

        assert exc_info.value.code == "INVALID_SUPPORT_PERSON"

    @pytest.mark.parametrize("alias", [None, ""])
    async def test_unassigned_case_always_accepted(self, case_service, alias):
        created = await case_service.create_case(SupportCase(title="x", assigned_support_person=alias))
        assert created.id is not None

    async def test_bad_reasoning_rejected(self, case_service):
        with pytest.raises(ValidationException) as exc_info:
            await case_service.create_case(SupportCase(
                title="x", support_person_assignment_reasoning="reach me at a@b.com"
            ))
        assert exc_info.value.code == "INAPPROPRIATE_REASONING_CONTENT"

    async def test_update_replaces_whole_case(self, case_service):
        created = await case_service.create_case(SupportCase(title="Old", owner="Tim Colbert"))

        updated = await case_service.update_case(
            created.id, SupportCase(id="999", title="New", is_complete=True)
        )

        assert updated.id == created.id
        stored = await case_service.get_case(created.id)
        assert stored.title == "New"
        assert stored.owner is None
        assert stored.is_complete is True
        assert await case_service.get_case("999") is None

    async def test_update_validates_assignment(self, case_service):
        created = await case_service.create_case(SupportCase(title="Old"))

        with pytest.raises(ValidationException):
            await case_service.update_case(
                created.id, SupportCase(title="New", assigned_support_person="ghost")
            )

        assert (await case_service.get_case(created.id)).title == "Old"

    async def test_delete_is_idempotent(self, case_service):
        created = await case_service.create_case(SupportCase(title="x"))

        await case_service.delete_case(created.id)
        await case_service.delete_case(created.id)

        assert await case_service.get_case(created.id) is None


# =============================================================================
# TEST: Listing
# =============================================================================

class TestListing:

    async def test_page_zero_equals_page_one(self, case_service):
        await _add_cases(case_service, 15)

        page_zero = await case_service.list_cases_paged(0)
        page_one = await case_service.list_cases_paged(1)

        assert [c.id for c in page_zero] == [c.id for c in page_one]
        assert len(page_one) == 10

    async def test_missing_page_number_is_first_page(self, case_service):
        await _add_cases(case_service, 15)

        assert [c.id for c in await case_service.list_cases_paged(None)] == [str(i) for i in range(1, 11)]

    async def test_second_page(self, case_service):
        await _add_cases(case_service, 15)

        second = await case_service.list_cases_paged(2)

        assert [c.title for c in second] == [f"Case {i}" for i in range(10, 15)]

    async def test_filters(self, case_service, person_service):
        await person_service.create_person(make_person("jdoe"))
        await person_service.create_person(make_person("asmith"))
        await _add_cases(case_service, 2, assigned_support_person="jdoe")
        await _add_cases(case_service, 1, assigned_support_person="asmith")
        await _add_cases(case_service, 1, assigned_support_person="")
        await _add_cases(case_service, 1)

        assigned_to = await case_service.list_cases_filtered(CaseFilter(assigned_to="jdoe"))
        unassigned = await case_service.list_cases_filtered(CaseFilter(unassigned=True))
        assigned = await case_service.list_cases_filtered(CaseFilter(unassigned=False))
        window = await case_service.list_cases_filtered(CaseFilter(limit=2, offset=1))

        assert [c.id for c in assigned_to] == ["1", "2"]
        assert [c.id for c in unassigned] == ["4", "5"]
        assert [c.id for c in assigned] == ["1", "2", "3"]
        assert [c.id for c in window] == ["2", "3"]


# =============================================================================
# TEST: Person lookup failure
# =============================================================================

class _UnavailableDirectory(IPersonDirectory):

    async def resolve(self, alias):
        raise RepositoryException("person collection unreachable")


class TestLookupFailure:

    async def test_lookup_failure_rejects_assignment(self, store):
        service = SupportCaseService(StoreSupportCaseRepository(store), _UnavailableDirectory())

        with pytest.raises(ValidationException) as exc_info:
            await service.create_case(SupportCase(title="x", assigned_support_person="jdoe"))

        assert exc_info.value.code == "INVALID_SUPPORT_PERSON"
        assert exc_info.value.details == {"lookup_failed": True}

    async def test_lookup_not_needed_for_unassigned(self, store):
        service = SupportCaseService(StoreSupportCaseRepository(store), _UnavailableDirectory())
        created = await service.create_case(SupportCase(title="x"))
        assert created.id == "1"


# =============================================================================
# TEST: Sample data
# =============================================================================

class TestSeed:

    async def test_seeds_empty_collection_once(self, case_service):
        assert await seed_sample_cases(case_service) == len(SAMPLE_CASES)
        assert await seed_sample_cases(case_service) == 0

        cases = await case_service.list_cases_filtered(CaseFilter(limit=100))
        assert len(cases) == 12
        assert cases[0].title == "Support Case 1"
        assert cases[-1].title == "Support Case 12"
        assert all(not c.is_assigned for c in cases)


class TestPersonDirectory:

    async def test_directory_distinguishes_inactive(self, store, person_service):
        await person_service.create_person(make_person("jdoe"))
        directory = StorePersonDirectory(store)

        assert (await directory.resolve("jdoe")).is_assignable
        await person_service.delete_person("jdoe")
        inactive = await directory.resolve("jdoe")
        missing = await directory.resolve("ghost")

        assert inactive.exists and not inactive.is_active
        assert not missing.exists
