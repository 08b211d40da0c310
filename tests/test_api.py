"""HTTP boundary tests using the FastAPI test client and the in-memory store."""

from support_desk.core import RepositoryException
from support_desk.infrastructure.store import InMemoryEntityStore
from support_desk.shared.api import get_entity_store

from tests.conftest import BASE_PATH, person_payload

PERSONS = f"{BASE_PATH}/supportpersons"
CASES = f"{BASE_PATH}/cases"


def _create_person(client, alias="jdoe", **overrides):
    response = client.post(PERSONS, json=person_payload(alias, **overrides))
    assert response.status_code == 201, response.text
    return response


def _create_case(client, **fields):
    response = client.post(CASES, json={"title": "Printer offline", **fields})
    assert response.status_code == 202, response.text
    return response.json()["data"]


# =============================================================================
# TEST: Support persons
# =============================================================================

class TestSupportPersonRoutes:

    def test_create_returns_location(self, client):
        response = _create_person(client)

        body = response.json()
        assert body["success"] is True
        assert body["data"]["alias"] == "jdoe"
        assert body["data"]["current_workload"] == 0
        assert response.headers["Location"] == f"{PERSONS}/jdoe"

    def test_create_reports_every_invalid_field(self, client):
        response = client.post(PERSONS, json={"alias": "x", "email": "bad"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Invalid input data"
        fields = {detail["field"] for detail in error["details"]}
        assert {"alias", "name", "email", "specializations", "seniority"} <= fields

    def test_malformed_body_is_validation_error(self, client):
        response = client.post(PERSONS, json=person_payload(current_workload="lots"))

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "current_workload"

    def test_duplicate_alias_conflict(self, client):
        _create_person(client)

        response = client.post(PERSONS, json=person_payload(email="second@example.com"))

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALIAS_ALREADY_EXISTS"

    def test_get_and_update(self, client):
        _create_person(client)

        updated = client.put(f"{PERSONS}/jdoe", json=person_payload(name="Janet Doe"))
        fetched = client.get(f"{PERSONS}/jdoe")

        assert updated.status_code == 200
        assert fetched.json()["data"]["name"] == "Janet Doe"

    def test_unknown_person(self, client):
        response = client.get(f"{PERSONS}/ghost")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {
                "code": "SUPPORT_PERSON_NOT_FOUND",
                "message": "Support person with alias 'ghost' was not found",
            },
        }

    def test_listing_pagination_block(self, client):
        for index in range(3):
            _create_person(client, f"agent{index}")

        response = client.get(PERSONS, params={"limit": 500, "offset": 1, "sort_by": "name"})

        body = response.json()
        assert len(body["data"]) == 2
        assert body["pagination"] == {
            "total": 3, "limit": 100, "offset": 1, "has_next": False, "has_previous": True
        }

    def test_delete_blocked_then_allowed(self, client):
        _create_person(client)
        case = _create_case(client, assigned_support_person="jdoe")

        blocked = client.delete(f"{PERSONS}/jdoe")
        assert blocked.status_code == 409
        assert blocked.json()["error"]["details"] == {"active_tickets": 1, "ticket_ids": [case["id"]]}

        assert client.delete(f"{CASES}/{case['id']}").status_code == 200
        assert client.delete(f"{PERSONS}/jdoe").status_code == 204
        assert client.get(f"{PERSONS}/jdoe").status_code == 404
        assert client.get(PERSONS).json()["data"] == []


# =============================================================================
# TEST: Support cases
# =============================================================================

class TestSupportCaseRoutes:

    def test_create_and_get(self, client):
        created = _create_case(client, owner="Anne Hamilton")

        response = client.get(f"{CASES}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["owner"] == "Anne Hamilton"

    def test_assignment_to_unknown_person(self, client):
        response = client.post(CASES, json={"title": "x", "assigned_support_person": "ghost"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_SUPPORT_PERSON"
        assert error["field"] == "assigned_support_person"
        assert error["provided_value"] == "ghost"

    def test_reused_case_id_conflicts(self, client):
        _create_case(client, id="CASE-7")

        response = client.post(CASES, json={"id": "CASE-7", "title": "Duplicate"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CASE_ALREADY_EXISTS"
        listed = client.get(CASES, params={"limit": 100}).json()["data"]
        assert [c["id"] for c in listed].count("CASE-7") == 1

    def test_reasoning_too_long(self, client):
        response = client.post(CASES, json={
            "title": "x", "support_person_assignment_reasoning": "x" * 2001
        })

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "REASONING_TOO_LONG"

    def test_legacy_paging(self, client):
        for index in range(12):
            _create_case(client, title=f"Case {index}")

        first = client.get(CASES).json()["data"]
        page_zero = client.get(CASES, params={"page_number": 0}).json()["data"]
        second = client.get(CASES, params={"page_number": 2}).json()["data"]

        assert len(first) == 10
        assert page_zero == first
        assert [c["title"] for c in second] == ["Case 10", "Case 11"]

    def test_filtered_listing_selected_by_query(self, client):
        _create_person(client)
        _create_case(client, assigned_support_person="jdoe")
        _create_case(client)

        assigned = client.get(CASES, params={"assigned_to": "jdoe"}).json()["data"]
        unassigned = client.get(CASES, params={"unassigned": "true"}).json()["data"]
        windowed = client.get(CASES, params={"offset": 1}).json()["data"]

        assert [c["id"] for c in assigned] == ["1"]
        assert [c["id"] for c in unassigned] == ["2"]
        assert [c["id"] for c in windowed] == ["2"]

    def test_update(self, client):
        created = _create_case(client)

        response = client.put(f"{CASES}/{created['id']}", json={"title": "Renamed", "is_complete": True})

        assert response.status_code == 202
        assert response.json()["data"] == {
            "id": created["id"],
            "title": "Renamed",
            "description": None,
            "owner": None,
            "is_complete": True,
            "assigned_support_person": None,
            "support_person_assignment_reasoning": None,
        }

    def test_update_and_delete_unknown_case(self, client):
        updated = client.put(f"{CASES}/404", json={"title": "x"})
        deleted = client.delete(f"{CASES}/404")

        assert updated.status_code == 404
        assert updated.json()["error"]["code"] == "CASE_NOT_FOUND"
        assert deleted.status_code == 404

    def test_delete(self, client):
        created = _create_case(client)

        response = client.delete(f"{CASES}/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get(f"{CASES}/{created['id']}").status_code == 404


# =============================================================================
# TEST: Cross-cutting behaviour
# =============================================================================

class _UnavailableStore(InMemoryEntityStore):

    async def find(self, *args, **kwargs):
        raise RepositoryException("connection refused")


class TestCrossCutting:

    def test_store_failure_maps_to_503(self, client):
        client.app.dependency_overrides[get_entity_store] = lambda: _UnavailableStore()
        try:
            response = client.get(PERSONS)
        finally:
            client.app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json()["error"] == {
            "code": "STORE_UNAVAILABLE",
            "message": "The entity store is unavailable",
        }

    def test_correlation_id_echoed(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"
        assert "X-Response-Time" in response.headers

    def test_health(self, client):
        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["checks"]["storage_backend"] == "memory"
