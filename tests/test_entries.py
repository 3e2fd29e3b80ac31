# tests/test_entries.py
# Entry CRUD with ownership checks

import pytest

from sales_tracker_api.app.schemas.entry import EntryFields, EntryRead
from sales_tracker_api.app.schemas.form import FormSubmissionRead

NUMERIC_FIELDS = (
    "booked_calls",
    "no_shows",
    "closed_won",
    "closed_lost",
    "pif",
    "splits",
    "cash_collected",
    "renewals_cash",
    "reschedules",
)


@pytest.fixture
def full_entry():
    return {
        "date": "2025-10-01",
        "role": "Closer",
        "booked_calls": 8,
        "no_shows": 2,
        "closed_won": 3,
        "closed_lost": 1,
        "pif": 1,
        "splits": 2,
        "cash_collected": 4250.75,
        "renewals_cash": 500.0,
        "reschedules": 1,
    }


def create(client, body):
    response = client.post("/api/entries", json=body)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["success"] is True
    return data["id"]


class TestAuthRequired:
    """Every /api/entries route needs a session"""

    def test_unauthenticated_requests(self, client):
        assert client.get("/api/entries").status_code == 401
        assert client.post("/api/entries", json={}).status_code == 401
        assert client.put("/api/entries/1", json={}).status_code == 401
        assert client.delete("/api/entries/1").status_code == 401

    def test_error_body(self, client):
        assert client.get("/api/entries").json() == {"error": "Not authenticated"}


class TestCreateAndList:
    """POST and GET /api/entries"""

    def test_round_trip(self, client, user, full_entry):
        entry_id = create(client, full_entry)
        entries = client.get("/api/entries").json()["entries"]
        assert len(entries) == 1
        stored = entries[0]
        assert stored["id"] == entry_id
        assert stored["user_id"] == user["id"]
        for key, value in full_entry.items():
            assert stored[key] == value
        assert stored["created_at"]

    def test_omitted_numbers_default_to_zero(self, client, user):
        create(client, {"date": "2025-10-01", "role": "Setter"})
        stored = client.get("/api/entries").json()["entries"][0]
        for field in NUMERIC_FIELDS:
            assert stored[field] == 0

    def test_date_and_role_not_validated(self, client, user):
        create(client, {})
        stored = client.get("/api/entries").json()["entries"][0]
        assert stored["date"] == ""
        assert stored["role"] == ""

    def test_camel_case_body(self, client, user):
        create(client, {"date": "2025-10-02", "bookedCalls": 5, "closedWon": 2, "cashCollected": 1200})
        stored = client.get("/api/entries").json()["entries"][0]
        assert stored["booked_calls"] == 5
        assert stored["closed_won"] == 2
        assert stored["cash_collected"] == 1200.0

    def test_numeric_strings_are_coerced(self, client, user):
        create(client, {"booked_calls": "7", "no_shows": "abc", "cash_collected": "99.5"})
        stored = client.get("/api/entries").json()["entries"][0]
        assert stored["booked_calls"] == 7
        assert stored["no_shows"] == 0
        assert stored["cash_collected"] == 99.5

    def test_newest_date_first_then_insertion_order(self, client, user):
        first = create(client, {"date": "2025-01-01"})
        second = create(client, {"date": "2025-02-01"})
        third = create(client, {"date": "2025-02-01"})
        ids = [e["id"] for e in client.get("/api/entries").json()["entries"]]
        assert ids == [third, second, first]

    def test_list_is_scoped_to_caller(self, client, other_client, user, other_user):
        create(client, {"date": "2025-01-01"})
        create(other_client, {"date": "2025-01-02"})
        mine = client.get("/api/entries").json()["entries"]
        assert [e["user_id"] for e in mine] == [user["id"]]

    def test_oversized_numbers_are_clamped(self, client, user):
        create(client, {"booked_calls": 1e20, "no_shows": "-99999999999999999999"})
        stored = client.get("/api/entries").json()["entries"][0]
        assert stored["booked_calls"] == 2 ** 63 - 1
        assert stored["no_shows"] == -(2 ** 63)


class TestUpdate:
    """PUT /api/entries/{id}"""

    def test_owner_can_update(self, client, user, full_entry):
        entry_id = create(client, full_entry)
        response = client.put(f"/api/entries/{entry_id}", json={**full_entry, "closed_won": 9})
        assert response.json() == {"success": True}
        stored = client.get("/api/entries").json()["entries"][0]
        assert stored["closed_won"] == 9

    def test_update_overwrites_every_column(self, client, user, full_entry):
        entry_id = create(client, full_entry)
        client.put(f"/api/entries/{entry_id}", json={"date": "2025-11-01", "role": "Setter"})
        stored = client.get("/api/entries").json()["entries"][0]
        assert stored["date"] == "2025-11-01"
        for field in NUMERIC_FIELDS:
            assert stored[field] == 0

    def test_other_user_gets_not_found(self, client, other_client, user, other_user, full_entry):
        entry_id = create(client, full_entry)
        response = other_client.put(f"/api/entries/{entry_id}", json={"closed_won": 100})
        assert response.status_code == 404
        assert response.json() == {"error": "Entry not found"}
        stored = client.get("/api/entries").json()["entries"][0]
        assert stored["closed_won"] == full_entry["closed_won"]

    def test_missing_entry_gets_same_response(self, client, user):
        response = client.put("/api/entries/9999", json={})
        assert response.status_code == 404
        assert response.json() == {"error": "Entry not found"}

    def test_out_of_range_id_is_a_client_error(self, client, user):
        huge = "99999999999999999999"
        assert client.put(f"/api/entries/{huge}", json={}).status_code in (404, 422)
        assert client.delete(f"/api/entries/{huge}").status_code in (404, 422)


class TestDelete:
    """DELETE /api/entries/{id}"""

    def test_owner_can_delete(self, client, user, full_entry):
        entry_id = create(client, full_entry)
        assert client.delete(f"/api/entries/{entry_id}").json() == {"success": True}
        assert client.get("/api/entries").json()["entries"] == []

    def test_other_user_gets_not_found(self, client, other_client, user, other_user, full_entry):
        entry_id = create(client, full_entry)
        response = other_client.delete(f"/api/entries/{entry_id}")
        assert response.status_code == 404
        assert len(client.get("/api/entries").json()["entries"]) == 1

    def test_delete_twice(self, client, user):
        entry_id = create(client, {})
        assert client.delete(f"/api/entries/{entry_id}").status_code == 200
        assert client.delete(f"/api/entries/{entry_id}").status_code == 404


class TestPublicEntries:
    """GET /api/webhook/entries lists every owner's entries"""

    def test_lists_all_owners_without_auth(self, client, other_client, user, other_user):
        create(client, {"date": "2025-01-01"})
        create(other_client, {"date": "2025-01-02"})
        client.post("/api/logout")
        entries = client.get("/api/webhook/entries").json()["entries"]
        assert {e["user_id"] for e in entries} == {user["id"], other_user["id"]}


@pytest.mark.parametrize("model", [EntryFields, EntryRead, FormSubmissionRead])
def test_schemas_register_field_validators(model):
    decorators = model.__pydantic_decorators__
    assert not decorators.validators
    assert decorators.field_validators
