"""Tests for the room request lifecycle over HTTP — creation, tenant scoping and transitions."""
from wlp.models.room_request import RoomRequest
from tests.conftest import (
    create_room_request,
    create_test_hotel,
    room_request_body,
    signup_employer,
    signup_frontdesk,
)


class TestEndToEndScenario:
    """No employer → link → create → accept → second decision conflicts."""

    def test_full_scenario(self, client, make_client, hotel):
        signup_employer(client, company=None)
        body = room_request_body(hotel["hotel_id"])

        resp = client.post("/api/employer/requests", json=body)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "no employer"

        assert client.post("/api/employer/account", json={"name": "Acme Staffing"}).status_code == 201
        resp = client.post("/api/employer/requests", json=body)
        assert resp.status_code == 201
        request_id = resp.json()["id"]
        assert resp.json()["status"] == "SUBMITTED"

        desk = make_client()
        signup_frontdesk(desk)
        first = desk.post(f"/api/frontdesk/requests/{request_id}/decision", json={"decision": "ACCEPT"})
        assert first.status_code == 200
        assert first.json()["status"] == "ACCEPTED"

        second = desk.post(f"/api/frontdesk/requests/{request_id}/decision", json={"decision": "REJECT"})
        assert second.status_code == 409

        detail = client.get(f"/api/employer/requests/{request_id}").json()["request"]
        assert detail["status"] == "ACCEPTED"
        assert detail["headcount"] == 5
        assert detail["room_type_mix"] == {"SINGLE": 2, "DOUBLE": 3}


class TestCreateValidation:
    def test_stay_end_must_follow_stay_start(self, client, db, hotel):
        signup_employer(client)
        resp = client.post("/api/employer/requests", json=room_request_body(
            hotel["hotel_id"], stay_start="2024-01-05", stay_end="2024-01-05",
        ))
        assert resp.status_code == 400
        assert "stay_end must be after stay_start" in resp.json()["detail"]
        assert db.query(RoomRequest).count() == 0

    def test_empty_room_mix_rejected(self, client, db, hotel):
        signup_employer(client)
        resp = client.post("/api/employer/requests", json=room_request_body(
            hotel["hotel_id"], room_type_mix={"SINGLE": 0, "DOUBLE": 0},
        ))
        assert resp.status_code == 400
        assert "room_type_mix" in resp.json()["detail"]
        assert db.query(RoomRequest).count() == 0

    def test_headcount_must_be_positive(self, client, hotel):
        signup_employer(client)
        resp = client.post("/api/employer/requests", json=room_request_body(hotel["hotel_id"], headcount=0))
        assert resp.status_code == 400
        assert resp.json()["detail"].startswith("headcount:")

    def test_negative_room_count_rejected(self, client, hotel):
        signup_employer(client)
        resp = client.post("/api/employer/requests", json=room_request_body(
            hotel["hotel_id"], room_type_mix={"SINGLE": -1, "DOUBLE": 3},
        ))
        assert resp.status_code == 400

    def test_unknown_hotel_is_404(self, client):
        signup_employer(client)
        resp = client.post("/api/employer/requests", json=room_request_body("no-such-hotel"))
        assert resp.status_code == 404

    def test_anonymous_create_is_401(self, client, hotel):
        resp = client.post("/api/employer/requests", json=room_request_body(hotel["hotel_id"]))
        assert resp.status_code == 401

    def test_draft_then_submit(self, client, make_client, hotel):
        signup_employer(client)
        request_id = create_room_request(client, hotel["hotel_id"], draft=True)
        assert client.get(f"/api/employer/requests/{request_id}").json()["request"]["status"] == "DRAFT"

        desk = make_client()
        signup_frontdesk(desk)
        resp = desk.post(f"/api/frontdesk/requests/{request_id}/decision", json={"decision": "ACCEPT"})
        assert resp.status_code == 409

        resp = client.post(f"/api/employer/requests/{request_id}/submit")
        assert resp.status_code == 200
        assert resp.json()["status"] == "SUBMITTED"

        # A submitted request cannot be submitted again
        assert client.post(f"/api/employer/requests/{request_id}/submit").status_code == 409


class TestTenantIsolation:
    def test_foreign_request_is_403_missing_is_404(self, client, make_client, hotel):
        signup_employer(client, email="a@acme.example.com", company="Acme")
        request_id = create_room_request(client, hotel["hotel_id"])

        other = make_client()
        signup_employer(other, email="b@beta.example.com", company="Beta")
        assert other.get(f"/api/employer/requests/{request_id}").status_code == 403
        assert other.get("/api/employer/requests/does-not-exist").status_code == 404

    def test_foreign_employer_cannot_cancel(self, client, make_client, hotel):
        signup_employer(client, email="a@acme.example.com", company="Acme")
        request_id = create_room_request(client, hotel["hotel_id"])

        other = make_client()
        signup_employer(other, email="b@beta.example.com", company="Beta")
        assert other.patch(f"/api/employer/requests/{request_id}/cancel").status_code == 403
        assert client.get(f"/api/employer/requests/{request_id}").json()["request"]["status"] == "SUBMITTED"

    def test_unlinked_employer_writes_are_400(self, client, make_client, hotel):
        """Without a linked employer, writes fail before the request is looked up."""
        signup_employer(client, email="a@acme.example.com", company="Acme")
        request_id = create_room_request(client, hotel["hotel_id"])

        other = make_client()
        signup_employer(other, email="b@beta.example.com", company=None)
        for resp in (
            other.patch(f"/api/employer/requests/{request_id}/cancel"),
            other.post(f"/api/employer/requests/{request_id}/submit"),
            other.patch("/api/employer/requests/does-not-exist/cancel"),
        ):
            assert resp.status_code == 400
            assert resp.json()["detail"] == "no employer"
        assert client.get(f"/api/employer/requests/{request_id}").json()["request"]["status"] == "SUBMITTED"

    def test_list_only_shows_own_employer(self, client, make_client, hotel):
        signup_employer(client, email="a@acme.example.com", company="Acme")
        mine = create_room_request(client, hotel["hotel_id"])

        other = make_client()
        signup_employer(other, email="b@beta.example.com", company="Beta")
        theirs = create_room_request(other, hotel["hotel_id"])

        ids = [item["request_id"] for item in client.get("/api/employer/requests").json()["items"]]
        assert ids == [mine]
        ids = [item["request_id"] for item in other.get("/api/employer/requests").json()["items"]]
        assert ids == [theirs]

    def test_list_without_employer_is_empty(self, client):
        signup_employer(client, company=None)
        resp = client.get("/api/employer/requests")
        assert resp.status_code == 200
        assert resp.json() == {"items": []}

    def test_staff_see_all_employers(self, client, make_client, hotel):
        signup_employer(client, email="a@acme.example.com", company="Acme")
        create_room_request(client, hotel["hotel_id"])
        other = make_client()
        signup_employer(other, email="b@beta.example.com", company="Beta")
        create_room_request(other, hotel["hotel_id"])

        desk = make_client()
        signup_frontdesk(desk)
        assert len(desk.get("/api/frontdesk/requests").json()["items"]) == 2

    def test_status_filter(self, client, hotel):
        signup_employer(client)
        create_room_request(client, hotel["hotel_id"])
        create_room_request(client, hotel["hotel_id"], draft=True)

        items = client.get("/api/employer/requests", params={"status": "DRAFT"}).json()["items"]
        assert [i["status"] for i in items] == ["DRAFT"]
        assert client.get("/api/employer/requests", params={"status": "BOGUS"}).status_code == 400


class TestCancel:
    def test_cancel_submitted(self, client, hotel):
        signup_employer(client)
        request_id = create_room_request(client, hotel["hotel_id"])
        resp = client.patch(f"/api/employer/requests/{request_id}/cancel")
        assert resp.status_code == 200
        assert resp.json()["status"] == "CANCELED"

    def test_cannot_cancel_after_acceptance(self, client, make_client, hotel):
        signup_employer(client)
        request_id = create_room_request(client, hotel["hotel_id"])
        desk = make_client()
        signup_frontdesk(desk)
        desk.post(f"/api/frontdesk/requests/{request_id}/decision", json={"decision": "ACCEPT"})

        resp = client.patch(f"/api/employer/requests/{request_id}/cancel")
        assert resp.status_code == 409
        assert "ACCEPTED" in resp.json()["detail"]

    def test_cancel_missing_is_404(self, client):
        signup_employer(client)
        assert client.patch("/api/employer/requests/nope/cancel").status_code == 404


class TestStaffTransitions:
    def _accepted_request(self, client, make_client, hotel):
        signup_employer(client)
        request_id = create_room_request(client, hotel["hotel_id"])
        desk = make_client()
        signup_frontdesk(desk)
        resp = desk.post(f"/api/frontdesk/requests/{request_id}/decision",
                         json={"decision": "ACCEPT", "note": "Block of 5 held"})
        assert resp.status_code == 200
        return desk, request_id

    def test_full_occupancy_path(self, client, make_client, hotel):
        desk, request_id = self._accepted_request(client, make_client, hotel)

        assert desk.post(f"/api/frontdesk/requests/{request_id}/assign",
                         json={"note": "Rooms 101-105"}).json()["status"] == "ASSIGNED"
        assert desk.post(f"/api/frontdesk/requests/{request_id}/check-in").json()["status"] == "CHECKED_IN"
        assert desk.post(f"/api/frontdesk/requests/{request_id}/check-out").json()["status"] == "CHECKED_OUT"

        detail = desk.get(f"/api/frontdesk/requests/{request_id}").json()["request"]
        assert detail["status"] == "CHECKED_OUT"
        assert detail["decision_note"] == "Rooms 101-105"

    def test_cannot_skip_states(self, client, make_client, hotel):
        desk, request_id = self._accepted_request(client, make_client, hotel)
        assert desk.post(f"/api/frontdesk/requests/{request_id}/check-in").status_code == 409
        assert desk.post(f"/api/frontdesk/requests/{request_id}/check-out").status_code == 409

    def test_terminal_states_accept_nothing(self, client, make_client, hotel):
        signup_employer(client)
        request_id = create_room_request(client, hotel["hotel_id"])
        desk = make_client()
        signup_frontdesk(desk)
        assert desk.post(f"/api/frontdesk/requests/{request_id}/decision",
                         json={"decision": "REJECT"}).json()["status"] == "REJECTED"

        assert desk.post(f"/api/frontdesk/requests/{request_id}/decision",
                         json={"decision": "ACCEPT"}).status_code == 409
        assert desk.post(f"/api/frontdesk/requests/{request_id}/assign").status_code == 409
        assert client.patch(f"/api/employer/requests/{request_id}/cancel").status_code == 409

    def test_unknown_decision_is_400(self, client, make_client, hotel):
        signup_employer(client)
        request_id = create_room_request(client, hotel["hotel_id"])
        desk = make_client()
        signup_frontdesk(desk)
        resp = desk.post(f"/api/frontdesk/requests/{request_id}/decision", json={"decision": "MAYBE"})
        assert resp.status_code == 400
        assert resp.json()["detail"].startswith("decision:")

    def test_decision_on_missing_request_is_404(self, client):
        signup_frontdesk(client)
        resp = client.post("/api/frontdesk/requests/nope/decision", json={"decision": "ACCEPT"})
        assert resp.status_code == 404

    def test_employer_cannot_decide(self, client, hotel):
        signup_employer(client)
        request_id = create_room_request(client, hotel["hotel_id"])
        resp = client.post(f"/api/frontdesk/requests/{request_id}/decision", json={"decision": "ACCEPT"})
        assert resp.status_code == 403

    def test_requests_on_other_hotels_are_still_decidable(self, client, make_client, db):
        """Staff decisions are not scoped to a hotel or employer."""
        other_hotel = create_test_hotel(db, name="Airport Lodge")
        signup_employer(client)
        request_id = create_room_request(client, other_hotel["hotel_id"])
        desk = make_client()
        signup_frontdesk(desk)
        resp = desk.post(f"/api/frontdesk/requests/{request_id}/decision", json={"decision": "ACCEPT"})
        assert resp.status_code == 200
