"""Tests for Event directory CRUD, invariants and lifecycle.

Covers:
- Event create with validation
- Listing with category / search filters, cancelled and past events hidden
- Authorization hook — organizer or admin only
- Edit window — no edits within one hour of start, cancellation always allowed
- Soft cancel — cancelled events stay retrievable and are terminal
- Mutation ledger — verified via DB query
- Capacity raise promotes waitlisted attendees
"""
from datetime import datetime, timedelta, timezone

from tests.conftest import create_test_event, create_test_user, event_payload, make_admin


def _setup(client):
    organizer = create_test_user(client, name="Organizer")
    other = create_test_user(client, name="Other User")
    return organizer, other


class TestEventCreate:
    def test_create_event(self, client):
        organizer, _ = _setup(client)
        resp = client.post("/api/events/", json=event_payload(title="Rugby au Stade", capacity=40),
                           headers=organizer["headers"])
        assert resp.status_code == 201
        data = resp.json()
        assert data["title"] == "Rugby au Stade"
        assert data["status"] == "active"
        assert data["capacity"] == 40
        assert data["organizer_id"] == organizer["user_id"]
        assert data["location"]["geo_point"]["latitude"] == 43.6045
        assert data["location"]["address"].startswith("Place du Capitole")
        assert data["going_count"] == 0

    def test_create_requires_auth(self, client):
        resp = client.post("/api/events/", json=event_payload())
        assert resp.status_code == 401

    def test_create_in_the_past_rejected(self, client):
        organizer, _ = _setup(client)
        resp = client.post("/api/events/", json=event_payload(start_in=timedelta(hours=-2)),
                           headers=organizer["headers"])
        assert resp.status_code == 422

    def test_end_before_start_rejected(self, client):
        organizer, _ = _setup(client)
        resp = client.post("/api/events/", json=event_payload(duration=timedelta(hours=-1)),
                           headers=organizer["headers"])
        assert resp.status_code == 422

    def test_capacity_bounds(self, client):
        organizer, _ = _setup(client)
        too_big = client.post("/api/events/", json=event_payload(capacity=501), headers=organizer["headers"])
        negative = client.post("/api/events/", json=event_payload(capacity=-1), headers=organizer["headers"])
        assert too_big.status_code == 422
        assert negative.status_code == 422

    def test_title_length(self, client):
        organizer, _ = _setup(client)
        resp = client.post("/api/events/", json=event_payload(title="x" * 81), headers=organizer["headers"])
        assert resp.status_code == 422

    def test_latitude_range(self, client):
        organizer, _ = _setup(client)
        payload = event_payload()
        payload["location"]["geo_point"]["latitude"] = 91
        resp = client.post("/api/events/", json=payload, headers=organizer["headers"])
        assert resp.status_code == 422

    def test_naive_time_read_as_toulouse_local(self, client):
        organizer, _ = _setup(client)
        payload = event_payload()
        year = datetime.now().year + 1
        payload["start_time_utc"] = f"{year}-07-14T21:00:00"
        payload["end_time_utc"] = f"{year}-07-14T23:00:00"
        resp = client.post("/api/events/", json=payload, headers=organizer["headers"])
        assert resp.status_code == 201
        # Paris is UTC+2 in July.
        assert resp.json()["start_time_utc"].startswith(f"{year}-07-14T19:00:00")


class TestEventRead:
    def test_get_event(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"], title="Jazz sur son 31")
        resp = client.get(f"/api/events/{event['event_id']}")
        assert resp.status_code == 200
        assert resp.json()["title"] == "Jazz sur son 31"

    def test_get_event_not_found(self, client):
        resp = client.get("/api/events/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
        assert resp.json()["detail"]["error"] == "NotFound"


class TestEventList:
    def test_list_sorted_by_start(self, client):
        organizer, _ = _setup(client)
        create_test_event(client, organizer["headers"], title="Later", start_in=timedelta(days=9))
        create_test_event(client, organizer["headers"], title="Sooner", start_in=timedelta(days=1))

        resp = client.get("/api/events/")
        assert resp.status_code == 200
        assert [e["title"] for e in resp.json()] == ["Sooner", "Later"]

    def test_filter_by_category(self, client):
        organizer, _ = _setup(client)
        create_test_event(client, organizer["headers"], title="Match", category="sport")
        create_test_event(client, organizer["headers"], title="Concert", category="musique")

        titles = [e["title"] for e in client.get("/api/events/?category=sport").json()]
        assert titles == ["Match"]

        all_titles = [e["title"] for e in client.get("/api/events/?category=all").json()]
        assert sorted(all_titles) == ["Concert", "Match"]

    def test_search_title_and_description(self, client):
        organizer, _ = _setup(client)
        create_test_event(client, organizer["headers"], title="Marché de Noël", description="Vin chaud")
        create_test_event(client, organizer["headers"], title="Balade", description="Le long du CANAL du Midi")
        create_test_event(client, organizer["headers"], title="Expo", description="Peinture")

        assert [e["title"] for e in client.get("/api/events/?search=marché").json()] == ["Marché de Noël"]
        assert [e["title"] for e in client.get("/api/events/?search=canal").json()] == ["Balade"]

    def test_list_excludes_cancelled(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"], title="Will Cancel")
        client.delete(f"/api/events/{event['event_id']}", headers=organizer["headers"])

        titles = [e["title"] for e in client.get("/api/events/").json()]
        assert "Will Cancel" not in titles

    def test_pagination(self, client):
        organizer, _ = _setup(client)
        for i in range(3):
            create_test_event(client, organizer["headers"], title=f"E{i}", start_in=timedelta(days=i + 1))

        page = client.get("/api/events/?limit=2&offset=1").json()
        assert [e["title"] for e in page] == ["E1", "E2"]


class TestEventUpdate:
    def test_update_event_organizer(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"])

        resp = client.put(f"/api/events/{event['event_id']}", json={"title": "Updated Title"},
                          headers=organizer["headers"])
        assert resp.status_code == 200
        assert resp.json()["title"] == "Updated Title"

    def test_update_location(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"])
        new_location = {"geo_point": {"latitude": 43.5990, "longitude": 1.4410}, "address": "Pont Neuf"}

        resp = client.put(f"/api/events/{event['event_id']}", json={"location": new_location},
                          headers=organizer["headers"])
        assert resp.status_code == 200
        assert resp.json()["location"] == new_location

    def test_update_non_organizer_forbidden(self, client):
        organizer, other = _setup(client)
        event = create_test_event(client, organizer["headers"])

        resp = client.put(f"/api/events/{event['event_id']}", json={"title": "Hacked"},
                          headers=other["headers"])
        assert resp.status_code == 403
        assert resp.json()["detail"]["error"] == "Unauthorized"

    def test_admin_may_update(self, client, db):
        organizer, other = _setup(client)
        make_admin(db, other["user_id"])
        event = create_test_event(client, organizer["headers"])

        resp = client.put(f"/api/events/{event['event_id']}", json={"title": "Moderated"},
                          headers=other["headers"])
        assert resp.status_code == 200

    def test_update_times_inconsistent(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"])
        before_start = datetime.fromisoformat(event["start_time_utc"]) - timedelta(hours=1)

        resp = client.put(f"/api/events/{event['event_id']}", json={"end_time_utc": before_start.isoformat()},
                          headers=organizer["headers"])
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "InvalidEventTimes"

    def test_update_start_into_past_rejected(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"])

        resp = client.put(f"/api/events/{event['event_id']}",
                          json={"start_time_utc": "2000-01-01T10:00:00Z", "end_time_utc": "2000-01-01T12:00:00Z"},
                          headers=organizer["headers"])
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "InvalidEventTimes"
        assert client.get(f"/api/events/{event['event_id']}").json()["start_time_utc"] == event["start_time_utc"]


class TestEditWindow:
    """No edits within one hour of the start, except cancellation."""

    def test_edit_thirty_minutes_before_start_rejected(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"], start_in=timedelta(minutes=30))

        resp = client.put(f"/api/events/{event['event_id']}", json={"title": "Too late"},
                          headers=organizer["headers"])
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "EditWindowClosed"

    def test_cancel_thirty_minutes_before_start_allowed(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"], start_in=timedelta(minutes=30))

        resp = client.put(f"/api/events/{event['event_id']}", json={"status": "cancelled"},
                          headers=organizer["headers"])
        assert resp.status_code == 200
        assert resp.json()["status"] == "cancelled"

    def test_edit_two_hours_before_start_allowed(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"], start_in=timedelta(hours=2))

        resp = client.put(f"/api/events/{event['event_id']}", json={"capacity": 10},
                          headers=organizer["headers"])
        assert resp.status_code == 200
        assert resp.json()["capacity"] == 10


class TestEventCancel:
    def test_delete_is_soft_cancel(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"])

        resp = client.delete(f"/api/events/{event['event_id']}", headers=organizer["headers"])
        assert resp.status_code == 200
        assert resp.json()["status"] == "cancelled"

        fetched = client.get(f"/api/events/{event['event_id']}")
        assert fetched.status_code == 200
        assert fetched.json()["status"] == "cancelled"

    def test_cancel_keeps_attendee_history(self, client):
        organizer, other = _setup(client)
        event = create_test_event(client, organizer["headers"])
        client.post(f"/api/events/{event['event_id']}/join", headers=other["headers"])
        client.delete(f"/api/events/{event['event_id']}", headers=organizer["headers"])

        attendees = client.get(f"/api/events/{event['event_id']}/attendees").json()
        assert [a["user_id"] for a in attendees] == [other["user_id"]]

    def test_cancel_twice(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"])
        client.delete(f"/api/events/{event['event_id']}", headers=organizer["headers"])

        resp = client.delete(f"/api/events/{event['event_id']}", headers=organizer["headers"])
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "EventCancelled"

    def test_cancelled_is_terminal(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"])
        client.delete(f"/api/events/{event['event_id']}", headers=organizer["headers"])

        resp = client.put(f"/api/events/{event['event_id']}", json={"status": "active"},
                          headers=organizer["headers"])
        assert resp.status_code == 400
        assert client.get(f"/api/events/{event['event_id']}").json()["status"] == "cancelled"

    def test_cancel_non_organizer_forbidden(self, client):
        organizer, other = _setup(client)
        event = create_test_event(client, organizer["headers"])

        resp = client.delete(f"/api/events/{event['event_id']}", headers=other["headers"])
        assert resp.status_code == 403


class TestCapacityChange:
    def test_raising_capacity_promotes_waitlist(self, client):
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"], capacity=1)
        users = [create_test_user(client, name=n) for n in ("Anna", "Bruno", "Chloe")]
        for user in users:
            client.post(f"/api/events/{event['event_id']}/join", headers=user["headers"])

        resp = client.put(f"/api/events/{event['event_id']}", json={"capacity": 2},
                          headers=organizer["headers"])
        assert resp.status_code == 200
        assert resp.json()["going_count"] == 2
        assert resp.json()["waitlist_count"] == 1

        statuses = {a["user_id"]: a["status"]
                    for a in client.get(f"/api/events/{event['event_id']}/attendees").json()}
        assert statuses[users[1]["user_id"]] == "going"
        assert statuses[users[2]["user_id"]] == "waitlist"


class TestMutationLedger:
    def test_writes_are_recorded(self, client, db):
        from app.models.event_mutation import EventMutation
        organizer, _ = _setup(client)
        event = create_test_event(client, organizer["headers"], title="Before")
        client.put(f"/api/events/{event['event_id']}", json={"title": "After"}, headers=organizer["headers"])
        client.delete(f"/api/events/{event['event_id']}", headers=organizer["headers"])

        mutations = db.query(EventMutation).filter(EventMutation.event_id == event["event_id"]).all()
        by_action = {m.action_type.value: m for m in mutations}
        assert set(by_action) == {"create", "update", "cancel"}
        assert by_action["create"].before_snapshot is None
        assert by_action["update"].before_snapshot["title"] == "Before"
        assert by_action["update"].after_snapshot["title"] == "After"
        assert by_action["cancel"].after_snapshot["status"] == "cancelled"
        assert all(m.actor_user_id == organizer["user_id"] for m in mutations)
