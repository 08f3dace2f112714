"""Tests for the organizer-side RSVP pages and the QR code page."""
import base64

from app.models.rsvp import RSVP, RSVPStatus
from app.services.id_generator import BASE36
from tests.conftest import create_test_event, create_test_rsvp, fresh, login, logout


def _update(client, rsvp_id: str, **fields):
    data = {"_method": "PUT", "rsvp_id": rsvp_id}
    data.update(fields)
    return client.post("/rsvps/", data=data, follow_redirects=False)


def _reload(db, rsvp_id: str) -> RSVP:
    return fresh(db).query(RSVP).filter(RSVP.id == rsvp_id).one()


class TestRsvpCreate:
    """Invite creation under an event."""

    def test_create_rsvp(self, client, db):
        login(client)
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id, name="Ana")
        assert len(rsvp.id) == 8
        assert set(rsvp.id) <= set(BASE36)
        assert rsvp.status == RSVPStatus.pending
        assert rsvp.extra_guests == 0

    def test_create_redirects_to_event_list(self, client, db):
        login(client)
        event = create_test_event(client, db)
        resp = client.post("/rsvps/", data={"event_id": event.id, "name": "Ana"}, follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == f"/rsvps/?event_id={event.id}"

    def test_create_requires_event(self, client):
        login(client)
        resp = client.post("/rsvps/", data={"name": "Ana"})
        assert resp.status_code == 400
        assert resp.text == "Event ID is required to create an RSVP."

    def test_create_requires_name(self, client, db):
        login(client)
        event = create_test_event(client, db)
        resp = client.post("/rsvps/", data={"event_id": event.id, "name": ""})
        assert resp.status_code == 400
        assert resp.text == "Name is required."

    def test_create_under_unknown_event(self, client):
        login(client)
        resp = client.post("/rsvps/", data={"event_id": "NOPE1234", "name": "Ana"})
        assert resp.status_code == 404

    def test_create_under_other_users_event(self, client, db):
        login(client, email="alice@example.com")
        event = create_test_event(client, db)
        logout(client)
        login(client, email="bob@example.com")
        resp = client.post("/rsvps/", data={"event_id": event.id, "name": "Intruder"})
        assert resp.status_code == 403
        assert fresh(db).query(RSVP).count() == 0


class TestRsvpList:
    def test_list_requires_event(self, client):
        login(client)
        resp = client.get("/rsvps/")
        assert resp.status_code == 400
        assert resp.text == "An event ID or RSVP ID must be specified to view RSVPs."

    def test_list_for_event(self, client, db):
        login(client)
        event = create_test_event(client, db, title="Launch")
        rsvp = create_test_rsvp(client, db, event.id, name="Ana")
        resp = client.get(f"/rsvps/?event_id={event.id}")
        assert resp.status_code == 200
        assert "Ana" in resp.text
        assert rsvp.id in resp.text
        assert "Pending" in resp.text

    def test_show_rsvp(self, client, db):
        login(client)
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id, name="Ana")
        resp = client.get(f"/rsvps/?rsvp_id={rsvp.id}")
        assert resp.status_code == 200
        assert f"Edit invite {rsvp.id}" in resp.text


class TestRsvpUpdate:
    """Organizer edits, guarded by event ownership."""

    def test_only_owner_can_update(self, client, db):
        login(client, email="u1@example.com")
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id, name="Ana")
        logout(client)

        login(client, email="u2@example.com")
        resp = _update(client, rsvp.id, response="Yes,3")
        assert resp.status_code == 403
        unchanged = _reload(db, rsvp.id)
        assert unchanged.status == RSVPStatus.pending
        assert unchanged.extra_guests == 0
        logout(client)

        login(client, email="u1@example.com")
        resp = _update(client, rsvp.id, response="Yes,3")
        assert resp.status_code == 303
        assert resp.headers["location"] == f"/rsvps/?event_id={event.id}"
        updated = _reload(db, rsvp.id)
        assert updated.status == RSVPStatus.yes
        assert updated.extra_guests == 3

    def test_rename(self, client, db):
        login(client)
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id, name="Ana")
        _update(client, rsvp.id, name="Anna")
        assert _reload(db, rsvp.id).name == "Anna"

    def test_no_clears_guests(self, client, db):
        login(client)
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id)
        _update(client, rsvp.id, response="Yes,2")
        _update(client, rsvp.id, response="No")
        updated = _reload(db, rsvp.id)
        assert updated.status == RSVPStatus.no
        assert updated.extra_guests == 0

    def test_guest_count_alone(self, client, db):
        login(client)
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id)
        resp = _update(client, rsvp.id, extra_guests="2")
        assert resp.status_code == 400
        _update(client, rsvp.id, response="Yes")
        resp = _update(client, rsvp.id, extra_guests="2")
        assert resp.status_code == 303
        assert _reload(db, rsvp.id).extra_guests == 2

    def test_rejects_out_of_range_guests(self, client, db):
        login(client)
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id)
        resp = _update(client, rsvp.id, response="Yes,5")
        assert resp.status_code == 400
        assert _reload(db, rsvp.id).status == RSVPStatus.pending

    def test_unknown_rsvp(self, client):
        login(client)
        resp = _update(client, "ZZZZZZZZ", name="Ghost")
        assert resp.status_code == 404


class TestRsvpDelete:
    def test_delete(self, client, db):
        login(client)
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id)
        resp = client.post("/rsvps/", data={"_method": "DELETE", "rsvp_id": rsvp.id}, follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == f"/rsvps/?event_id={event.id}"
        assert fresh(db).query(RSVP).count() == 0

    def test_delete_without_id(self, client):
        login(client)
        resp = client.post("/rsvps/", data={"_method": "DELETE"})
        assert resp.status_code == 400
        assert resp.text == "rsvp_id is required"


class TestRsvpQr:
    """QR code page for an invite."""

    def test_qr_page(self, client, db):
        login(client)
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id)
        resp = client.get(f"/rsvps/qr/?rsvp_id={rsvp.id}")
        assert resp.status_code == 200
        assert f"https://rsvp.example.com/response/?rsvp_id={rsvp.id}" in resp.text
        marker = "data:image/png;base64,"
        assert marker in resp.text
        encoded = resp.text.split(marker, 1)[1].split('"', 1)[0]
        assert base64.b64decode(encoded).startswith(b"\x89PNG")

    def test_qr_requires_owner(self, client, db):
        login(client, email="alice@example.com")
        event = create_test_event(client, db)
        rsvp = create_test_rsvp(client, db, event.id)
        logout(client)
        login(client, email="bob@example.com")
        assert client.get(f"/rsvps/qr/?rsvp_id={rsvp.id}").status_code == 403

    def test_qr_bad_code(self, client):
        login(client)
        resp = client.get("/rsvps/qr/?rsvp_id=not-a-code")
        assert resp.status_code == 400
        assert resp.text == "Invalid RSVP identifier format."

    def test_qr_requires_session(self, client):
        assert client.get("/rsvps/qr/?rsvp_id=ABCD1234").status_code == 401
