"""
Calendar events.
"""
from app.services.event_service import EventService


def _create(client, headers, title="Pre-placement talk", date="2030-05-01T10:00:00"):
    return client.post("/api/events", json={"title": title, "date": date}, headers=headers)


def test_admin_event_crud(client, admin_headers, student_headers):
    resp = _create(client, admin_headers)
    assert resp.status_code == 201
    event = resp.json()
    assert event["drive_id"] is None

    resp = client.put(
        f"/api/events/{event['id']}", json={"title": "Resume workshop"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "Resume workshop"

    listed = client.get("/api/events", headers=student_headers).json()
    assert [e["title"] for e in listed] == ["Resume workshop"]

    assert client.delete(f"/api/events/{event['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/events/{event['id']}", headers=admin_headers).status_code == 404


def test_events_sorted_by_date(client, admin_headers):
    _create(client, admin_headers, "Second", "2030-06-01T10:00:00")
    _create(client, admin_headers, "First", "2030-01-01T10:00:00")
    titles = [e["title"] for e in client.get("/api/events", headers=admin_headers).json()]
    assert titles == ["First", "Second"]


def test_timezone_aware_dates_stored_as_utc(client, admin_headers):
    event = _create(client, admin_headers, date="2030-05-01T15:30:00+05:30").json()
    assert event["date"].startswith("2030-05-01T10:00:00")


def test_drive_event_cannot_be_edited_or_deleted(client, admin_headers, drive):
    event = EventService().get_for_drive(drive.id)

    resp = client.put(f"/api/events/{event['id']}", json={"title": "Hacked"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "DRIVE_MANAGED_EVENT"

    resp = client.delete(f"/api/events/{event['id']}", headers=admin_headers)
    assert resp.json()["code"] == "DRIVE_MANAGED_EVENT"
    assert EventService().get_for_drive(drive.id) is not None


def test_students_cannot_create_events(client, student_headers):
    assert _create(client, student_headers).status_code == 403
