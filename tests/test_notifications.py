"""
Notification audience resolution and read receipts.
"""
import pytest

from app.core.exceptions import NotFound
from app.services.notification_service import NotificationService


def _viewer(student):
    return {"user_id": student.user_id, "role": "student", "student_id": student.id}


ADMIN = {"user_id": 1, "role": "admin", "student_id": None}


@pytest.fixture
def notifications():
    return NotificationService()


@pytest.fixture
def broadcast(notifications, student):
    return {
        "all": notifications.create("Welcome", "Season starts", "all"),
        "placed": notifications.create("Placed", "Congrats all", "placed"),
        "unplaced": notifications.create("Keep going", "More drives soon", "unplaced"),
        "direct": notifications.create("Direct", "Just you", [student.id]),
        "other": notifications.create("Other", "Not you", [student.id + 100]),
    }


def _titles(docs):
    return {doc["title"] for doc in docs}


def test_unplaced_student_audience(notifications, broadcast, student):
    docs = notifications.list_for(_viewer(student), is_placed=False)
    assert _titles(docs) == {"Welcome", "Keep going", "Direct"}


def test_placed_student_audience(notifications, broadcast, student):
    docs = notifications.list_for(_viewer(student), is_placed=True)
    assert _titles(docs) == {"Welcome", "Placed", "Direct"}


def test_student_without_profile_sees_only_broadcasts(notifications, broadcast):
    viewer = {"user_id": 99, "role": "student", "student_id": None}
    docs = notifications.list_for(viewer, None)
    assert _titles(docs) == {"Welcome"}
    for doc in notifications.list_for(ADMIN, None):
        assert notifications.is_visible_to(doc, viewer, None) == (doc["title"] == "Welcome")


def test_admin_sees_everything(notifications, broadcast):
    assert len(notifications.list_for(ADMIN, None)) == 5


def test_list_is_newest_first(notifications, broadcast):
    docs = notifications.list_for(ADMIN, None)
    assert [doc["title"] for doc in docs] == ["Other", "Direct", "Keep going", "Placed", "Welcome"]


def test_mark_read_twice_records_user_once(notifications, broadcast, student):
    viewer = _viewer(student)
    notifications.mark_read(broadcast["all"]["id"], viewer, False)
    doc = notifications.mark_read(broadcast["all"]["id"], viewer, False)
    assert doc["read"] == [student.user_id]


def test_mark_read_outside_audience_is_not_found(notifications, broadcast, student):
    with pytest.raises(NotFound):
        notifications.mark_read(broadcast["other"]["id"], _viewer(student), False)


def test_mark_all_read_only_touches_audience(notifications, broadcast, student):
    viewer = _viewer(student)
    changed = notifications.mark_all_read(viewer, False)
    assert changed == 3

    again = notifications.mark_all_read(viewer, False)
    assert again == 0

    other = notifications.collection.find_one({"title": "Other"})
    assert student.user_id not in other["read"]


def test_is_visible_to_agrees_with_filter(notifications, broadcast, student):
    viewer = _viewer(student)
    for placed in (True, False):
        listed = {doc["id"] for doc in notifications.list_for(viewer, placed)}
        for doc in notifications.list_for(ADMIN, None):
            assert notifications.is_visible_to(doc, viewer, placed) == (doc["id"] in listed)


# =============================================================================
# API
# =============================================================================

def test_admin_creates_and_student_reads(client, admin_headers, student, student_headers):
    resp = client.post(
        "/api/notifications",
        json={"title": "Drive tomorrow", "message": "Be on time", "recipients": "unplaced"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    notification_id = resp.json()["id"]

    resp = client.get("/api/notifications", headers=student_headers)
    assert resp.status_code == 200
    assert [n["id"] for n in resp.json()] == [notification_id]

    resp = client.put(f"/api/notifications/{notification_id}/read", headers=student_headers)
    assert resp.status_code == 200
    assert resp.json()["read"] == [student.user_id]


def test_placed_audience_follows_current_placement(
    client, admin_headers, student_headers, workflow, application
):
    client.post(
        "/api/notifications",
        json={"title": "Placed only", "message": "Paperwork", "recipients": "placed"},
        headers=admin_headers,
    )
    titles = [n["title"] for n in client.get("/api/notifications", headers=student_headers).json()]
    assert "Placed only" not in titles

    workflow.update_status(application.id, status="selected")

    titles = [n["title"] for n in client.get("/api/notifications", headers=student_headers).json()]
    assert "Placed only" in titles


def test_students_cannot_create_notifications(client, student_headers):
    resp = client.post(
        "/api/notifications",
        json={"title": "Hi", "message": "x", "recipients": "all"},
        headers=student_headers,
    )
    assert resp.status_code == 403


def test_empty_recipient_list_rejected(client, admin_headers):
    resp = client.post(
        "/api/notifications",
        json={"title": "Hi", "message": "x", "recipients": []},
        headers=admin_headers,
    )
    assert resp.status_code == 422


def test_mark_all_read_endpoint(client, admin_headers, student_headers):
    for title in ("One", "Two"):
        client.post(
            "/api/notifications",
            json={"title": title, "message": "x", "recipients": "all"},
            headers=admin_headers,
        )
    resp = client.put("/api/notifications/mark-all-read", headers=student_headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "2 notifications marked as read"


def test_invalid_notification_id(client, student_headers):
    resp = client.put("/api/notifications/not-an-id/read", headers=student_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_ID"


def test_delete_notification(client, admin_headers):
    created = client.post(
        "/api/notifications",
        json={"title": "Temp", "message": "x", "recipients": "all"},
        headers=admin_headers,
    ).json()
    assert client.delete(f"/api/notifications/{created['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/notifications/{created['id']}", headers=admin_headers).status_code == 404
