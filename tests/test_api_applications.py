"""
Application endpoints: apply (multipart), listing, ownership and admin transitions.
"""
import os

from app.core.config import get_settings
from app.models import Student


def _apply(client, headers, student_id, drive_id, files=None):
    return client.post(
        "/api/applications",
        data={"student_id": str(student_id), "drive_id": str(drive_id)},
        files=files,
        headers=headers,
    )


def test_student_applies_with_resume(client, student, student_headers, drive):
    resp = _apply(
        client, student_headers, student.id, drive.id,
        files={"resume": ("cv.pdf", b"%PDF-1.4 fake", "application/pdf")},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "applied"
    assert body["resume_url"].startswith("/uploads/resume-")
    assert body["resume_url"].endswith(".pdf")

    stored = os.path.join(get_settings().upload_dir, body["resume_url"].rsplit("/", 1)[1])
    assert os.path.exists(stored)


def test_apply_without_resume(client, student, student_headers, drive):
    resp = _apply(client, student_headers, student.id, drive.id)
    assert resp.status_code == 201
    assert resp.json()["resume_url"] is None


def test_apply_rejects_unsupported_file(client, student, student_headers, drive):
    resp = _apply(
        client, student_headers, student.id, drive.id,
        files={"resume": ("cv.exe", b"MZ", "application/octet-stream")},
    )
    assert resp.status_code == 400


def test_apply_twice_returns_already_applied(client, student, student_headers, drive):
    _apply(client, student_headers, student.id, drive.id)
    resp = _apply(client, student_headers, student.id, drive.id)
    assert resp.status_code == 400
    assert resp.json()["code"] == "ALREADY_APPLIED"


def test_student_cannot_apply_for_someone_else(client, make_student, student_headers, drive):
    other = make_student()
    resp = _apply(client, student_headers, other.id, drive.id)
    assert resp.status_code == 403


def test_student_sees_only_own_applications(
    client, workflow, make_student, headers_for, drive, admin_headers
):
    alice = make_student(name="Alice")
    bob = make_student(name="Bob")
    workflow.apply(alice.id, drive.id)
    workflow.apply(bob.id, drive.id)

    resp = client.get(f"/api/applications/drive/{drive.id}", headers=headers_for(alice))
    assert [a["student_id"] for a in resp.json()] == [alice.id]

    resp = client.get(f"/api/applications/drive/{drive.id}", headers=admin_headers)
    assert len(resp.json()) == 2

    resp = client.get(f"/api/applications/student/{bob.id}", headers=headers_for(alice))
    assert resp.status_code == 403


def test_get_application_ownership(client, application, make_student, headers_for, student_headers):
    assert client.get(f"/api/applications/{application.id}", headers=student_headers).status_code == 200
    stranger = make_student()
    resp = client.get(f"/api/applications/{application.id}", headers=headers_for(stranger))
    assert resp.status_code == 403


def test_admin_status_update_flow(client, admin_headers, application, student, reload):
    resp = client.put(
        f"/api/applications/{application.id}/status",
        json={"status": "shortlisted", "current_round": 1, "next_round_date": "2030-02-01T09:00:00"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["current_round"] == 1
    assert resp.json()["next_round_date"].startswith("2030-02-01T09:00:00")

    resp = client.put(
        f"/api/applications/{application.id}/status", json={"status": "selected"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert reload(Student, student.id).is_placed is True


def test_status_update_invalid_round(client, admin_headers, application):
    resp = client.put(
        f"/api/applications/{application.id}/status",
        json={"status": "rejected", "current_round": 2},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_ROUND_UPDATE"


def test_status_update_fractional_round(client, admin_headers, application):
    resp = client.put(
        f"/api/applications/{application.id}/status",
        json={"status": "shortlisted", "current_round": 2.5},
        headers=admin_headers,
    )
    assert resp.json()["current_round"] == 3


def test_status_update_unknown_status(client, admin_headers, application):
    resp = client.put(
        f"/api/applications/{application.id}/status", json={"status": "placed"}, headers=admin_headers
    )
    assert resp.status_code == 422


def test_attendance_endpoint(client, admin_headers, application):
    resp = client.put(
        f"/api/applications/{application.id}/attendance", json={"is_present": False}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"

    resp = client.put(
        f"/api/applications/{application.id}/status", json={"status": "selected"}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "ABSENT_STUDENT"


def test_round_override_endpoint(client, admin_headers, application):
    resp = client.put(
        f"/api/applications/{application.id}/round-override",
        json={"current_round": 2},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["current_round"] == 2


def test_student_replaces_own_resume(client, student_headers, application, make_student, headers_for):
    cv = {"resume": ("cv-v2.docx", b"PK fake docx", "application/octet-stream")}
    resp = client.put(f"/api/applications/{application.id}/resume", files=cv, headers=student_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["resume_url"].startswith("/uploads/resume-")
    assert body["resume_url"].endswith(".docx")
    assert body["status"] == "applied"

    stranger = make_student()
    resp = client.put(f"/api/applications/{application.id}/resume", files=cv, headers=headers_for(stranger))
    assert resp.status_code == 403


def test_resume_replacement_requires_file(client, student_headers, application):
    resp = client.put(f"/api/applications/{application.id}/resume", headers=student_headers)
    assert resp.status_code == 422


def test_students_cannot_change_status(client, student_headers, application):
    resp = client.put(
        f"/api/applications/{application.id}/status", json={"status": "selected"}, headers=student_headers
    )
    assert resp.status_code == 403


def test_delete_application(client, admin_headers, application):
    assert client.delete(f"/api/applications/{application.id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/applications/{application.id}", headers=admin_headers).status_code == 404


def test_student_resync_endpoint(client, admin_headers, workflow, application, student):
    workflow.update_status(application.id, status="selected")
    resp = client.post(f"/api/students/{student.id}/placement/resync", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["selected_count"] == 1
    assert resp.json()["is_placed"] is True
