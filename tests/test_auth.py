"""
Signup, login, tokens and role checks.
"""
from app.db.postgres import get_db_session
from app.models import User

STUDENT_SIGNUP = {
    "name": "Asha Rao",
    "email": "Asha@College.edu",
    "password": "secret123",
    "role": "student",
    "branch": "Computer Science",
    "percentage": 82.5,
    "roll_number": "CS2024001",
    "mobile_number": "9123456789",
}


def test_student_signup_creates_profile(client):
    resp = client.post("/api/auth/signup", json=STUDENT_SIGNUP)
    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["email"] == "asha@college.edu"
    assert body["user"]["role"] == "student"
    assert body["student_id"] is not None

    headers = {"Authorization": f"Bearer {body['access_token']}"}
    profile = client.get("/api/auth/student/profile", headers=headers).json()
    assert profile["roll_number"] == "CS2024001"
    assert profile["is_placed"] is False
    assert profile["placed_companies"] == []
    assert profile["selected_count"] == 0


def test_student_signup_requires_profile_fields(client):
    payload = dict(STUDENT_SIGNUP)
    del payload["roll_number"]
    assert client.post("/api/auth/signup", json=payload).status_code == 422


def test_admin_signup_needs_no_profile(client):
    resp = client.post(
        "/api/auth/signup",
        json={"name": "Officer", "email": "tpo@college.edu", "password": "secret123", "role": "admin"},
    )
    assert resp.status_code == 201
    assert resp.json()["student_id"] is None


def test_duplicate_email_rejected(client):
    client.post("/api/auth/signup", json=STUDENT_SIGNUP)
    payload = dict(STUDENT_SIGNUP, roll_number="CS2024002")
    resp = client.post("/api/auth/signup", json=payload)
    assert resp.status_code == 400


def test_login(client, admin_user):
    resp = client.post("/api/auth/login", json={"email": "admin@college.edu", "password": "admin123"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"

    bad = client.post("/api/auth/login", json={"email": "admin@college.edu", "password": "wrong"})
    assert bad.status_code == 401


def test_login_deactivated_account(client, admin_user):
    with get_db_session() as db:
        db.get(User, admin_user.id).is_active = False
    resp = client.post("/api/auth/login", json={"email": "admin@college.edu", "password": "admin123"})
    assert resp.status_code == 403


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code in (401, 403)
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_change_password(client, admin_user, admin_headers):
    resp = client.post(
        "/api/auth/change-password",
        json={"current_password": "wrong", "new_password": "newpass123"},
        headers=admin_headers,
    )
    assert resp.status_code == 400

    resp = client.post(
        "/api/auth/change-password",
        json={"current_password": "admin123", "new_password": "newpass123"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    login = client.post("/api/auth/login", json={"email": "admin@college.edu", "password": "newpass123"})
    assert login.status_code == 200


def test_profile_update_cannot_touch_placement(client, student, student_headers):
    resp = client.patch(
        "/api/auth/student/profile",
        json={"percentage": 91, "is_placed": True, "selected_count": 4},
        headers=student_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["percentage"] == 91
    assert body["is_placed"] is False
    assert body["selected_count"] == 0


def test_admin_only_routes(client, student_headers):
    assert client.get("/api/students", headers=student_headers).status_code == 403
    assert client.get("/api/applications", headers=student_headers).status_code == 403
