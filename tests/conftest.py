"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, tables recreated for every test
- mongomock client in place of MongoDB
- TestClient and JWT headers for an admin and a student
- Factories for companies, drives and applications
"""
import os
import tempfile
from datetime import datetime, timedelta

# Must be set before app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="placement-uploads-")
os.environ["JWT_SECRET_KEY"] = "test-secret"

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.auth import create_access_token, hash_password
from app.db.mongodb import set_mongo_client
from app.db.postgres import Base, engine, get_db_session
from app.models import Company, Student, User
from app.schemas.schemas import DriveCreate


# =============================================================================
# Storage
# =============================================================================

@pytest.fixture(autouse=True)
def databases():
    """Fresh SQL tables and a fresh mongomock database per test."""
    Base.metadata.create_all(bind=engine)
    set_mongo_client(mongomock.MongoClient())
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


# =============================================================================
# Users
# =============================================================================

def _auth_headers(user_id: int, role: str) -> dict:
    token = create_access_token(data={"sub": str(user_id), "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user():
    with get_db_session() as db:
        user = User(
            name="Placement Officer",
            email="admin@college.edu",
            password_hash=hash_password("admin123"),
            role="admin",
        )
        db.add(user)
    return user


@pytest.fixture
def admin_headers(admin_user):
    return _auth_headers(admin_user.id, "admin")


@pytest.fixture
def make_student():
    """Create a student user + profile. Returns the Student."""
    counter = {"n": 0}

    def _make(branch="Computer Science", percentage=80.0, name=None):
        counter["n"] += 1
        n = counter["n"]
        with get_db_session() as db:
            user = User(
                name=name or f"Student {n}",
                email=f"student{n}@college.edu",
                password_hash=hash_password("student123"),
                role="student",
            )
            db.add(user)
            db.flush()
            student = Student(
                user_id=user.id,
                name=user.name,
                email=user.email,
                roll_number=f"CS{n:03d}",
                mobile_number="9876543210",
                branch=branch,
                percentage=percentage,
                is_placed=False,
                placed_companies=[],
                selected_count=0,
            )
            db.add(student)
        return student

    return _make


@pytest.fixture
def student(make_student):
    return make_student()


@pytest.fixture
def student_headers(student):
    return _auth_headers(student.user_id, "student")


@pytest.fixture
def headers_for():
    """Headers for any Student returned by make_student."""
    def _headers(student):
        return _auth_headers(student.user_id, "student")
    return _headers


# =============================================================================
# Companies / drives / applications
# =============================================================================

@pytest.fixture
def make_company():
    def _make(name="Acme Corp"):
        with get_db_session() as db:
            company = Company(name=name, description=f"{name} builds things", location="Pune")
            db.add(company)
        return company
    return _make


@pytest.fixture
def company(make_company):
    return make_company()


def drive_payload(company_id: int, **overrides) -> dict:
    now = datetime.utcnow()
    payload = {
        "company_id": company_id,
        "title": "Software Engineer",
        "description": "Backend role",
        "requirements": "Python, SQL",
        "eligible_branches": ["Computer Science", "Information Technology"],
        "minimum_percentage": 60,
        "ctc_range": {"min": 6, "max": 12},
        "number_of_rounds": 3,
        "drive_date": (now + timedelta(days=14)).isoformat(),
        "last_date_to_apply": (now + timedelta(days=7)).isoformat(),
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_drive(company):
    """Create a drive (and its event) through DriveService."""
    from app.services.drive_service import DriveService

    def _make(company_obj=None, **overrides):
        target = company_obj or company
        data = DriveCreate(**drive_payload(target.id, **overrides))
        return DriveService().create(data)

    return _make


@pytest.fixture
def drive(make_drive):
    return make_drive()


@pytest.fixture
def workflow():
    from app.services.application_service import ApplicationWorkflowService
    return ApplicationWorkflowService()


@pytest.fixture
def application(workflow, student, drive):
    return workflow.apply(student.id, drive.id)


@pytest.fixture
def reload():
    """Fresh copy of a row from the database."""
    def _reload(model, pk):
        with get_db_session() as db:
            return db.get(model, pk)
    return _reload


@pytest.fixture
def payload_for_drive():
    return drive_payload
