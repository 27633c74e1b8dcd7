"""
Student Service - student profiles.

Only identity fields are writable here. is_placed / placed_companies /
selected_count belong to the application workflow.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import NotFound, StateConflict
from app.db.postgres import get_db_session
from app.models import Student, User
from app.services.application_service import unit_of_work

logger = logging.getLogger(__name__)

IDENTITY_FIELDS = ["name", "email", "roll_number", "mobile_number", "branch", "percentage", "resume"]


def _clean(changes: dict) -> dict:
    """Drop non-identity keys, unwrap enums, lower-case email."""
    cleaned = {}
    for field, value in changes.items():
        if field not in IDENTITY_FIELDS or value is None:
            continue
        value = getattr(value, "value", value)
        if field == "email":
            value = value.strip().lower()
        cleaned[field] = value
    return cleaned


class StudentService:

    def list(self) -> List[Student]:
        with get_db_session() as db:
            return db.query(Student).order_by(Student.roll_number).all()

    def get(self, student_id: int) -> Student:
        with get_db_session() as db:
            student = db.get(Student, student_id)
            if not student:
                raise NotFound("Student not found", "STUDENT_NOT_FOUND")
            return student

    def get_by_user(self, user_id: int) -> Student:
        with get_db_session() as db:
            student = db.query(Student).filter(Student.user_id == user_id).first()
            if not student:
                raise NotFound("Student profile not found", "STUDENT_NOT_FOUND")
            return student

    def is_placed(self, student_id: Optional[int]) -> Optional[bool]:
        """Placement flag used for notification audiences. None when there's no profile."""
        if student_id is None:
            return None
        with get_db_session() as db:
            row = db.query(Student.is_placed).filter(Student.id == student_id).first()
            return row[0] if row else None

    def create(self, user_id: int, data: dict) -> Student:
        fields = _clean(data)
        try:
            with get_db_session() as db:
                if not db.get(User, user_id):
                    raise NotFound("User not found", "USER_NOT_FOUND")
                self._check_unique(db, fields)
                student = Student(
                    user_id=user_id,
                    is_placed=False,
                    placed_companies=[],
                    selected_count=0,
                    **fields
                )
                db.add(student)
        except IntegrityError as e:
            raise StateConflict("Student profile already exists", "DUPLICATE_STUDENT") from e

        logger.info("Student %s created for user %s", student.id, user_id)
        return student

    def update(self, student_id: int, changes: dict) -> Student:
        fields = _clean(changes)
        with unit_of_work() as db:
            student = db.get(Student, student_id)
            if not student:
                raise NotFound("Student not found", "STUDENT_NOT_FOUND")
            self._check_unique(db, fields, exclude_id=student.id)
            for field, value in fields.items():
                setattr(student, field, value)
        return student

    def delete(self, student_id: int) -> None:
        with unit_of_work() as db:
            student = db.get(Student, student_id)
            if not student:
                raise NotFound("Student not found", "STUDENT_NOT_FOUND")
            removed = len(student.applications)
            db.delete(student)  # applications cascade
        logger.info("Student %s deleted with %d applications", student_id, removed)

    @staticmethod
    def _check_unique(db, fields: dict, exclude_id: int = None) -> None:
        for field, code, label in [
            ("email", "EMAIL_TAKEN", "Email"),
            ("roll_number", "ROLL_NUMBER_TAKEN", "Roll number"),
        ]:
            if field not in fields:
                continue
            query = db.query(Student.id).filter(getattr(Student, field) == fields[field])
            if exclude_id is not None:
                query = query.filter(Student.id != exclude_id)
            if query.first():
                raise StateConflict(f"{label} already registered", code)


def get_student_service() -> StudentService:
    return StudentService()
