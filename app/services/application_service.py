"""
Application Workflow Service

Every change to an application's status, round or attendance goes through
here. Each operation is one unit of work: the Application, its Drive and its
Student are updated in a single SQL transaction, so a failure part-way leaves
none of them changed.

STATUS FLOW:
    applied -> shortlisted / selected / rejected   (any order, admin driven)
    is_present = False freezes the application (status forced to rejected)

PLACEMENT STATE:
    A student's placement fields are derived from their selected applications:
    - selected_count   = number of applications with status "selected"
    - placed_companies = distinct company names of those drives, in the order
                         they were first added
    - is_placed        = placed_companies is non-empty
    Re-deriving instead of incrementing makes a replayed request a no-op.

CONCURRENCY:
    Application, Student and PlacementDrive rows are version-checked on write.
    A request that loses the race gets ConcurrentUpdate and nothing is written.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional, Tuple

from pymongo.errors import PyMongoError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import ConcurrentUpdate, NotFound, StateConflict, ValidationFailed
from app.db.postgres import get_db_session
from app.models import Application, PlacementDrive, Student
from app.schemas.schemas import ApplicationStatus, ROUND_STATUSES, parse_round
from app.services.notification_service import (
    NotificationService,
    absence_message,
    status_update_message,
)

logger = logging.getLogger(__name__)


# ============================================================
# UNIT OF WORK
# ============================================================

@contextmanager
def unit_of_work():
    """get_db_session() that reports a lost optimistic-lock race as ConcurrentUpdate."""
    try:
        with get_db_session() as db:
            yield db
    except StaleDataError as e:
        logger.warning("Optimistic lock lost: %s", e)
        raise ConcurrentUpdate(
            "The record was changed by another request. Reload and try again."
        ) from e


# ============================================================
# ELIGIBILITY
# ============================================================

def check_eligibility(student: Student, drive: PlacementDrive,
                      now: datetime = None) -> Optional[Tuple[str, str]]:
    """
    Return (code, message) for the first rule the student fails, or None.

    Rules, in order: branch, percentage, deadline.
    """
    if student.branch not in (drive.eligible_branches or []):
        return "BRANCH_NOT_ELIGIBLE", "Student branch not eligible for this drive"

    if student.percentage < drive.minimum_percentage:
        return "PERCENTAGE_BELOW_MINIMUM", "Student percentage below minimum requirement"

    now = now or datetime.utcnow()
    if now > drive.last_date_to_apply:
        return "DEADLINE_PASSED", "Application deadline has passed"

    return None


# ============================================================
# PLACEMENT STATE
# ============================================================

def refresh_placement(db: Session, student: Student) -> bool:
    """
    Re-derive the student's placement fields from their selected applications.
    Pending changes must be flushed first. Returns True if anything changed.
    """
    company_names = db.execute(
        select(PlacementDrive.company_name)
        .join(Application, Application.drive_id == PlacementDrive.id)
        .where(
            Application.student_id == student.id,
            Application.status == ApplicationStatus.selected.value,
        )
        .order_by(Application.updated_at, Application.id)
    ).scalars().all()

    selected = list(dict.fromkeys(company_names))
    kept = [name for name in (student.placed_companies or []) if name in selected]
    placed_companies = kept + [name for name in selected if name not in kept]

    changed = False
    if placed_companies != (student.placed_companies or []):
        student.placed_companies = placed_companies
        changed = True
    if student.selected_count != len(company_names):
        student.selected_count = len(company_names)
        changed = True
    if student.is_placed != bool(placed_companies):
        student.is_placed = bool(placed_companies)
        changed = True

    if changed:
        logger.info(
            "Student %s placement -> placed=%s companies=%s selected=%d",
            student.id, student.is_placed, student.placed_companies, student.selected_count
        )
    return changed


# ============================================================
# WORKFLOW
# ============================================================

class ApplicationWorkflowService:
    """
    Applications: create, status/round transitions, attendance, delete.

    Notifications are written after the SQL transaction commits; a MongoDB
    failure there is logged and does not undo the committed transition.
    """

    def __init__(self, notifications: NotificationService = None):
        self.notifications = notifications or NotificationService()

    def _notify(self, student_id: int, title: str, message: str) -> None:
        try:
            self.notifications.notify_student(student_id, title, message)
        except PyMongoError:
            logger.exception("Failed to store notification for student %s", student_id)

    @staticmethod
    def _load(db: Session, application_id: int) -> Application:
        application = db.get(Application, application_id)
        if not application:
            raise NotFound("Application not found")
        return application

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def get(self, application_id: int) -> Application:
        with get_db_session() as db:
            return self._load(db, application_id)

    def list_all(self) -> List[Application]:
        with get_db_session() as db:
            return db.query(Application).order_by(Application.created_at.desc()).all()

    def list_for_student(self, student_id: int) -> List[Application]:
        with get_db_session() as db:
            return (
                db.query(Application)
                .filter(Application.student_id == student_id)
                .order_by(Application.created_at.desc())
                .all()
            )

    def list_for_drive(self, drive_id: int, student_id: int = None) -> List[Application]:
        with get_db_session() as db:
            query = db.query(Application).filter(Application.drive_id == drive_id)
            if student_id is not None:
                query = query.filter(Application.student_id == student_id)
            return query.order_by(Application.created_at).all()

    # ------------------------------------------------------------
    # Apply
    # ------------------------------------------------------------

    def apply(self, student_id: int, drive_id: int, resume_url: str = None) -> Application:
        """
        Create an application. Checks run in order and the first failure wins:
        already applied, drive exists, student exists, branch, percentage, deadline.
        """
        try:
            with unit_of_work() as db:
                existing = (
                    db.query(Application.id)
                    .filter(Application.student_id == student_id, Application.drive_id == drive_id)
                    .first()
                )
                if existing:
                    raise StateConflict("Already applied to this drive", "ALREADY_APPLIED")

                drive = db.get(PlacementDrive, drive_id)
                if not drive:
                    raise NotFound("Placement drive not found", "DRIVE_NOT_FOUND")

                student = db.get(Student, student_id)
                if not student:
                    raise NotFound("Student not found", "STUDENT_NOT_FOUND")

                failure = check_eligibility(student, drive)
                if failure:
                    code, message = failure
                    logger.info("Student %s cannot apply to drive %s: %s", student_id, drive_id, code)
                    raise StateConflict(message, code)

                application = Application(
                    student_id=student_id,
                    drive_id=drive_id,
                    status=ApplicationStatus.applied.value,
                    is_present=True,
                    current_round=0,
                    resume_url=resume_url or student.resume,
                )
                db.add(application)
                db.flush()
        except IntegrityError as e:
            # Lost a race against a concurrent apply for the same pair
            raise StateConflict("Already applied to this drive", "ALREADY_APPLIED") from e

        logger.info("Application %s created: student=%s drive=%s", application.id, student_id, drive_id)
        return application

    # ------------------------------------------------------------
    # Status / round transition
    # ------------------------------------------------------------

    def _apply_round(self, db: Session, application: Application, round_value: int) -> None:
        """Set the round; widen the drive's round count if this passes the drive's max."""
        max_round = (
            db.query(func.max(Application.current_round))
            .filter(Application.drive_id == application.drive_id)
            .scalar()
        ) or 0

        if round_value > max_round:
            drive = application.drive
            widened = max(drive.number_of_rounds, round_value + 1)
            if widened != drive.number_of_rounds:
                logger.info(
                    "Drive %s rounds raised %d -> %d by application %s",
                    drive.id, drive.number_of_rounds, widened, application.id
                )
                drive.number_of_rounds = widened

        application.current_round = round_value

    def update_status(self, application_id: int, status: ApplicationStatus = None,
                      current_round=None, next_round_date: datetime = None) -> Application:
        """
        Admin status/round update.

        Raises:
            NotFound                        application missing
            StateConflict(ABSENT_STUDENT)   application marked absent
            StateConflict(INVALID_ROUND_UPDATE)
                                            round given with applied/rejected status
        """
        if status is None and current_round is None:
            raise ValidationFailed("No fields to update", "NOTHING_TO_UPDATE")

        status = ApplicationStatus(status) if status is not None else None
        round_value = parse_round(current_round) if current_round is not None else None
        if round_value is not None and round_value < 0:
            raise ValidationFailed("current_round must be >= 0")

        with unit_of_work() as db:
            application = self._load(db, application_id)

            if not application.is_present:
                logger.warning("Rejected status update for absent application %s", application_id)
                raise StateConflict("Cannot update status for absent students", "ABSENT_STUDENT")

            if round_value is not None and status is not None and status not in ROUND_STATUSES:
                raise StateConflict(
                    "Round updates only allowed for shortlisted or selected students",
                    "INVALID_ROUND_UPDATE",
                )

            previous_status = application.status

            if round_value is not None:
                self._apply_round(db, application, round_value)

            if status is not None:
                application.status = status.value
                if status == ApplicationStatus.shortlisted and next_round_date:
                    application.next_round_date = next_round_date

            if ApplicationStatus.selected in (previous_status, application.status):
                db.flush()
                refresh_placement(db, application.student)

            company_name = application.drive.company_name

        logger.info(
            "Application %s: %s -> %s (round %s)",
            application_id, previous_status, application.status, application.current_round
        )

        if status is not None:
            title, message = status_update_message(status, company_name, application.current_round)
            self._notify(application.student_id, title, message)

        return application

    def override_round(self, application_id: int, current_round) -> Application:
        """
        Supervised admin round correction. Skips the status rule but keeps the
        absent check and the drive round widening.
        """
        round_value = parse_round(current_round)
        if round_value < 0:
            raise ValidationFailed("current_round must be >= 0")

        with unit_of_work() as db:
            application = self._load(db, application_id)
            if not application.is_present:
                raise StateConflict("Cannot update round for absent students", "ABSENT_STUDENT")
            self._apply_round(db, application, round_value)

        logger.warning("Admin round override: application %s set to round %d", application_id, round_value)
        return application

    def replace_resume(self, application_id: int, resume_url: str) -> Application:
        """Point the application at a newly uploaded resume. Status and round are untouched."""
        with unit_of_work() as db:
            application = self._load(db, application_id)
            application.resume_url = resume_url

        logger.info("Application %s resume replaced", application_id)
        return application

    # ------------------------------------------------------------
    # Attendance
    # ------------------------------------------------------------

    def mark_attendance(self, application_id: int, is_present: bool) -> Application:
        """
        present -> absent forces status to rejected and notifies the student.
        absent -> present only flips the flag.
        """
        with unit_of_work() as db:
            application = self._load(db, application_id)
            marked_absent = application.is_present and not is_present
            application.is_present = is_present

            if marked_absent:
                previous_status = application.status
                application.status = ApplicationStatus.rejected.value
                if previous_status == ApplicationStatus.selected:
                    db.flush()
                    refresh_placement(db, application.student)

            company_name = application.drive.company_name

        if marked_absent:
            logger.info("Application %s marked absent, status forced to rejected", application_id)
            title, message = absence_message(company_name)
            self._notify(application.student_id, title, message)

        return application

    # ------------------------------------------------------------
    # Delete / repair
    # ------------------------------------------------------------

    def delete_application(self, application_id: int) -> None:
        with unit_of_work() as db:
            application = self._load(db, application_id)
            student = application.student
            was_selected = application.status == ApplicationStatus.selected
            db.delete(application)
            if was_selected:
                db.flush()
                refresh_placement(db, student)

        logger.info("Application %s deleted", application_id)

    def resync_student(self, student_id: int) -> Student:
        """Recompute a student's placement fields from their applications."""
        with unit_of_work() as db:
            student = db.get(Student, student_id)
            if not student:
                raise NotFound("Student not found", "STUDENT_NOT_FOUND")
            refresh_placement(db, student)
        return student


def get_workflow_service() -> ApplicationWorkflowService:
    return ApplicationWorkflowService()
