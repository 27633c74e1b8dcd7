"""
Drive Service - placement drives and their calendar events.

A drive and its event move together:
- create drive  -> create "<company> Placement Drive" event
- update drive  -> push title/date changes onto the event
- delete drive  -> delete its applications (SQL, one transaction) and its event
"""

import logging
from typing import List, Optional

from app.core.exceptions import NotFound, ValidationFailed
from app.db.postgres import get_db_session
from app.models import Application, Company, PlacementDrive, Student
from app.schemas.schemas import ApplicationStatus, DriveCreate, DriveUpdate
from app.services.application_service import check_eligibility, refresh_placement, unit_of_work
from app.services.event_service import EventService

logger = logging.getLogger(__name__)


class DriveService:

    def __init__(self, events: EventService = None):
        self.events = events or EventService()

    def list(self) -> List[PlacementDrive]:
        with get_db_session() as db:
            return db.query(PlacementDrive).order_by(PlacementDrive.drive_date).all()

    def get(self, drive_id: int) -> PlacementDrive:
        with get_db_session() as db:
            drive = db.get(PlacementDrive, drive_id)
            if not drive:
                raise NotFound("Placement drive not found", "DRIVE_NOT_FOUND")
            return drive

    def create(self, data: DriveCreate) -> PlacementDrive:
        with get_db_session() as db:
            company = db.get(Company, data.company_id)
            if not company:
                raise NotFound("Company not found", "COMPANY_NOT_FOUND")

            drive = PlacementDrive(
                company_id=company.id,
                company_name=company.name,
                title=data.title,
                description=data.description,
                requirements=data.requirements,
                eligible_branches=[b.value for b in data.eligible_branches],
                minimum_percentage=data.minimum_percentage,
                ctc_min=data.ctc_range.min,
                ctc_max=data.ctc_range.max,
                number_of_rounds=data.number_of_rounds,
                application_link=data.application_link,
                drive_date=data.drive_date,
                last_date_to_apply=data.last_date_to_apply,
            )
            db.add(drive)

        self.events.create_for_drive(drive.id, drive.company_name, drive.title, drive.drive_date)
        logger.info("Drive %s created for %s", drive.id, drive.company_name)
        return drive

    def update(self, drive_id: int, data: DriveUpdate) -> PlacementDrive:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        with unit_of_work() as db:
            drive = db.get(PlacementDrive, drive_id)
            if not drive:
                raise NotFound("Placement drive not found", "DRIVE_NOT_FOUND")

            if "eligible_branches" in changes:
                drive.eligible_branches = [b.value for b in data.eligible_branches]
            if "ctc_range" in changes:
                drive.ctc_min = data.ctc_range.min
                drive.ctc_max = data.ctc_range.max
            for field in ["title", "description", "requirements", "minimum_percentage",
                          "number_of_rounds", "application_link", "drive_date", "last_date_to_apply"]:
                if field in changes:
                    setattr(drive, field, getattr(data, field))

            if drive.last_date_to_apply > drive.drive_date:
                raise ValidationFailed("last_date_to_apply must be on or before drive_date")

        self.events.sync_drive(
            drive.id,
            title=changes.get("title"),
            drive_date=changes.get("drive_date"),
        )
        return drive

    def delete(self, drive_id: int) -> None:
        with unit_of_work() as db:
            drive = db.get(PlacementDrive, drive_id)
            if not drive:
                raise NotFound("Placement drive not found", "DRIVE_NOT_FOUND")

            affected: List[Student] = [
                app.student for app in drive.applications
                if app.status == ApplicationStatus.selected
            ]
            removed = len(drive.applications)
            db.delete(drive)  # applications cascade
            db.flush()
            for student in affected:
                refresh_placement(db, student)

        self.events.delete_for_drive(drive_id)
        logger.info("Drive %s deleted with %d applications", drive_id, removed)

    def eligibility(self, drive_id: int, student_id: int) -> Optional[tuple]:
        """(code, message) of the first failed rule, or None when the student may apply."""
        with get_db_session() as db:
            drive = db.get(PlacementDrive, drive_id)
            if not drive:
                raise NotFound("Placement drive not found", "DRIVE_NOT_FOUND")
            student = db.get(Student, student_id)
            if not student:
                raise NotFound("Student not found", "STUDENT_NOT_FOUND")

            already = (
                db.query(Application.id)
                .filter(Application.student_id == student_id, Application.drive_id == drive_id)
                .first()
            )
            if already:
                return "ALREADY_APPLIED", "Already applied to this drive"
            return check_eligibility(student, drive)


def get_drive_service() -> DriveService:
    return DriveService()
