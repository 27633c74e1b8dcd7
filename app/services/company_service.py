"""
Company Service - company records and the company_name copies on drives.

PlacementDrive.company_name is denormalized for join-free reads, so a rename
rewrites every referencing drive in the same transaction and then retitles
their calendar events.
"""

import logging
from typing import List

from sqlalchemy import select

from app.core.exceptions import NotFound, StateConflict
from app.db.postgres import get_db_session
from app.models import Application, Company, PlacementDrive, Student
from app.schemas.schemas import ApplicationStatus, CompanyCreate, CompanyUpdate
from app.services.application_service import refresh_placement, unit_of_work
from app.services.event_service import EventService

logger = logging.getLogger(__name__)


class CompanyService:

    def __init__(self, events: EventService = None):
        self.events = events or EventService()

    def list(self) -> List[Company]:
        with get_db_session() as db:
            return db.query(Company).order_by(Company.name).all()

    def get(self, company_id: int) -> Company:
        with get_db_session() as db:
            company = db.get(Company, company_id)
            if not company:
                raise NotFound("Company not found", "COMPANY_NOT_FOUND")
            return company

    def create(self, data: CompanyCreate) -> Company:
        with get_db_session() as db:
            company = Company(**data.model_dump())
            db.add(company)
        logger.info("Company %s created: %s", company.id, company.name)
        return company

    def update(self, company_id: int, data: CompanyUpdate) -> Company:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        renamed_drives = []

        with unit_of_work() as db:
            company = db.get(Company, company_id)
            if not company:
                raise NotFound("Company not found", "COMPANY_NOT_FOUND")

            new_name = changes.pop("name", "").strip()
            if new_name and new_name != company.name:
                old_name = company.name
                for drive in db.query(PlacementDrive).filter(PlacementDrive.company_id == company.id):
                    drive.company_name = new_name
                    renamed_drives.append(drive.id)
                company.name = new_name
                if renamed_drives:
                    db.flush()
                    self._rename_placements(db, renamed_drives, old_name, new_name)

            for field, value in changes.items():
                setattr(company, field, value)

        if renamed_drives:
            self.events.rename_company(renamed_drives, company.name)
            logger.info("Company %s renamed, %d drives updated", company_id, len(renamed_drives))
        return company

    @staticmethod
    def _rename_placements(db, drive_ids: List[int], old_name: str, new_name: str) -> None:
        """Swap the name in place on placed students, then re-derive their placement."""
        placed_ids = select(Application.student_id).where(
            Application.drive_id.in_(drive_ids),
            Application.status == ApplicationStatus.selected.value,
        )
        students = db.query(Student).filter(Student.id.in_(placed_ids)).all()
        for student in students:
            student.placed_companies = [
                new_name if name == old_name else name for name in (student.placed_companies or [])
            ]
            refresh_placement(db, student)

    def delete(self, company_id: int) -> None:
        with get_db_session() as db:
            company = db.get(Company, company_id)
            if not company:
                raise NotFound("Company not found", "COMPANY_NOT_FOUND")

            has_drives = db.query(PlacementDrive.id).filter(
                PlacementDrive.company_id == company_id
            ).first()
            if has_drives:
                raise StateConflict(
                    "Cannot delete company with associated placement drives. Delete the drives first.",
                    "COMPANY_HAS_DRIVES",
                )
            db.delete(company)


def get_company_service() -> CompanyService:
    return CompanyService()
