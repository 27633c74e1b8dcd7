"""
PlacementDrive model - a company's recruiting event.

company_name is a denormalized copy of Company.name for join-free reads;
company renames fan out to it (see company_service).
number_of_rounds may be raised by the application workflow, never lowered by it.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.db.postgres import Base


class PlacementDrive(Base):
    __tablename__ = "placement_drives"

    id = Column(Integer, primary_key=True)

    # ============ COMPANY ============
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    company_name = Column(String(200), nullable=False)

    # ============ ROLE ============
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)

    # ============ ELIGIBILITY ============
    eligible_branches = Column(JSON, nullable=False, default=list)
    minimum_percentage = Column(Float, nullable=False)

    # ============ COMPENSATION ============
    ctc_min = Column(Float, nullable=False)
    ctc_max = Column(Float, nullable=False)

    # ============ PROCESS ============
    number_of_rounds = Column(Integer, nullable=False, default=1)
    application_link = Column(String(512))
    drive_date = Column(DateTime, nullable=False)
    last_date_to_apply = Column(DateTime, nullable=False, index=True)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    company = relationship("Company", back_populates="drives")
    applications = relationship(
        "Application", back_populates="drive", cascade="all, delete-orphan"
    )

    @property
    def ctc_range(self) -> dict:
        return {"min": self.ctc_min, "max": self.ctc_max}

    def __repr__(self):
        return f"<PlacementDrive(id={self.id}, company={self.company_name}, title={self.title})>"
