"""
Application model - one student's candidacy for one drive.

status: applied | shortlisted | rejected | selected
Once is_present is False the application is frozen for status/round changes.
"""

from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship

from app.db.postgres import Base


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    drive_id = Column(Integer, ForeignKey("placement_drives.id"), nullable=False)

    status = Column(String(20), nullable=False, default="applied")
    is_present = Column(Boolean, nullable=False, default=True)
    current_round = Column(Integer, nullable=False, default=0)
    resume_url = Column(String(512))
    next_round_date = Column(DateTime)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("student_id", "drive_id", name="uq_application_student_drive"),
        Index("ix_applications_drive_round", "drive_id", "current_round"),
    )

    student = relationship("Student", back_populates="applications")
    drive = relationship("PlacementDrive", back_populates="applications")

    def __repr__(self):
        return f"<Application(id={self.id}, student={self.student_id}, drive={self.drive_id}, status={self.status})>"
