"""
Student model - profile plus placement state.

Placement fields (is_placed, placed_companies, selected_count) are written only
by the application workflow; profile endpoints touch identity fields only.
Invariant kept by the workflow: is_placed == bool(placed_companies).
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.db.postgres import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    # ============ PROFILE ============
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    roll_number = Column(String(50), unique=True, nullable=False, index=True)
    mobile_number = Column(String(20))
    branch = Column(String(50), nullable=False, index=True)
    percentage = Column(Float, nullable=False)
    resume = Column(String(512))  # local path under the upload dir

    # ============ PLACEMENT STATE ============
    is_placed = Column(Boolean, nullable=False, default=False)
    placed_companies = Column(JSON, nullable=False, default=list)  # ordered company names
    selected_count = Column(Integer, nullable=False, default=0)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    user = relationship("User", back_populates="student")
    applications = relationship(
        "Application", back_populates="student", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Student(id={self.id}, roll={self.roll_number}, placed={self.is_placed})>"
