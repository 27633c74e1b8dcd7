"""
SQLAlchemy models for the placement portal.

This package contains:
- User: login identity (admin or student)
- Student: profile + placement state, owned by a student user
- Company: recruiting company reference data
- PlacementDrive: a company's recruiting event with eligibility rules
- Application: one student's candidacy for one drive (the workflow entity)

Notifications, events and resume scores are MongoDB documents, see app.db.mongodb.
"""

from app.models.user import User
from app.models.student import Student
from app.models.company import Company
from app.models.placement_drive import PlacementDrive
from app.models.application import Application

__all__ = ["User", "Student", "Company", "PlacementDrive", "Application"]
