"""
Campus Placement Portal
Placement drives, applications and multi-round hiring for a campus.

Architecture:
- SQL: Transactional records (users, students, companies, drives, applications)
- MongoDB: Documents (notifications, calendar events, resume scores)
"""

__version__ = "1.0.0"
