#!/usr/bin/env python3
"""
Placement Resync Script

Re-derives is_placed / placed_companies / selected_count for every student
from their selected applications. Safe to run any number of times.
Usage: python scripts/resync_placements.py
"""
import sys
sys.path.insert(0, '.')

from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.db.postgres import get_db_session
from app.models import Student
from app.services.application_service import get_workflow_service


def main():
    configure_logging(get_settings().log_level)

    with get_db_session() as db:
        student_ids = [row[0] for row in db.query(Student.id).order_by(Student.id)]

    workflow = get_workflow_service()
    print(f"Resyncing {len(student_ids)} students...")
    for student_id in student_ids:
        student = workflow.resync_student(student_id)
        print(f"  {student.roll_number}: placed={student.is_placed} companies={student.placed_companies}")
    print("Done.")


if __name__ == "__main__":
    main()
