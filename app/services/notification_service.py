"""
Notification Service - audience resolution and read receipts.

Audience is resolved lazily at read time from the `recipients` field:
    "all"        every user
    "placed"     students whose is_placed is True
    "unplaced"   students whose is_placed is False
    [ids, ...]   the listed student ids
Admins see every notification unfiltered.

`read` holds user ids and behaves as a set ($addToSet), so marking twice is a no-op.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple, Union

from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from app.core.exceptions import NotFound
from app.db.mongodb import get_collection, COLLECTIONS
from app.schemas.schemas import ApplicationStatus
from app.services.mongo_service import serialize_doc, serialize_docs, parse_object_id

logger = logging.getLogger(__name__)


# ============================================================
# MESSAGE TEMPLATES
# ============================================================

def status_update_message(status: str, company_name: str, current_round: int = 0) -> Tuple[str, str]:
    """Title and message sent to a student when an admin changes their status."""
    title = f"Application Status Update - {company_name}"
    if status == ApplicationStatus.selected:
        message = (
            f"Congratulations! You have been selected for Round {current_round or 0} "
            f"of {company_name}'s placement drive."
        )
    elif status == ApplicationStatus.shortlisted:
        message = f"You have been shortlisted for {company_name}'s placement drive."
    elif status == ApplicationStatus.rejected:
        message = (
            f"We regret to inform you that your application for {company_name}'s "
            f"placement drive has been rejected."
        )
    else:
        status_value = getattr(status, "value", status)
        message = (
            f"Your application status for {company_name}'s placement drive "
            f"has been updated to {status_value}."
        )
    return title, message


def absence_message(company_name: str) -> Tuple[str, str]:
    return (
        f"Attendance Update - {company_name}",
        f"You were marked absent for {company_name}'s placement drive. "
        f"Your application has been rejected.",
    )


# ============================================================
# NOTIFICATIONS COLLECTION
# ============================================================

class NotificationService:
    """
    Handles notification documents.

    Viewer arguments are the dict produced by app.core.auth.get_current_user
    plus the viewer's current placement flag (None for admins).
    """

    def __init__(self, collection: Collection = None):
        if collection is None:
            collection = get_collection(COLLECTIONS["notifications"])
        self.collection = collection

    def create(self, title: str, message: str, recipients: Union[str, List[int]]) -> dict:
        doc = {
            "title": title,
            "message": message,
            "recipients": recipients,
            "read": [],
            "created_at": datetime.utcnow(),
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Notification %s created for recipients=%s", result.inserted_id, recipients)
        return serialize_doc(doc)

    def notify_student(self, student_id: int, title: str, message: str) -> dict:
        return self.create(title, message, [student_id])

    def audience_filter(self, user: dict, is_placed: Optional[bool]) -> dict:
        """Mongo filter selecting the notifications this viewer may see."""
        if user["role"] == "admin":
            return {}
        clauses = [{"recipients": "all"}]
        # no student profile: only broadcasts to everyone apply
        if is_placed is not None:
            clauses.append({"recipients": "placed" if is_placed else "unplaced"})
        if user["student_id"] is not None:
            clauses.append({"recipients": user["student_id"]})
        return {"$or": clauses}

    def is_visible_to(self, doc: dict, user: dict, is_placed: Optional[bool]) -> bool:
        """Pure-Python mirror of audience_filter for a single document."""
        if user["role"] == "admin":
            return True
        recipients = doc.get("recipients")
        if recipients == "all":
            return True
        if recipients == "placed":
            return is_placed is True
        if recipients == "unplaced":
            return is_placed is False
        if isinstance(recipients, list):
            return user["student_id"] is not None and user["student_id"] in recipients
        return False

    def list_for(self, user: dict, is_placed: Optional[bool]) -> List[dict]:
        """Newest first."""
        cursor = self.collection.find(self.audience_filter(user, is_placed)).sort(
            [("created_at", DESCENDING), ("_id", DESCENDING)]
        )
        return serialize_docs(cursor)

    def mark_read(self, notification_id: str, user: dict, is_placed: Optional[bool]) -> dict:
        oid = parse_object_id(notification_id)
        doc = self.collection.find_one({"_id": oid})
        if not doc or not self.is_visible_to(doc, user, is_placed):
            raise NotFound("Notification not found")

        updated = self.collection.find_one_and_update(
            {"_id": oid},
            {"$addToSet": {"read": user["user_id"]}},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_doc(updated)

    def mark_all_read(self, user: dict, is_placed: Optional[bool]) -> int:
        """Add the viewer to `read` on every notification in their audience. Returns count changed."""
        query = self.audience_filter(user, is_placed)
        query["read"] = {"$ne": user["user_id"]}
        result = self.collection.update_many(query, {"$addToSet": {"read": user["user_id"]}})
        logger.info("User %s marked %d notifications read", user["user_id"], result.modified_count)
        return result.modified_count

    def delete(self, notification_id: str) -> None:
        result = self.collection.delete_one({"_id": parse_object_id(notification_id)})
        if result.deleted_count == 0:
            raise NotFound("Notification not found")


def get_notification_service() -> NotificationService:
    return NotificationService()
