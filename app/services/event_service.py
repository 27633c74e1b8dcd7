"""
Event Service - calendar entries.

Events linked to a drive (drive_id set) are owned by the drive: they are
created, renamed and deleted together with it, and the calendar endpoints
refuse to edit or delete them.
"""

import logging
from datetime import datetime
from typing import List, Optional

from pymongo import ASCENDING
from pymongo.collection import Collection

from app.core.exceptions import NotFound, StateConflict
from app.db.mongodb import get_collection, COLLECTIONS
from app.services.mongo_service import serialize_doc, serialize_docs, parse_object_id

logger = logging.getLogger(__name__)


def drive_event_title(company_name: str) -> str:
    return f"{company_name} Placement Drive"


class EventService:

    def __init__(self, collection: Collection = None):
        if collection is None:
            collection = get_collection(COLLECTIONS["events"])
        self.collection = collection

    # ------------------------------------------------------------
    # Calendar (admin-managed standalone events)
    # ------------------------------------------------------------

    def list(self) -> List[dict]:
        return serialize_docs(self.collection.find({}).sort("date", ASCENDING))

    def get(self, event_id: str) -> dict:
        doc = self.collection.find_one({"_id": parse_object_id(event_id)})
        if not doc:
            raise NotFound("Event not found")
        return serialize_doc(doc)

    def create(self, title: str, date: datetime, description: str = None,
               drive_id: Optional[int] = None) -> dict:
        doc = {
            "title": title,
            "description": description,
            "date": date,
            "drive_id": drive_id,
            "created_at": datetime.utcnow(),
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def update(self, event_id: str, updates: dict) -> dict:
        event = self.get(event_id)
        if event.get("drive_id") is not None:
            raise StateConflict(
                "Drive events are managed from the placement drive", "DRIVE_MANAGED_EVENT"
            )
        if updates:
            self.collection.update_one({"_id": parse_object_id(event_id)}, {"$set": updates})
        return self.get(event_id)

    def delete(self, event_id: str) -> None:
        event = self.get(event_id)
        if event.get("drive_id") is not None:
            raise StateConflict(
                "Drive events are deleted with their placement drive", "DRIVE_MANAGED_EVENT"
            )
        self.collection.delete_one({"_id": parse_object_id(event_id)})

    # ------------------------------------------------------------
    # Drive lockstep
    # ------------------------------------------------------------

    def create_for_drive(self, drive_id: int, company_name: str, title: str,
                         drive_date: datetime) -> dict:
        event = self.create(
            title=drive_event_title(company_name),
            description=title,
            date=drive_date,
            drive_id=drive_id,
        )
        logger.info("Created calendar event %s for drive %s", event["id"], drive_id)
        return event

    def get_for_drive(self, drive_id: int) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"drive_id": drive_id}))

    def sync_drive(self, drive_id: int, company_name: str = None, title: str = None,
                   drive_date: datetime = None) -> None:
        """Push changed drive fields onto its event."""
        updates = {}
        if company_name is not None:
            updates["title"] = drive_event_title(company_name)
        if title is not None:
            updates["description"] = title
        if drive_date is not None:
            updates["date"] = drive_date
        if updates:
            self.collection.update_one({"drive_id": drive_id}, {"$set": updates})

    def rename_company(self, drive_ids: List[int], company_name: str) -> int:
        if not drive_ids:
            return 0
        result = self.collection.update_many(
            {"drive_id": {"$in": drive_ids}},
            {"$set": {"title": drive_event_title(company_name)}},
        )
        return result.modified_count

    def delete_for_drive(self, drive_id: int) -> None:
        self.collection.delete_many({"drive_id": drive_id})


def get_event_service() -> EventService:
    return EventService()
