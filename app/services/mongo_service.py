"""
MongoDB Service - shared helpers and the resume score collection.

Collections in this database:
1. notifications  - see notification_service
2. events         - see event_service
3. resume_scores  - per-student resume evaluation history (below)
"""

from datetime import datetime
from typing import Optional, List
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.collection import Collection

from app.core.exceptions import ValidationFailed
from app.db.mongodb import get_collection, COLLECTIONS


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict with a string `id`."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def parse_object_id(value: str) -> ObjectId:
    """Parse a path id, rejecting malformed ones as a caller error."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationFailed("Invalid ID format", "INVALID_ID")


# ============================================================
# RESUME SCORES COLLECTION
# ============================================================

SCORE_FIELDS = [
    "technical_score",
    "communication_score",
    "experience_score",
    "skills_score",
    "overall_score",
]


class ResumeScoreService:
    """
    Handles resume score storage.
    A student may be scored many times; the latest document wins.
    """

    def __init__(self, collection: Collection = None):
        if collection is None:
            collection = get_collection(COLLECTIONS["resume_scores"])
        self.collection = collection

    def insert(self, score: dict) -> dict:
        """Store a new score document and return it serialized."""
        doc = dict(score)
        doc["created_at"] = datetime.utcnow()
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def get_latest(self, student_id: int) -> Optional[dict]:
        """Fetch the most recent score for a student."""
        doc = self.collection.find_one(
            {"student_id": student_id},
            sort=[("created_at", DESCENDING), ("_id", DESCENDING)]  # Most recent first
        )
        return serialize_doc(doc)

    def get_history(self, student_id: int) -> List[dict]:
        cursor = self.collection.find({"student_id": student_id}).sort(
            [("created_at", DESCENDING), ("_id", DESCENDING)]
        )
        return serialize_docs(cursor)

    def get_averages(self) -> dict:
        """Average of every score dimension across all stored documents."""
        group = {"_id": None}
        for field in SCORE_FIELDS:
            group["avg_" + field.replace("_score", "")] = {"$avg": "$" + field}

        rows = list(self.collection.aggregate([{"$group": group}]))
        if not rows:
            return {"avg_" + field.replace("_score", ""): 0 for field in SCORE_FIELDS}

        row = rows[0]
        row.pop("_id", None)
        return {key: round(value or 0, 2) for key, value in row.items()}
