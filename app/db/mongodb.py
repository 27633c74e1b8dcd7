"""
MongoDB Connection Utility

MongoDB stores:
- Notifications (recipients is either a keyword or a list of student ids)
- Calendar events (some linked to a placement drive)
- Resume scores

WHY MongoDB for these?
- Schema-flexible: recipients changes shape per notification
- Append-only read receipts map directly to $addToSet
- No joins needed: each document is self-contained
"""
import logging

from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def set_mongo_client(client: MongoClient) -> None:
    """Swap the process-wide client (tests pass a mongomock client)."""
    global _client, _db
    _client = client
    _db = None


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection, see COLLECTIONS."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "notifications": "notifications",
    "events": "events",
    "resume_scores": "resume_scores"
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # Newest-first listing and audience lookups
    db[COLLECTIONS["notifications"]].create_index([("created_at", DESCENDING)])
    db[COLLECTIONS["notifications"]].create_index("recipients")

    # Calendar ordering and drive lockstep lookups
    db[COLLECTIONS["events"]].create_index([("date", ASCENDING)])
    db[COLLECTIONS["events"]].create_index("drive_id")

    db[COLLECTIONS["resume_scores"]].create_index([
        ("student_id", ASCENDING),
        ("created_at", DESCENDING)
    ])

    logger.info("MongoDB indexes created successfully")
