"""
MongoDB Connection Utility

MongoDB stores:
- users: student profiles and admin accounts (role field tells them apart)
- notices: placement notices with their targeting criteria

Eligibility is never stored; it is computed from these two collections
on every request.
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from placement_portal.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        settings = get_settings()
        # tz_aware so created_at comes back comparable with utcnow()
        _client = MongoClient(settings.mongodb_uri, tz_aware=True)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we use:
    - users: students and admins
    - notices: placement notices
    """
    db = get_mongo_db()
    return db[name]


def close_mongo_client() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


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
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "notices": "notices",
}


def init_mongo_indexes():
    """
    Create indexes for uniqueness and listing order.
    Call this once during app startup.
    """
    db = get_mongo_db()
    users = db[COLLECTIONS["users"]]

    # Students have usn, admins have username; sparse keeps the other role out
    users.create_index("usn", unique=True, sparse=True)
    users.create_index("email", unique=True)
    users.create_index("username", unique=True, sparse=True)
    users.create_index([("role", ASCENDING), ("created_at", DESCENDING)])

    # Newest-first listings
    db[COLLECTIONS["notices"]].create_index([("created_at", DESCENDING)])

    logger.info("MongoDB indexes created successfully")
