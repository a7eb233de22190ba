"""
MongoDB Service - CRUD operations for the portal's collections.

Collections in this database:
1. users    - Students (role=student, keyed by usn) and admins (role=admin, keyed by username)
2. notices  - Placement notices with targeting criteria

Any pymongo failure is re-raised as StoreUnavailableError; the core never
retries, callers decide.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from placement_portal.core.errors import ErrorCode, PortalError, StoreUnavailableError
from placement_portal.db.mongodb import COLLECTIONS, get_collection
from placement_portal.schemas.schemas import Notice, StudentProfile, UserRole

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict (`_id` -> `id`)."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


@contextmanager
def store_errors(operation: str):
    """Translate pymongo failures into StoreUnavailableError."""
    try:
        yield
    except DuplicateKeyError as e:
        key = next(iter((e.details or {}).get("keyValue") or {}), "")
        if key == "email":
            raise PortalError(ErrorCode.duplicate_email, "Email is already in use") from e
        raise PortalError(ErrorCode.duplicate_identifier, "Student with this USN already exists") from e
    except PyMongoError as e:
        logger.error("MongoDB %s failed: %s", operation, e)
        raise StoreUnavailableError() from e


def to_student(doc: Optional[dict]) -> Optional[StudentProfile]:
    if doc is None:
        return None
    return StudentProfile.model_validate(doc)


def to_notice(doc: Optional[dict]) -> Optional[Notice]:
    if doc is None:
        return None
    return Notice.model_validate(doc)


# ============================================================
# USERS COLLECTION
# Students and admins share one collection
# ============================================================

class UserService:
    """
    Handles student and admin account storage.
    Returned documents are serialized (`id` string instead of `_id`).
    """

    def __init__(self, collection: Optional[Collection] = None):
        self.collection: Collection = collection if collection is not None else get_collection(COLLECTIONS["users"])

    def find_one(self, query: Dict[str, Any]) -> Optional[dict]:
        """Fetch any single user document matching `query`."""
        with store_errors("find_one"):
            doc = self.collection.find_one(query)
        return serialize_doc(doc)

    def find_by_id(self, user_id: str) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.find_one({"_id": oid})

    def find_student(self, usn: str) -> Optional[dict]:
        """Fetch a student by USN (case-insensitive)."""
        return self.find_one({"usn": usn.strip().upper(), "role": UserRole.student.value})

    def find_admin(self, username: str) -> Optional[dict]:
        return self.find_one({"username": username, "role": UserRole.admin.value})

    def list_students(self) -> List[dict]:
        """All students, most recently registered first."""
        with store_errors("find"):
            cursor = self.collection.find(
                {"role": UserRole.student.value},
                projection={"password_hash": False},
                sort=[("created_at", DESCENDING)],
            )
            return serialize_docs(list(cursor))

    def insert(self, doc: dict) -> str:
        """
        Insert a user document.

        Returns:
            MongoDB ObjectId as string
        """
        with store_errors("insert_one"):
            result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def update_student(self, usn: str, patch: Dict[str, Any]) -> Optional[dict]:
        """Apply `patch` to a student; returns the updated document or None."""
        with store_errors("find_one_and_update"):
            doc = self.collection.find_one_and_update(
                {"usn": usn.strip().upper(), "role": UserRole.student.value},
                {"$set": patch},
                return_document=ReturnDocument.AFTER,
            )
        return serialize_doc(doc)

    def update_by_id(self, user_id: str, patch: Dict[str, Any]) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        with store_errors("find_one_and_update"):
            doc = self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": patch},
                return_document=ReturnDocument.AFTER,
            )
        return serialize_doc(doc)


# ============================================================
# NOTICES COLLECTION
# ============================================================

class NoticeService:
    """
    Handles notice storage. Notices are create/delete only.
    """

    def __init__(self, collection: Optional[Collection] = None):
        self.collection: Collection = collection if collection is not None else get_collection(COLLECTIONS["notices"])

    def insert(self, notice: Notice) -> Notice:
        """Store a validated notice and return it with its id."""
        doc = notice.model_dump(mode="json", exclude={"id"})
        doc["created_at"] = notice.created_at  # keep a BSON date, not an ISO string
        with store_errors("insert_one"):
            result = self.collection.insert_one(doc)
        return notice.model_copy(update={"id": str(result.inserted_id)})

    def list_all(self) -> List[Notice]:
        """All notices, newest first."""
        with store_errors("find"):
            cursor = self.collection.find({}, sort=[("created_at", DESCENDING)])
            return [to_notice(serialize_doc(doc)) for doc in cursor]

    def delete(self, notice_id: str) -> bool:
        oid = to_object_id(notice_id)
        if oid is None:
            return False
        with store_errors("delete_one"):
            result = self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0


# ============================================================
# FASTAPI DEPENDENCIES
# ============================================================

def get_user_service() -> UserService:
    """Get user service instance."""
    return UserService()


def get_notice_service() -> NoticeService:
    """Get notice service instance."""
    return NoticeService()
