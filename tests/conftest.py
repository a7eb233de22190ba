import copy
import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from placement_portal.core.auth import create_access_token
from placement_portal.main import app
from placement_portal.schemas.schemas import (
    Branch,
    JobType,
    Notice,
    PlacementStatus,
    StudentProfile,
    UserRole,
)
from placement_portal.services.mongo_service import get_notice_service, get_user_service

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeUserService:
    """In-memory stand-in for UserService with the same method surface."""

    def __init__(self):
        self.docs = {}
        self._ids = itertools.count(1)

    def _matches(self, doc, query):
        return all(doc.get(k) == v for k, v in query.items())

    def find_one(self, query):
        for doc in self.docs.values():
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find_by_id(self, user_id):
        doc = self.docs.get(user_id)
        return copy.deepcopy(doc) if doc else None

    def find_student(self, usn):
        return self.find_one({"usn": usn.strip().upper(), "role": UserRole.student.value})

    def find_admin(self, username):
        return self.find_one({"username": username, "role": UserRole.admin.value})

    def list_students(self):
        students = [
            {k: v for k, v in doc.items() if k != "password_hash"}
            for doc in self.docs.values()
            if doc["role"] == UserRole.student.value
        ]
        return sorted(students, key=lambda d: d["created_at"], reverse=True)

    def insert(self, doc):
        user_id = f"{next(self._ids):024x}"
        stored = copy.deepcopy(doc)
        stored.pop("_id", None)
        stored["id"] = user_id
        self.docs[user_id] = stored
        return user_id

    def update_student(self, usn, patch):
        doc = self.find_student(usn)
        if not doc:
            return None
        return self.update_by_id(doc["id"], patch)

    def update_by_id(self, user_id, patch):
        if user_id not in self.docs:
            return None
        self.docs[user_id].update(copy.deepcopy(patch))
        return copy.deepcopy(self.docs[user_id])


class FakeNoticeService:
    """In-memory stand-in for NoticeService."""

    def __init__(self):
        self.notices = {}
        self._ids = itertools.count(1)

    def insert(self, notice):
        saved = notice.model_copy(update={"id": f"{next(self._ids):024x}"})
        self.notices[saved.id] = saved
        return saved

    def list_all(self):
        return sorted(self.notices.values(), key=lambda n: n.created_at, reverse=True)

    def delete(self, notice_id):
        return self.notices.pop(notice_id, None) is not None


@pytest.fixture
def make_student():
    def _make(**overrides):
        data = {
            "id": "0" * 23 + "1",
            "usn": "1MS22CS154",
            "email": "1ms22cs154@college.edu",
            "semester": 6,
            "branch": Branch.cs,
            "cgpa": 7.5,
            "placement_status": PlacementStatus.not_placed,
            "placed_company": None,
            "created_at": BASE_TIME,
        }
        data.update(overrides)
        return StudentProfile(**data)

    return _make


@pytest.fixture
def make_notice():
    counter = itertools.count()

    def _make(**overrides):
        n = next(counter)
        data = {
            "company_name": f"Company {n}",
            "description": "Software engineering role",
            "link": "https://example.com/apply",
            "target_semesters": [6, 7],
            "target_branches": [Branch.cs, Branch.it],
            "target_year": 2026,
            "min_cgpa": 0.0,
            "max_cgpa": 10.0,
            "package_offered": "8 LPA",
            "job_type": JobType.full_time,
            "created_at": BASE_TIME + timedelta(days=n),
        }
        data.update(overrides)
        return Notice(**data)

    return _make


@pytest.fixture
def users():
    return FakeUserService()


@pytest.fixture
def notices():
    return FakeNoticeService()


@pytest.fixture
def client(users, notices):
    app.dependency_overrides[get_user_service] = lambda: users
    app.dependency_overrides[get_notice_service] = lambda: notices
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def student_doc(users):
    """A registered student stored in the fake users collection."""
    doc = {
        "role": UserRole.student.value,
        "usn": "1MS22CS154",
        "email": "1ms22cs154@college.edu",
        "password_hash": "unused",
        "name": "Asha",
        "semester": 6,
        "branch": Branch.cs.value,
        "year": 2022,
        "cgpa": 7.5,
        "placement_status": PlacementStatus.not_placed.value,
        "placed_company": None,
        "created_at": BASE_TIME,
    }
    user_id = users.insert(doc)
    return users.find_by_id(user_id)


@pytest.fixture
def admin_doc(users):
    user_id = users.insert({
        "role": UserRole.admin.value,
        "username": "admin",
        "email": "admin@placementportal.com",
        "password_hash": "unused",
        "created_at": BASE_TIME,
    })
    return users.find_by_id(user_id)


def bearer(doc):
    token = create_access_token({"sub": doc["id"], "role": doc["role"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student_headers(student_doc):
    return bearer(student_doc)


@pytest.fixture
def admin_headers(admin_doc):
    return bearer(admin_doc)
