"""
Student Routes

PUT /students/profile - Update own profile (student)
GET /students - List all students (admin)
GET /students/statistics - Placement statistics (admin)
GET /students/{usn} - Get student by USN (admin)
PUT /students/{usn}/placement-status - Mark placed / not placed (admin)
PUT /students/{usn}/update - Update any student field (admin)
"""

from fastapi import APIRouter, Depends, HTTPException

from placement_portal.core.auth import get_current_admin, get_current_student
from placement_portal.core.errors import not_found
from placement_portal.schemas.schemas import (
    PlacementStatusUpdate, StatisticsResponse, StudentAdminUpdate,
    StudentListResponse, StudentProfile, StudentProfileUpdate, StudentResponse,
)
from placement_portal.services.mongo_service import (
    NoticeService, UserService, get_notice_service, get_user_service, to_student,
)
from placement_portal.services.placement_service import describe_transition, placement_patch
from placement_portal.services.statistics_service import compute_statistics
from placement_portal.services.validation_service import validate_profile_update

router = APIRouter(prefix="/students", tags=["Students"])

PLACEMENT_FIELDS = ("placement_status", "placed_company")


def _apply_update(users: UserService, usn: str, patch: dict) -> StudentProfile:
    updated = users.update_student(usn, patch)
    if not updated:
        raise not_found("Student")
    return to_student(updated)


def _load_student(users: UserService, usn: str) -> StudentProfile:
    doc = users.find_student(usn)
    if not doc:
        raise not_found("Student")
    return to_student(doc)


@router.put("/profile", response_model=StudentResponse)
async def update_profile(
    data: StudentProfileUpdate,
    student: StudentProfile = Depends(get_current_student),
    users: UserService = Depends(get_user_service),
):
    """Update own profile. Only provided fields are updated."""
    fields = data.model_dump(exclude_none=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    error = validate_profile_update(fields)
    if error:
        raise error

    updated = _apply_update(users, student.usn, fields)
    return StudentResponse(message="Profile updated successfully", student=updated)


@router.get("", response_model=StudentListResponse)
async def list_students(
    admin: dict = Depends(get_current_admin),
    users: UserService = Depends(get_user_service),
):
    """All students, most recently registered first."""
    students = [to_student(doc) for doc in users.list_students()]
    return StudentListResponse(count=len(students), students=students)


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    admin: dict = Depends(get_current_admin),
    users: UserService = Depends(get_user_service),
    notices: NoticeService = Depends(get_notice_service),
):
    """Placement rate, per-company placements, average package, job-type mix."""
    students = [to_student(doc) for doc in users.list_students()]
    return StatisticsResponse(statistics=compute_statistics(students, notices.list_all()))


@router.get("/{usn}", response_model=StudentResponse)
async def get_student(
    usn: str,
    admin: dict = Depends(get_current_admin),
    users: UserService = Depends(get_user_service),
):
    """Look up a student by USN (case-insensitive)."""
    return StudentResponse(student=_load_student(users, usn))


@router.put("/{usn}/placement-status", response_model=StudentResponse)
async def update_placement_status(
    usn: str,
    data: PlacementStatusUpdate,
    admin: dict = Depends(get_current_admin),
    users: UserService = Depends(get_user_service),
):
    """Mark a student as Placed (company required) or Not Placed."""
    student = _load_student(users, usn)
    patch = placement_patch(student, data.placement_status, data.placed_company)
    updated = _apply_update(users, usn, patch)
    return StudentResponse(message=describe_transition(updated.usn, patch), student=updated)


@router.put("/{usn}/update", response_model=StudentResponse)
async def update_student(
    usn: str,
    data: StudentAdminUpdate,
    admin: dict = Depends(get_current_admin),
    users: UserService = Depends(get_user_service),
):
    """Admin update of profile fields and, optionally, placement status."""
    fields = data.model_dump(exclude_none=True, exclude=set(PLACEMENT_FIELDS))
    error = validate_profile_update(fields)
    if error:
        raise error

    if data.placement_status is not None:
        student = _load_student(users, usn)
        fields.update(placement_patch(student, data.placement_status, data.placed_company))

    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = _apply_update(users, usn, fields)
    return StudentResponse(message="Student details updated successfully", student=updated)
