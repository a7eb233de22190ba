"""
Validation Service - field-level invariants for students and notices.

Every validator here RETURNS an error instead of raising:
    error = validate_notice(...)
    if error:
        raise error

Checks run in a fixed order and the first failure wins, so the same bad
input always produces the same error code.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional

from placement_portal.core.errors import ErrorCode, PortalError
from placement_portal.schemas.schemas import (
    MAX_CGPA, MAX_SEMESTER, MIN_CGPA, MIN_SEMESTER,
    Branch, PlacementStatus, UserRole, utcnow,
)
from placement_portal.utils.usn import parse_usn


BRANCH_VALUES = {b.value for b in Branch}


# ============================================================
# SHARED FIELD CHECKS
# ============================================================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_semester(semester: Any) -> Optional[PortalError]:
    in_range = _is_number(semester) and MIN_SEMESTER <= semester <= MAX_SEMESTER
    if not in_range or not float(semester).is_integer():
        return PortalError(
            ErrorCode.semester_out_of_range,
            f"Semester must be between {MIN_SEMESTER} and {MAX_SEMESTER}",
        )
    return None


def check_cgpa(cgpa: Any) -> Optional[PortalError]:
    if not _is_number(cgpa) or not MIN_CGPA <= cgpa <= MAX_CGPA:
        return PortalError(
            ErrorCode.cgpa_out_of_range,
            f"CGPA must be between {MIN_CGPA:g} and {MAX_CGPA:g}",
        )
    return None


def check_branch(branch: Any) -> Optional[PortalError]:
    value = branch.value if isinstance(branch, Branch) else branch
    if value not in BRANCH_VALUES:
        return PortalError(ErrorCode.unknown_branch, f"Unknown branch: {value}")
    return None


def check_email_matches_usn(email: str, usn: str) -> Optional[PortalError]:
    if usn.lower() not in (email or "").lower():
        return PortalError(ErrorCode.email_mismatch, "Email must include your USN")
    return None


# ============================================================
# PROFILE VALIDATOR
# ============================================================

def validate_registration(
    usn: str,
    email: str,
    semester: Any,
    branch: Any,
    cgpa: Optional[float] = None,
) -> Optional[PortalError]:
    """Validate a new student registration (uniqueness is checked separately)."""
    try:
        parsed = parse_usn(usn)
    except PortalError as e:
        return e

    return (
        check_email_matches_usn(email, parsed.usn)
        or check_semester(semester)
        or check_branch(branch)
        or (check_cgpa(cgpa) if cgpa is not None else None)
    )


def validate_uniqueness(
    usn: str,
    email: str,
    lookup: Callable[[Dict[str, Any]], Optional[dict]],
) -> Optional[PortalError]:
    """
    Check USN and email are not already registered.

    Args:
        lookup: store query taking a filter dict, returning a document or None
                (e.g. UserService.find_one)
    """
    if lookup({"usn": usn.strip().upper()}):
        return PortalError(ErrorCode.duplicate_identifier, "Student with this USN already exists")
    if lookup({"email": email.strip().lower()}):
        return PortalError(ErrorCode.duplicate_email, "Email is already in use")
    return None


def validate_profile_update(fields: Dict[str, Any]) -> Optional[PortalError]:
    """
    Validate a partial profile update.

    Only keys present in `fields` (and not None) are checked; the rest of the
    stored profile is left untouched.
    """
    present = {k: v for k, v in fields.items() if v is not None}

    if "usn" in present:
        try:
            parsed = parse_usn(present["usn"])
        except PortalError as e:
            return e
        if "email" in present:
            error = check_email_matches_usn(present["email"], parsed.usn)
            if error:
                return error
    if "semester" in present:
        error = check_semester(present["semester"])
        if error:
            return error
    if "cgpa" in present:
        error = check_cgpa(present["cgpa"])
        if error:
            return error
    if "branch" in present:
        error = check_branch(present["branch"])
        if error:
            return error
    return None


def build_student_document(
    usn: str,
    email: str,
    password_hash: str,
    semester: int,
    branch: Any,
    name: Optional[str] = None,
    cgpa: Optional[float] = None,
    dob: Optional[datetime] = None,
) -> dict:
    """
    Build the stored document for a validated registration.

    `year` is always recomputed from the USN here; nothing the caller passes
    can override it.
    """
    parsed = parse_usn(usn)
    return {
        "role": UserRole.student.value,
        "usn": parsed.usn,
        "email": email.strip().lower(),
        "password_hash": password_hash,
        "name": name,
        "dob": dob,
        "semester": int(semester),
        "branch": Branch(branch).value,
        "year": parsed.enrollment_year,
        "cgpa": float(cgpa) if cgpa is not None else 0.0,
        "placement_status": PlacementStatus.not_placed.value,
        "placed_company": None,
        "created_at": utcnow(),
    }


# ============================================================
# NOTICE VALIDATOR
# ============================================================

def validate_notice(
    target_semesters: Optional[Iterable[Any]],
    target_branches: Optional[Iterable[Any]],
    min_cgpa: Optional[float] = None,
    max_cgpa: Optional[float] = None,
    required_fields: Optional[Dict[str, Any]] = None,
) -> Optional[PortalError]:
    """
    Validate a notice's targeting criteria and required fields.

    Args:
        required_fields: text fields that must be non-blank, by name
                         (company_name, description, link, package_offered on create)

    Omitted min/max CGPA mean "no restriction" (0 and 10) and are valid.
    """
    for field, value in (required_fields or {}).items():
        if value is None or not str(value).strip():
            return PortalError(ErrorCode.missing_field, f"{field} is required")

    semesters = list(target_semesters or [])
    branches = list(target_branches or [])
    if not semesters:
        return PortalError(ErrorCode.empty_target_set, "At least one target semester is required")
    if not branches:
        return PortalError(ErrorCode.empty_target_set, "At least one target branch is required")

    for semester in semesters:
        if check_semester(semester):
            return PortalError(
                ErrorCode.semester_out_of_range,
                f"Target semesters must be between {MIN_SEMESTER} and {MAX_SEMESTER}",
            )
    for branch in branches:
        error = check_branch(branch)
        if error:
            return error

    low = MIN_CGPA if min_cgpa is None else min_cgpa
    high = MAX_CGPA if max_cgpa is None else max_cgpa
    if not (_is_number(low) and _is_number(high)):
        return PortalError(ErrorCode.cgpa_range_invalid, "CGPA bounds must be numbers")
    if not (MIN_CGPA <= low <= MAX_CGPA and MIN_CGPA <= high <= MAX_CGPA):
        return PortalError(
            ErrorCode.cgpa_range_invalid,
            f"CGPA bounds must be between {MIN_CGPA:g} and {MAX_CGPA:g}",
        )
    if low > high:
        return PortalError(ErrorCode.cgpa_range_invalid, "Minimum CGPA cannot exceed maximum CGPA")
    return None
