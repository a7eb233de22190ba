"""
Placement Service - the Not Placed / Placed state machine.

    Not Placed --mark_placed(company)--> Placed
    Placed     --mark_not_placed()-----> Not Placed   (admin override)

placed_company is set exactly when the status is Placed. Admin requests go
through apply_placement, which dispatches to these two transitions.
"""

import logging
from typing import Optional

from placement_portal.core.errors import ErrorCode, PortalError
from placement_portal.schemas.schemas import PlacementStatus, StudentProfile

logger = logging.getLogger(__name__)


def _require_company(company: Optional[str]) -> str:
    name = (company or "").strip()
    if not name:
        raise PortalError(
            ErrorCode.company_required,
            "Company name is required when marking a student as placed",
        )
    return name


def mark_placed(student: StudentProfile, company: Optional[str]) -> StudentProfile:
    """
    Move a student to Placed at `company`.

    Raises:
        PortalError(CompanyRequired) if company is empty or blank.
    """
    name = _require_company(company)
    logger.info("Marking %s as placed at %s", student.usn, name)
    return student.model_copy(
        update={"placement_status": PlacementStatus.placed, "placed_company": name}
    )


def mark_not_placed(student: StudentProfile) -> StudentProfile:
    """Reset a student to Not Placed. Allowed from either state."""
    logger.info("Marking %s as not placed", student.usn)
    return student.model_copy(
        update={"placement_status": PlacementStatus.not_placed, "placed_company": None}
    )


def apply_placement(student: StudentProfile, status: str, company: Optional[str] = None) -> StudentProfile:
    """
    Run the transition an admin placement request asks for.

    Args:
        status: "Placed" or "Not Placed"
        company: required when status is "Placed", ignored otherwise

    Raises:
        PortalError(InvalidFormat) for an unknown status,
        PortalError(CompanyRequired) for Placed without a company.
    """
    try:
        new_status = PlacementStatus(status)
    except ValueError:
        raise PortalError(
            ErrorCode.invalid_format,
            'Invalid placement status. Must be "Placed" or "Not Placed".',
        ) from None

    if new_status == PlacementStatus.placed:
        return mark_placed(student, company)
    return mark_not_placed(student)


def placement_patch(student: StudentProfile, status: str, company: Optional[str] = None) -> dict:
    """Store update for an admin placement change, built from the transition result."""
    moved = apply_placement(student, status, company)
    return {"placement_status": moved.placement_status.value, "placed_company": moved.placed_company}


def describe_transition(usn: str, patch: dict) -> str:
    """Human-readable confirmation, e.g. 'Student 1MS22CS154 has been marked as Placed in Acme'."""
    message = f"Student {usn} has been marked as {patch['placement_status']}"
    if patch.get("placed_company"):
        message += f" in {patch['placed_company']}"
    return message
