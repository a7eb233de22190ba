"""
Eligibility Matching Service

PURPOSE:
Decide which notices a student can see.

HOW IT WORKS:
A student is eligible for a notice when ALL of these hold:
1. The student is not placed (placed students see nothing at all)
2. The student's semester is one of the notice's target semesters
3. The student's branch is one of the notice's target branches
4. min_cgpa <= student cgpa <= max_cgpa (a missing cgpa counts as 0)

target_year is stored on notices but is NOT part of the match.

Matching is computed at query time from the current profile and notice
collection; nothing is persisted. Same inputs, same ordered output.
"""

from typing import Iterable, List, Set

from placement_portal.schemas.schemas import (
    Notice,
    NoticeFeed,
    PlacementStatus,
    StudentProfile,
)


# ============================================================
# PREDICATE
# ============================================================

def is_placed(student: StudentProfile) -> bool:
    if student.placement_status == PlacementStatus.placed:
        return True
    if student.placement_status == PlacementStatus.not_placed:
        return False
    raise ValueError(f"Unhandled placement status: {student.placement_status}")


def cgpa_in_range(cgpa: float, notice: Notice) -> bool:
    return notice.min_cgpa <= cgpa <= notice.max_cgpa


def is_eligible(student: StudentProfile, notice: Notice) -> bool:
    """Check whether one student should see one notice."""
    if is_placed(student):
        return False

    if student.semester not in set(notice.target_semesters):
        return False

    if student.branch not in set(notice.target_branches):
        return False

    return cgpa_in_range(student.cgpa or 0.0, notice)


# ============================================================
# LISTINGS
# ============================================================

def placed_reason(student: StudentProfile) -> str:
    return f"You are already placed in {student.placed_company}. No further applications allowed."


def sort_newest_first(notices: Iterable[Notice]) -> List[Notice]:
    # sorted() is stable: notices sharing a timestamp keep their input order
    return sorted(notices, key=lambda n: n.created_at, reverse=True)


def list_eligible_notices(student: StudentProfile, notices: Iterable[Notice]) -> NoticeFeed:
    """
    Filter the full notice collection down to what `student` may see.

    Returns:
        NoticeFeed with notices newest first. For a placed student the list
        is empty and `reason` names the company they are placed at.
    """
    if is_placed(student):
        return NoticeFeed(notices=[], reason=placed_reason(student))

    eligible = [notice for notice in notices if is_eligible(student, notice)]
    return NoticeFeed(notices=sort_newest_first(eligible))


def list_visited_companies(notices: Iterable[Notice]) -> Set[str]:
    """Distinct company names across every notice, ignoring targeting."""
    return {notice.company_name for notice in notices}
