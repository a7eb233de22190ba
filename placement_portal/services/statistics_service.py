"""
Statistics Service - placement analytics for the admin dashboard.

All figures are derived from the full student and notice collections at
query time:
- placement counts and percentage
- placed students per company
- average package across notices (best-effort, see parse_package)
- notice count per job type
"""

import re
from collections import Counter
from typing import Iterable, List, Optional

import numpy as np

from placement_portal.schemas.schemas import (
    CompanyCount,
    JobType,
    JobTypeCount,
    Notice,
    PlacementStatistics,
    PlacementStatus,
    StudentProfile,
)

LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+))")
NON_NUMERIC = re.compile(r"[^0-9.]")


# ============================================================
# PACKAGE PARSING
# ============================================================

def _leading_float(text: str) -> float:
    """Parse the number at the start of `text`, NaN if there is none."""
    match = LEADING_NUMBER.match(text)
    if not match:
        return float("nan")
    return float(match.group(1))


def parse_package(text: Optional[str]) -> Optional[float]:
    """
    Best-effort numeric value of a free-text package figure.

    This is a heuristic, not a grammar. Units are ignored, so "40K Monthly"
    parses as 40 and is averaged alongside LPA figures.

    - "6-8 LPA"  -> 7.0   (range: midpoint of the numbers leading each side)
    - "8.5 LPA"  -> 8.5   (single: drop everything but digits and dots)
    - "abc"      -> None
    """
    if not text:
        return None

    if "-" in text:
        parts = text.split("-")
        low, high = _leading_float(parts[0]), _leading_float(parts[1])
        value = (low + high) / 2
    else:
        value = _leading_float(NON_NUMERIC.sub("", text))

    if np.isnan(value):
        return None
    return value


def average_package(notices: Iterable[Notice]) -> float:
    """Mean of every parseable package; 0 when none parse."""
    values = [v for v in (parse_package(n.package_offered) for n in notices) if v is not None]
    if not values:
        return 0.0
    return float(np.mean(values))


# ============================================================
# AGGREGATES
# ============================================================

def placement_percentage(placed: int, total: int) -> float:
    if total == 0:
        return 0.0
    return placed / total * 100


def companies_stats(students: Iterable[StudentProfile]) -> List[CompanyCount]:
    """Placed students per company, most placements first."""
    counts = Counter(
        s.placed_company for s in students
        if s.placement_status == PlacementStatus.placed and s.placed_company
    )
    return [CompanyCount(company=name, count=n) for name, n in counts.most_common()]


def job_type_stats(notices: Iterable[Notice]) -> List[JobTypeCount]:
    """Notices per job type, most common first. Types with no notices are omitted."""
    counts = Counter(notice.job_type for notice in notices)
    return [JobTypeCount(job_type=JobType(jt), count=n) for jt, n in counts.most_common()]


def compute_statistics(
    students: Iterable[StudentProfile],
    notices: Iterable[Notice],
) -> PlacementStatistics:
    """Derive the full dashboard summary from both collections."""
    students = list(students)
    notices = list(notices)

    total = len(students)
    placed = sum(1 for s in students if s.placement_status == PlacementStatus.placed)

    return PlacementStatistics(
        total_students=total,
        placed_students=placed,
        not_placed_students=total - placed,
        placement_percentage=placement_percentage(placed, total),
        companies_stats=companies_stats(students),
        average_package=average_package(notices),
        job_type_stats=job_type_stats(notices),
    )
