"""
Notice Routes

GET /notices/companies - Companies that have posted notices (public)
POST /notices - Create notice (admin only)
GET /notices/all - List all notices (admin only)
DELETE /notices/{notice_id} - Delete notice (admin only)
GET /notices/student - Notices the current student is eligible for
"""

import logging

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_admin, get_current_student
from placement_portal.core.errors import not_found
from placement_portal.schemas.schemas import (
    MAX_CGPA, MIN_CGPA,
    Branch, CompanyListResponse, MessageResponse, Notice, NoticeCreate,
    NoticeListResponse, NoticeResponse, StudentProfile,
)
from placement_portal.services.matching_service import list_eligible_notices, list_visited_companies
from placement_portal.services.mongo_service import NoticeService, get_notice_service
from placement_portal.services.validation_service import validate_notice

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notices", tags=["Notices"])


@router.get("/companies", response_model=CompanyListResponse)
async def visited_companies(notices: NoticeService = Depends(get_notice_service)):
    """Every company that has ever posted a notice, alphabetically."""
    companies = list_visited_companies(notices.list_all())
    return CompanyListResponse(companies=sorted(companies))


@router.post("", response_model=NoticeResponse, status_code=201)
async def create_notice(
    data: NoticeCreate,
    admin: dict = Depends(get_current_admin),
    notices: NoticeService = Depends(get_notice_service),
):
    """
    Publish a notice. Targeting rules:
    - at least one semester (1-8) and one branch
    - optional CGPA window inside [0, 10], defaults to the full range
    """
    error = validate_notice(
        data.target_semesters,
        data.target_branches,
        data.min_cgpa,
        data.max_cgpa,
        required_fields={
            "company_name": data.company_name,
            "description": data.description,
            "link": data.link,
            "package_offered": data.package_offered,
        },
    )
    if error:
        raise error

    notice = Notice(
        company_name=data.company_name.strip(),
        description=data.description,
        link=data.link.strip(),
        # duplicates in the request collapse, order of first appearance kept
        target_semesters=list(dict.fromkeys(int(s) for s in data.target_semesters)),
        target_branches=list(dict.fromkeys(Branch(b) for b in data.target_branches)),
        target_year=data.target_year,
        min_cgpa=MIN_CGPA if data.min_cgpa is None else data.min_cgpa,
        max_cgpa=MAX_CGPA if data.max_cgpa is None else data.max_cgpa,
        package_offered=data.package_offered.strip(),
        job_type=data.job_type,
    )
    saved = notices.insert(notice)
    logger.info("Created notice %s for %s", saved.id, saved.company_name)
    return NoticeResponse(notice=saved)


@router.get("/all", response_model=NoticeListResponse)
async def list_notices(
    admin: dict = Depends(get_current_admin),
    notices: NoticeService = Depends(get_notice_service),
):
    """All notices, newest first."""
    results = notices.list_all()
    return NoticeListResponse(count=len(results), notices=results)


@router.get("/student", response_model=NoticeListResponse)
async def student_notices(
    student: StudentProfile = Depends(get_current_student),
    notices: NoticeService = Depends(get_notice_service),
):
    """
    Notices the caller is eligible for, newest first.

    Placed students get an empty list and a message naming their company.
    """
    feed = list_eligible_notices(student, notices.list_all())
    return NoticeListResponse(count=len(feed.notices), notices=feed.notices, message=feed.reason)


@router.delete("/{notice_id}", response_model=MessageResponse)
async def delete_notice(
    notice_id: str,
    admin: dict = Depends(get_current_admin),
    notices: NoticeService = Depends(get_notice_service),
):
    """Delete a notice."""
    if not notices.delete(notice_id):
        raise not_found("Notice")
    logger.info("Deleted notice %s", notice_id)
    return MessageResponse(message="Notice deleted successfully")
