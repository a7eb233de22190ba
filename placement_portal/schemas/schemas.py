"""
Pydantic Schemas - Domain models and Request/Response validation

All schemas in one file for simplicity.

Range checks on semester, CGPA and targeting fields are NOT declared as Field
constraints on request schemas: the validators in
placement_portal.services.validation_service own those rules so clients get
the portal's own error codes instead of a generic 422.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, computed_field, model_validator

from placement_portal.utils.usn import enrollment_year_or_none


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    admin = "admin"


class Branch(str, Enum):
    cs = "Computer Science"
    it = "Information Technology"
    ece = "Electronics and Communication Engineering"
    me = "Mechanical Engineering"
    ee = "Electrical Engineering"
    ce = "Civil Engineering"
    other = "Other"


class JobType(str, Enum):
    full_time = "Full Time"
    internship = "Internship"
    internship_fte = "Internship + Full Time"
    contract = "Contract"


class PlacementStatus(str, Enum):
    not_placed = "Not Placed"
    placed = "Placed"


MIN_SEMESTER = 1
MAX_SEMESTER = 8
MIN_CGPA = 0.0
MAX_CGPA = 10.0


# ============================================================
# DOMAIN MODELS
# ============================================================

class StudentProfile(BaseModel):
    """
    A registered student as stored in the `users` collection.

    `year` is derived from the USN and cannot be set by callers.
    """
    id: Optional[str] = None
    usn: str
    email: str
    name: Optional[str] = None
    dob: Optional[datetime] = None
    semester: int
    branch: Branch
    cgpa: Optional[float] = 0.0
    placement_status: PlacementStatus = PlacementStatus.not_placed
    placed_company: Optional[str] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def year(self) -> Optional[int]:
        return enrollment_year_or_none(self.usn)

    @model_validator(mode="after")
    def check_placement_consistency(self):
        if self.placement_status == PlacementStatus.placed:
            if not self.placed_company:
                raise ValueError("placed_company is required when placement_status is Placed")
        elif self.placed_company is not None:
            raise ValueError("placed_company must be empty when placement_status is Not Placed")
        return self


class Notice(BaseModel):
    """An admin-published opportunity with its targeting criteria."""
    id: Optional[str] = None
    company_name: str
    description: str
    link: str
    target_semesters: List[int]
    target_branches: List[Branch]
    target_year: Optional[int] = None
    min_cgpa: float = MIN_CGPA
    max_cgpa: float = MAX_CGPA
    package_offered: str = ""
    job_type: JobType = JobType.full_time
    created_at: datetime = Field(default_factory=utcnow)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    usn: str
    email: EmailStr
    password: str = Field(..., min_length=6)
    semester: int
    branch: str
    name: Optional[str] = None
    cgpa: Optional[float] = None
    dob: Optional[datetime] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class AdminResponse(BaseModel):
    id: str
    username: str
    email: Optional[str] = None
    role: UserRole = UserRole.admin


class TokenResponse(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    role: UserRole
    user: dict


# ============================================================
# STUDENT SCHEMAS
# ============================================================

class StudentProfileUpdate(BaseModel):
    """Fields a student may change on their own profile."""
    name: Optional[str] = None
    semester: Optional[int] = None
    cgpa: Optional[float] = None
    dob: Optional[datetime] = None


class StudentAdminUpdate(StudentProfileUpdate):
    """Fields an admin may change on any student."""
    placement_status: Optional[str] = None
    placed_company: Optional[str] = None


class PlacementStatusUpdate(BaseModel):
    placement_status: str
    placed_company: Optional[str] = None


class StudentResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    student: StudentProfile


class StudentListResponse(BaseModel):
    success: bool = True
    count: int
    students: List[StudentProfile]


# ============================================================
# NOTICE SCHEMAS
# ============================================================

class NoticeCreate(BaseModel):
    company_name: str
    description: str
    link: str
    target_semesters: List[int]
    target_branches: List[str]
    target_year: int
    min_cgpa: Optional[float] = None
    max_cgpa: Optional[float] = None
    package_offered: str
    job_type: JobType = JobType.full_time


class NoticeResponse(BaseModel):
    success: bool = True
    notice: Notice


class NoticeListResponse(BaseModel):
    success: bool = True
    count: int
    notices: List[Notice]
    message: Optional[str] = None


class NoticeFeed(BaseModel):
    """Result of matching one student against all notices."""
    notices: List[Notice] = []
    reason: Optional[str] = None


class CompanyListResponse(BaseModel):
    success: bool = True
    companies: List[str]


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class CompanyCount(BaseModel):
    company: str
    count: int


class JobTypeCount(BaseModel):
    job_type: JobType
    count: int


class PlacementStatistics(BaseModel):
    total_students: int
    placed_students: int
    not_placed_students: int
    placement_percentage: float
    companies_stats: List[CompanyCount] = []
    average_package: float = 0.0
    job_type_stats: List[JobTypeCount] = []


class StatisticsResponse(BaseModel):
    success: bool = True
    statistics: PlacementStatistics


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    success: bool = False
    code: str
    detail: str
