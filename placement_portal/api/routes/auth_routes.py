"""
Authentication Routes

POST /auth/register - Register a student
POST /auth/login - Login (admin username or student USN) and get JWT token
PUT /auth/change-password - Change own password
GET /auth/me - Get current user info
"""

import logging

from fastapi import APIRouter, Depends

from placement_portal.core.auth import (
    get_current_user, hash_password, token_for, verify_password,
)
from placement_portal.core.config import get_settings
from placement_portal.core.errors import ErrorCode, PortalError
from placement_portal.schemas.schemas import (
    AdminResponse, LoginRequest, MessageResponse, PasswordChangeRequest,
    RegisterRequest, TokenResponse, UserRole, utcnow,
)
from placement_portal.services.mongo_service import UserService, get_user_service, to_student
from placement_portal.services.validation_service import (
    build_student_document, validate_registration, validate_uniqueness,
)
from placement_portal.utils.usn import normalize_usn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def invalid_credentials() -> PortalError:
    return PortalError(ErrorCode.unauthorized, "Invalid credentials")


def public_user(user: dict) -> dict:
    """Client-facing view of a user document (never includes the hash)."""
    if user["role"] == UserRole.student.value:
        return to_student(user).model_dump(mode="json")
    return AdminResponse(id=user["id"], username=user["username"], email=user.get("email")).model_dump(mode="json")


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest, users: UserService = Depends(get_user_service)):
    """
    Register a new student account.

    The USN must look like 1ms22cs154 and the email must contain it.
    """
    error = validate_registration(
        request.usn, request.email, request.semester, request.branch, request.cgpa
    ) or validate_uniqueness(request.usn, request.email, users.find_one)
    if error:
        raise error

    doc = build_student_document(
        usn=request.usn,
        email=request.email,
        password_hash=hash_password(request.password),
        semester=request.semester,
        branch=request.branch,
        name=request.name,
        cgpa=request.cgpa,
        dob=request.dob,
    )
    user_id = users.insert(doc)
    doc.pop("_id", None)
    doc["id"] = user_id
    logger.info("Registered student %s", doc["usn"])

    return TokenResponse(access_token=token_for(doc), role=UserRole.student, user=public_user(doc))


def _bootstrap_admin(users: UserService) -> dict:
    """Create the configured admin account the first time it logs in."""
    settings = get_settings()
    doc = {
        "role": UserRole.admin.value,
        "username": settings.admin_username,
        "email": settings.admin_email,
        "password_hash": hash_password(settings.admin_password),
        "created_at": utcnow(),
    }
    user_id = users.insert(doc)
    doc.pop("_id", None)
    doc["id"] = user_id
    logger.warning("Created default admin account %r", settings.admin_username)
    return doc


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, users: UserService = Depends(get_user_service)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    settings = get_settings()

    if request.username == settings.admin_username:
        user = users.find_admin(request.username) or _bootstrap_admin(users)
    else:
        user = users.find_student(normalize_usn(request.username))

    if not user or not verify_password(request.password, user["password_hash"]):
        raise invalid_credentials()

    return TokenResponse(access_token=token_for(user), role=UserRole(user["role"]), user=public_user(user))


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    request: PasswordChangeRequest,
    user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """Change the caller's password after checking the current one."""
    if not verify_password(request.current_password, user["password_hash"]):
        raise PortalError(ErrorCode.unauthorized, "Current password is incorrect")

    users.update_by_id(user["id"], {"password_hash": hash_password(request.new_password)})
    return MessageResponse(message="Password updated successfully")


@router.get("/me")
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return {"success": True, "user": public_user(user)}
