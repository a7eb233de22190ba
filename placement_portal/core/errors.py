"""
Error taxonomy for the placement portal.

Validators RETURN these errors (None on success) so callers can decide how to
surface them. Commands (placement transitions, store access) RAISE them.
The API layer maps every code to an HTTP status in one place (HTTP_STATUS).
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    invalid_format = "InvalidFormat"
    email_mismatch = "EmailMismatch"
    semester_out_of_range = "SemesterOutOfRange"
    cgpa_out_of_range = "CGPAOutOfRange"
    cgpa_range_invalid = "CGPARangeInvalid"
    empty_target_set = "EmptyTargetSet"
    unknown_branch = "UnknownBranch"
    missing_field = "MissingField"
    duplicate_identifier = "DuplicateIdentifier"
    duplicate_email = "DuplicateEmail"
    company_required = "CompanyRequired"
    not_found = "NotFound"
    unauthorized = "Unauthorized"
    store_unavailable = "StoreUnavailable"


class PortalError(Exception):
    """Base error carrying a machine-readable code and a user-facing message."""

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"PortalError({self.code.value!r}, {self.message!r})"


class StoreUnavailableError(PortalError):
    """Raised when the document store cannot be reached."""

    def __init__(self, message: str = "Document store unavailable"):
        super().__init__(ErrorCode.store_unavailable, message)


def not_found(what: str) -> PortalError:
    return PortalError(ErrorCode.not_found, f"{what} not found")


# ============================================================
# HTTP MAPPING
# ============================================================

HTTP_STATUS = {
    ErrorCode.invalid_format: 400,
    ErrorCode.email_mismatch: 400,
    ErrorCode.semester_out_of_range: 400,
    ErrorCode.cgpa_out_of_range: 400,
    ErrorCode.cgpa_range_invalid: 400,
    ErrorCode.empty_target_set: 400,
    ErrorCode.unknown_branch: 400,
    ErrorCode.missing_field: 400,
    ErrorCode.duplicate_identifier: 400,
    ErrorCode.duplicate_email: 400,
    ErrorCode.company_required: 400,
    ErrorCode.unauthorized: 401,
    ErrorCode.not_found: 404,
    ErrorCode.store_unavailable: 503,
}


def http_status_for(error: Optional[PortalError]) -> int:
    """HTTP status for an error (500 for anything unmapped)."""
    if error is None:
        return 200
    return HTTP_STATUS.get(error.code, 500)
