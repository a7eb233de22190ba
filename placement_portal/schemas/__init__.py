"""
Schemas module - domain models and Request/Response schemas.

- Domain models: StudentProfile, Notice (what the matcher and aggregator work on)
- Request schemas: what the API accepts
- Response schemas: what the API returns
"""

from placement_portal.schemas.schemas import (
    Branch,
    JobType,
    Notice,
    PlacementStatus,
    StudentProfile,
    UserRole,
)

__all__ = ["Branch", "JobType", "Notice", "PlacementStatus", "StudentProfile", "UserRole"]
