"""
USN (University Seat Number) parsing.

Format: 1 digit, 2 letters, 2 digits, 2 letters, 3 digits, e.g. 1MS22CS154.
Digits 4-5 (usn[3:5]) are the two-digit admission year.
"""

import re
from typing import NamedTuple, Optional

from placement_portal.core.errors import ErrorCode, PortalError

USN_PATTERN = re.compile(r"[0-9][A-Za-z]{2}[0-9]{2}[A-Za-z]{2}[0-9]{3}")
CENTURY = 2000


class ParsedUSN(NamedTuple):
    usn: str
    enrollment_year: int


def normalize_usn(raw: str) -> str:
    """Canonical form used for storage and lookups."""
    return raw.strip().upper()


def is_valid_usn(raw: Optional[str]) -> bool:
    return isinstance(raw, str) and USN_PATTERN.fullmatch(raw) is not None


def parse_usn(raw: Optional[str]) -> ParsedUSN:
    """
    Validate a USN and extract its enrollment year.

    Raises:
        PortalError(InvalidFormat) if the string does not match the pattern.
    """
    if not is_valid_usn(raw):
        raise PortalError(
            ErrorCode.invalid_format,
            "Invalid USN format. Must be like 1ms22cs154",
        )
    usn = normalize_usn(raw)
    return ParsedUSN(usn=usn, enrollment_year=CENTURY + int(usn[3:5]))


def enrollment_year_or_none(raw: Optional[str]) -> Optional[int]:
    if not is_valid_usn(raw):
        return None
    return parse_usn(raw).enrollment_year
