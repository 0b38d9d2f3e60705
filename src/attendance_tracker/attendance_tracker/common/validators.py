from __future__ import annotations

from typing import Any, Optional

from ..core.constants import NOTES_MAX_LENGTH
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


def _as_text(value: Any, field_name: str) -> str:
    # JSON numbers are accepted for ids and roll numbers; objects, lists and booleans are not.
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationError(f"{field_name} must be a string")
    return str(value)


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    text = _as_text(value, field_name).strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def optional_text(value: Any, field_name: str) -> Optional[str]:
    """Trimmed string, or None when missing or blank."""
    if value is None:
        return None
    return _as_text(value, field_name).strip() or None


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def parse_status(value) -> AttendanceStatus:
    """Accept a status in any letter case (``present`` == ``PRESENT``)."""
    if isinstance(value, AttendanceStatus):
        return value
    if not isinstance(value, str):
        raise ValidationError("Invalid attendance status")
    try:
        return AttendanceStatus(value.strip().upper())
    except ValueError:
        raise ValidationError("Invalid attendance status")


def clean_notes(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Notes must be a string")
    notes = value.strip()
    if len(notes) > NOTES_MAX_LENGTH:
        raise ValidationError(f"Notes cannot exceed {NOTES_MAX_LENGTH} characters")
    return notes or None
