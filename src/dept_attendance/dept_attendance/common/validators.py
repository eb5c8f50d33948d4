from __future__ import annotations

from typing import Any

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if number <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return number


def require_status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError("Status must be 'P' or 'A'")
