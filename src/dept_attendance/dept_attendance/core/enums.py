from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access checks."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database (single letter)."""

    PRESENT = "P"
    ABSENT = "A"


class HistoryView(str, Enum):
    WEEK = "week"
    MONTH = "month"


class ReportWindow(str, Enum):
    WEEK = "week"
    MONTH = "month"
    FULL = "full"

