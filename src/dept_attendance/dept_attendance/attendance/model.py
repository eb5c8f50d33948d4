from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..classes.model import ClassInfo
from ..core.enums import AttendanceStatus
from ..timetable.model import TimetablePeriod


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one status for a student on a date (and period, if marked live)."""

    attendance_id: int
    student_id: int
    class_id: int
    period_id: Optional[int]
    on_date: date
    status: AttendanceStatus
    marked_by: Optional[int] = None


@dataclass(frozen=True)
class HistoryEntry:
    """Read-model for the history grid: a record joined with its period/subject."""

    student_id: int
    on_date: date
    status: AttendanceStatus
    period_id: Optional[int] = None
    period_number: Optional[int] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    subject_name: Optional[str] = None
    subject_code: Optional[str] = None


@dataclass(frozen=True)
class ReportEntry:
    """Read-model for reports: a record with the teacher of its period (if any)."""

    student_id: int
    on_date: date
    status: AttendanceStatus
    period_id: Optional[int] = None
    period_teacher_id: Optional[int] = None


@dataclass(frozen=True)
class BulkChange:
    student_id: int
    on_date: date
    # None clears the student's attendance for the date.
    status: Optional[AttendanceStatus]


@dataclass(frozen=True)
class RosterRow:
    student_id: int
    roll_no: int
    student_name: str
    status: Optional[AttendanceStatus] = None


@dataclass(frozen=True)
class AttendancePage:
    class_info: ClassInfo
    students: list[RosterRow]
    on_date: date
    current_period: Optional[TimetablePeriod]
    upcoming_period: Optional[TimetablePeriod]
    current_time: str
    current_day_name: str
