from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..classes.model import ClassInfo, Student
from ..timetable.model import TimetablePeriod


@dataclass(frozen=True)
class ClassCard:
    """One class tile on the teacher dashboard."""

    class_info: ClassInfo
    schedule: list[TimetablePeriod] = field(default_factory=list)
    current_period: Optional[TimetablePeriod] = None
    attendance_count: int = 0


@dataclass(frozen=True)
class TeacherDashboard:
    classes: list[ClassCard]
    current_classes: list[ClassCard]
    assigned_classes: list[ClassCard]
    current_day_name: str
    current_time: str

    @property
    def is_current_period(self) -> bool:
        return bool(self.current_classes)


@dataclass(frozen=True)
class AdminStats:
    teachers: int
    students: int
    classes: int
    total_students: int


@dataclass(frozen=True)
class StudentSummary:
    student: Student
    class_info: Optional[ClassInfo]
    present_days: int
    absent_days: int
    percentage: Optional[float]

    @property
    def total_days(self) -> int:
        return self.present_days + self.absent_days
