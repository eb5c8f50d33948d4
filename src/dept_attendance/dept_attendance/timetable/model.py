from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class TimetablePeriod:
    """A weekly slot of a class timetable, joined with its subject/teacher labels."""

    period_id: int
    class_id: int
    day_of_week: int
    period_number: int
    start_time: time
    end_time: time
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    is_break: bool = False
    break_name: Optional[str] = None
    subject_name: Optional[str] = None
    subject_code: Optional[str] = None
    teacher_name: Optional[str] = None
    class_name: Optional[str] = None

    def covers(self, day_of_week: int, at: time) -> bool:
        return (
            not self.is_break
            and self.day_of_week == day_of_week
            and self.start_time <= at <= self.end_time
        )

    @property
    def label(self) -> str:
        if self.is_break:
            return self.break_name or "Break"
        return self.subject_name or f"Period {self.period_number}"

    @property
    def window(self) -> str:
        return f"{self.start_time.strftime('%H:%M')}-{self.end_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class PeriodInput:
    """Validated admin input for creating/updating a slot."""

    class_id: int
    day_of_week: int
    period_number: int
    start_time: time
    end_time: time
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    is_break: bool = False
    break_name: Optional[str] = None


@dataclass(frozen=True)
class DaySchedule:
    day_of_week: int
    day: str
    periods: list[TimetablePeriod] = field(default_factory=list)


@dataclass(frozen=True)
class TeacherTimetable:
    days: list[DaySchedule]
    current_period: Optional[TimetablePeriod]
    current_day_name: str
    current_time: str
    total_periods: int
    unique_classes: int
    unique_subjects: int
    today_periods: int
