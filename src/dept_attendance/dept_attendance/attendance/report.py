from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from ..classes.model import ClassInfo
from ..classes.repository import ClassRepository
from ..common.datetime_utils import CivilClock
from ..core.constants import REPORT_WINDOW_DAYS
from ..core.enums import AttendanceStatus, ReportWindow
from ..core.exceptions import ValidationError
from ..timetable.repository import TimetableRepository
from ..users.model import RequestContext
from .repository import AttendanceRepository
from .service import require_class_access


@dataclass(frozen=True)
class ReportRow:
    student_id: int
    roll_no: int
    student_name: str
    total_days: int
    present_days: int
    absent_days: int
    percentage: Optional[float]


@dataclass(frozen=True)
class ClassReport:
    class_info: ClassInfo
    window: ReportWindow
    rows: list[ReportRow]


def parse_window(value: Any) -> ReportWindow:
    try:
        return ReportWindow(str(value or ReportWindow.WEEK.value).strip().lower())
    except ValueError:
        raise ValidationError("Period must be 'week', 'month' or 'full'")


def attendance_percentage(present: int, total: int) -> Optional[float]:
    if total <= 0:
        return None
    return round(present * 100 / total, 2)


class ReportAggregator:
    """Per-student present/absent totals for the records a teacher is responsible for.

    A record counts when its period is taught by the caller or when it has no
    period (a manual historical entry).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        classes: ClassRepository,
        periods: TimetableRepository,
        clock: CivilClock,
    ):
        self._attendance = attendance
        self._classes = classes
        self._periods = periods
        self._clock = clock

    def build(self, ctx: RequestContext, *, class_id: Any, window: Any, now: datetime | None = None) -> ClassReport:
        window = parse_window(window)
        class_info = require_class_access(ctx, class_id=class_id, classes=self._classes, periods=self._periods)

        since = None
        if window is not ReportWindow.FULL:
            since = self._clock.today(now) - timedelta(days=REPORT_WINDOW_DAYS[window.value])

        present: dict[int, int] = {}
        absent: dict[int, int] = {}
        for entry in self._attendance.list_for_report(class_id=class_info.class_id, since=since):
            if entry.period_id is not None and entry.period_teacher_id != ctx.user_id:
                continue
            if since is not None and entry.on_date < since:
                continue
            bucket = present if entry.status is AttendanceStatus.PRESENT else absent
            bucket[entry.student_id] = bucket.get(entry.student_id, 0) + 1

        rows = []
        for s in self._classes.list_students(class_info.class_id):
            p = present.get(s.student_id, 0)
            a = absent.get(s.student_id, 0)
            rows.append(
                ReportRow(
                    student_id=s.student_id,
                    roll_no=s.roll_no,
                    student_name=s.student_name,
                    total_days=p + a,
                    present_days=p,
                    absent_days=a,
                    percentage=attendance_percentage(p, p + a),
                )
            )
        return ClassReport(class_info=class_info, window=window, rows=rows)
