from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional, Union

from ..bookmarks.model import Bookmark
from ..bookmarks.repository import BookmarkRepository
from ..classes.model import ClassInfo, Student
from ..classes.repository import ClassRepository
from ..common.datetime_utils import (
    day_of_week_for,
    iter_dates,
    month_window,
    next_month_start,
    previous_month_start,
    week_window,
)
from ..core.constants import GENERAL_CELL
from ..core.enums import AttendanceStatus, HistoryView
from ..core.exceptions import ValidationError
from ..timetable.model import TimetablePeriod
from ..timetable.repository import TimetableRepository
from ..users.model import RequestContext
from .repository import AttendanceRepository
from .service import require_class_access

logger = logging.getLogger(__name__)

CellKey = Union[int, str]
Cells = dict[CellKey, Optional[AttendanceStatus]]


@dataclass(frozen=True)
class DateColumn:
    date: str
    day: str
    day_num: int
    day_of_week: int


@dataclass(frozen=True)
class HistoryGrid:
    class_info: ClassInfo
    view: HistoryView
    current_date: date
    start_date: date
    end_date: date
    prev_date: date
    next_date: date
    dates: list[DateColumn]
    students: list[Student]
    periods: list[TimetablePeriod]
    bookmarks: list[Bookmark]
    # student_id -> ISO date -> period_id | "general" -> status (None when unmarked)
    grid: dict[int, dict[str, Cells]]

    def periods_on(self, day_of_week: int) -> list[TimetablePeriod]:
        return [p for p in self.periods if p.day_of_week == day_of_week]


def parse_view(value: Any) -> HistoryView:
    try:
        return HistoryView(str(value or HistoryView.WEEK.value).strip().lower())
    except ValueError:
        raise ValidationError("View must be 'week' or 'month'")


def window_for(view: HistoryView, reference: date) -> tuple[date, date, date, date]:
    """(start, end, prev, next) for the view around `reference`."""

    if view is HistoryView.WEEK:
        start, end = week_window(reference)
        return start, end, start - timedelta(days=7), start + timedelta(days=7)
    start, end = month_window(reference)
    return start, end, previous_month_start(reference), next_month_start(reference)


def empty_cells(periods: list[TimetablePeriod], day_of_week: int) -> Cells:
    cells: Cells = {p.period_id: None for p in periods if p.day_of_week == day_of_week}
    return cells or {GENERAL_CELL: None}


class HistoryGridBuilder:
    """Student x date x period matrix of recorded statuses for one class."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        classes: ClassRepository,
        periods: TimetableRepository,
        bookmarks: BookmarkRepository,
    ):
        self._attendance = attendance
        self._classes = classes
        self._periods = periods
        self._bookmarks = bookmarks

    def build(self, ctx: RequestContext, *, class_id: Any, view: Any, reference_date: date) -> HistoryGrid:
        view = parse_view(view)
        class_info = require_class_access(ctx, class_id=class_id, classes=self._classes, periods=self._periods)
        start, end, prev_date, next_date = window_for(view, reference_date)

        dates = [
            DateColumn(
                date=d.strftime("%Y-%m-%d"),
                day=d.strftime("%a"),
                day_num=d.day,
                day_of_week=day_of_week_for(d),
            )
            for d in iter_dates(start, end)
        ]
        students = list(self._classes.list_students(class_info.class_id))
        periods = [
            p
            for p in self._periods.list_for_teacher_class(teacher_id=ctx.user_id, class_id=class_info.class_id)
            if not p.is_break
        ]

        grid: dict[int, dict[str, Cells]] = {
            s.student_id: {col.date: empty_cells(periods, col.day_of_week) for col in dates} for s in students
        }

        for entry in self._attendance.list_history(class_id=class_info.class_id, start=start, end=end):
            by_date = grid.get(entry.student_id)
            if by_date is None:
                logger.debug("Skipping record of student %s not on the roster", entry.student_id)
                continue
            cells = by_date.setdefault(entry.on_date.strftime("%Y-%m-%d"), {})
            if entry.period_id is not None and entry.period_id in cells:
                cells[entry.period_id] = entry.status
            else:
                cells[GENERAL_CELL] = entry.status

        return HistoryGrid(
            class_info=class_info,
            view=view,
            current_date=reference_date,
            start_date=start,
            end_date=end,
            prev_date=prev_date,
            next_date=next_date,
            dates=dates,
            students=students,
            periods=periods,
            bookmarks=list(self._bookmarks.list_for_class(class_id=class_info.class_id, start=start, end=end)),
            grid=grid,
        )
