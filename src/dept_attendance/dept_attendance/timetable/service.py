from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..classes.repository import ClassRepository
from ..common.datetime_utils import CivilClock, parse_time_of_day
from ..common.validators import require_positive_int
from ..core.constants import DAY_NAMES, TEACHING_DAYS
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import RequestContext
from .matcher import PeriodMatcher
from .model import DaySchedule, PeriodInput, TeacherTimetable, TimetablePeriod
from .repository import TimetableRepository

logger = logging.getLogger(__name__)


def _optional_id(value: Any) -> Optional[int]:
    if value in (None, "", 0, "0"):
        return None
    return require_positive_int(value, "Id")


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "on", "yes"}
    return bool(value)


class TimetableService:
    def __init__(
        self,
        periods: TimetableRepository,
        classes: ClassRepository,
        matcher: PeriodMatcher,
        clock: CivilClock,
    ):
        self._periods = periods
        self._classes = classes
        self._matcher = matcher
        self._clock = clock

    # -------- Teacher --------
    def weekly_for_teacher(self, ctx: RequestContext, *, now: datetime | None = None) -> TeacherTimetable:
        ctx.require(Role.TEACHER)
        now = now or self._clock.now()
        current_day = self._clock.day_of_week(now)

        periods = list(self._periods.list_for_teacher(teacher_id=ctx.user_id))
        days = [
            DaySchedule(day_of_week=d, day=DAY_NAMES[d], periods=[p for p in periods if p.day_of_week == d])
            for d in TEACHING_DAYS
        ]

        live = self._matcher.current_for_teacher(teacher_id=ctx.user_id, now=now)
        return TeacherTimetable(
            days=days,
            current_period=min(live, key=lambda p: p.period_number) if live else None,
            current_day_name=DAY_NAMES[current_day],
            current_time=self._clock.time_of_day(now),
            total_periods=len(periods),
            unique_classes=len({p.class_id for p in periods}),
            unique_subjects=len({p.subject_id for p in periods if p.subject_id is not None}),
            today_periods=sum(1 for p in periods if p.day_of_week == current_day),
        )

    # -------- Admin --------
    def class_timetable(self, ctx: RequestContext, *, class_id: int) -> list[DaySchedule]:
        ctx.require(Role.ADMIN)
        periods = self._periods.list_for_class(class_id=int(class_id))
        return [
            DaySchedule(day_of_week=d, day=name, periods=[p for p in periods if p.day_of_week == d])
            for d, name in DAY_NAMES.items()
        ]

    def parse_period_input(self, payload: dict) -> PeriodInput:
        class_id = require_positive_int(payload.get("class_id"), "Class")
        day_of_week = require_positive_int(payload.get("day_of_week"), "Day of week")
        if day_of_week not in DAY_NAMES:
            raise ValidationError("Day of week must be between 1 (Monday) and 7 (Sunday)")
        period_number = require_positive_int(payload.get("period_number"), "Period number")

        start_time = parse_time_of_day(str(payload.get("start_time") or ""))
        end_time = parse_time_of_day(str(payload.get("end_time") or ""))
        if start_time >= end_time:
            raise ValidationError("Start time must be before end time")

        is_break = _as_bool(payload.get("is_break"))
        return PeriodInput(
            class_id=class_id,
            day_of_week=day_of_week,
            period_number=period_number,
            start_time=start_time,
            end_time=end_time,
            subject_id=None if is_break else _optional_id(payload.get("subject_id")),
            teacher_id=None if is_break else _optional_id(payload.get("teacher_id")),
            is_break=is_break,
            break_name=(str(payload.get("break_name") or "").strip() or None) if is_break else None,
        )

    def save_period(self, ctx: RequestContext, payload: dict) -> TimetablePeriod:
        ctx.require(Role.ADMIN)
        data = self.parse_period_input(payload)
        if not self._classes.get_class(data.class_id):
            raise NotFoundError("Class not found")

        period_id = self._periods.upsert(data)
        period = self._periods.get(period_id)
        if not period:
            raise NotFoundError("Period not found after save")
        logger.info(
            "Saved period %s (class=%s day=%s #%s %s)",
            period.period_id, data.class_id, data.day_of_week, data.period_number, period.window,
        )
        return period

    def delete_period(self, ctx: RequestContext, *, period_id: int) -> int:
        """Delete a slot. Returns the number of attendance rows removed with it."""

        ctx.require(Role.ADMIN)
        removed = self._periods.delete(period_id=int(period_id))
        if removed is None:
            raise NotFoundError("Period not found")
        logger.info("Deleted period %s and %s attendance records", period_id, removed)
        return removed

    def clear_class(self, ctx: RequestContext, *, class_id: int) -> tuple[int, int]:
        ctx.require(Role.ADMIN)
        class_info = self._classes.get_class(int(class_id))
        if not class_info:
            raise NotFoundError("Class not found")
        periods, attendance = self._periods.delete_for_class(class_id=class_info.class_id)
        logger.info(
            "Deleted all %s periods of %s (%s attendance records)",
            periods, class_info.class_name, attendance,
        )
        return periods, attendance
