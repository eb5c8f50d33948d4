from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Iterable, Optional

from ..classes.model import ClassInfo
from ..classes.repository import ClassRepository
from ..common.datetime_utils import CivilClock, parse_iso_date
from ..common.validators import require_positive_int, require_status
from ..core.constants import DAY_NAMES
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NoActivePeriodError, NotFoundError, ValidationError
from ..timetable.matcher import PeriodMatcher
from ..timetable.model import TimetablePeriod
from ..timetable.repository import TimetableRepository
from ..users.model import RequestContext
from .model import AttendancePage, BulkChange, RosterRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def require_class_access(
    ctx: RequestContext,
    *,
    class_id: Any,
    classes: ClassRepository,
    periods: TimetableRepository,
) -> ClassInfo:
    """The class, if the caller teaches at least one non-break period in it."""

    ctx.require(Role.TEACHER)
    class_info = classes.get_class(require_positive_int(class_id, "Class"))
    if not class_info:
        raise NotFoundError("Class not found")
    if not periods.teaches_class(teacher_id=ctx.user_id, class_id=class_info.class_id):
        raise AuthorizationError("You are not assigned to this class")
    return class_info


def parse_bulk_changes(raw: Iterable[dict]) -> list[BulkChange]:
    changes: list[BulkChange] = []
    for item in raw or []:
        if not isinstance(item, dict):
            raise ValidationError("Each change must be an object")
        status_raw = item.get("status")
        status = None if status_raw in (None, "") else require_status(status_raw)
        changes.append(
            BulkChange(
                student_id=require_positive_int(item.get("studentId", item.get("student_id")), "Student"),
                on_date=parse_iso_date(str(item.get("date") or "")),
                status=status,
            )
        )
    return changes


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        classes: ClassRepository,
        periods: TimetableRepository,
        matcher: PeriodMatcher,
        clock: CivilClock,
    ):
        self._attendance = attendance
        self._classes = classes
        self._periods = periods
        self._matcher = matcher
        self._clock = clock

    def mark_attendance(
        self,
        ctx: RequestContext,
        *,
        student_id: Any,
        class_id: Any,
        status: Any,
        on_date: date,
        now: datetime | None = None,
    ) -> TimetablePeriod:
        """Record a status against the caller's live period.

        The period is resolved from the clock, not from `on_date`, so a teacher
        can only mark during a slot they are teaching right now.
        """

        ctx.require(Role.TEACHER)
        status = require_status(status)
        class_id = require_positive_int(class_id, "Class")
        student_id = require_positive_int(student_id, "Student")

        period = self._matcher.current_period(class_id=class_id, teacher_id=ctx.user_id, now=now)
        if not period:
            logger.info("Teacher %s tried to mark class %s outside a scheduled period", ctx.user_id, class_id)
            raise NoActivePeriodError("No active period right now. Please wait for your scheduled period.")

        if not any(s.student_id == student_id for s in self._classes.list_students(class_id)):
            raise NotFoundError("Student not found in this class")

        self._attendance.upsert_for_period(
            student_id=student_id,
            class_id=class_id,
            period_id=period.period_id,
            on_date=on_date,
            status=status,
            marked_by=ctx.user_id,
        )
        logger.info(
            "Marked student %s %s on %s (class=%s period=%s by=%s)",
            student_id, status.value, on_date, class_id, period.period_id, ctx.user_id,
        )
        return period

    def bulk_update(self, ctx: RequestContext, *, class_id: Any, changes: list[BulkChange]) -> int:
        """Apply historical edits. Returns the number of changes applied."""

        class_info = require_class_access(ctx, class_id=class_id, classes=self._classes, periods=self._periods)

        roster = {s.student_id for s in self._classes.list_students(class_info.class_id)}
        unknown = sorted({c.student_id for c in changes if c.student_id not in roster})
        if unknown:
            raise NotFoundError(f"Students not in {class_info.class_name}: {', '.join(map(str, unknown))}")

        updated = 0
        for change in changes:
            if change.status is None:
                self._attendance.delete_for_student_date(student_id=change.student_id, on_date=change.on_date)
            elif self._attendance.exists_for_student_date(student_id=change.student_id, on_date=change.on_date):
                self._attendance.update_status_for_student_date(
                    student_id=change.student_id,
                    on_date=change.on_date,
                    status=change.status,
                )
            else:
                self._attendance.insert_manual(
                    student_id=change.student_id,
                    class_id=class_info.class_id,
                    on_date=change.on_date,
                    status=change.status,
                    marked_by=ctx.user_id,
                )
            updated += 1

        logger.info("Bulk update of %s changes in %s by %s", updated, class_info.class_name, ctx.user_id)
        return updated

    def roster_for_today(self, ctx: RequestContext, *, class_id: Any, now: datetime | None = None) -> AttendancePage:
        class_info = require_class_access(ctx, class_id=class_id, classes=self._classes, periods=self._periods)
        now = now or self._clock.now()
        today = self._clock.today(now)

        current = self._matcher.current_period(class_id=class_info.class_id, teacher_id=ctx.user_id, now=now)
        statuses = (
            self._attendance.statuses_for_period(
                class_id=class_info.class_id,
                period_id=current.period_id,
                on_date=today,
            )
            if current
            else {}
        )

        students = [
            RosterRow(
                student_id=s.student_id,
                roll_no=s.roll_no,
                student_name=s.student_name,
                status=statuses.get(s.student_id),
            )
            for s in self._classes.list_students(class_info.class_id)
        ]

        upcoming: Optional[TimetablePeriod] = None
        if not current:
            upcoming = self._matcher.upcoming_period(class_id=class_info.class_id, teacher_id=ctx.user_id, now=now)

        return AttendancePage(
            class_info=class_info,
            students=students,
            on_date=today,
            current_period=current,
            upcoming_period=upcoming,
            current_time=self._clock.time_of_day(now),
            current_day_name=DAY_NAMES[self._clock.day_of_week(now)],
        )

    def purge_class_dates(self, *, class_ref: str, dates: list[date]) -> tuple[ClassInfo, int]:
        """Delete a class's attendance on the given dates (maintenance tooling).

        `class_ref` is a class id or an exact class name.
        """

        if not dates:
            raise ValidationError("At least one date is required")
        ref = (class_ref or "").strip()
        class_info = self._classes.get_class(int(ref)) if ref.isdigit() else self._classes.find_by_name(ref)
        if not class_info:
            raise NotFoundError(f"Class not found: {class_ref}")

        removed = self._attendance.delete_for_class_dates(class_id=class_info.class_id, dates=dates)
        logger.info(
            "Purged %s attendance records of %s on %s",
            removed, class_info.class_name, ", ".join(d.isoformat() for d in dates),
        )
        return class_info, removed
