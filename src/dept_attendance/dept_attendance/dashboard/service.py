from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..attendance.report import attendance_percentage
from ..attendance.repository import AttendanceRepository
from ..classes.model import ClassInfo
from ..classes.repository import ClassRepository
from ..common.datetime_utils import CivilClock
from ..core.constants import DAY_NAMES
from ..core.enums import AttendanceStatus, Role
from ..timetable.matcher import PeriodMatcher
from ..timetable.repository import TimetableRepository
from ..users.model import RequestContext
from ..users.repository import UserRepository
from .model import AdminStats, ClassCard, StudentSummary, TeacherDashboard

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(
        self,
        users: UserRepository,
        classes: ClassRepository,
        periods: TimetableRepository,
        attendance: AttendanceRepository,
        matcher: PeriodMatcher,
        clock: CivilClock,
    ):
        self._users = users
        self._classes = classes
        self._periods = periods
        self._attendance = attendance
        self._matcher = matcher
        self._clock = clock

    def _card(self, ctx: RequestContext, class_info: ClassInfo, now: datetime) -> ClassCard:
        current = self._matcher.current_period(class_id=class_info.class_id, teacher_id=ctx.user_id, now=now)
        count = 0
        if current:
            count = self._attendance.count_for_period(
                class_id=class_info.class_id,
                period_id=current.period_id,
                on_date=self._clock.today(now),
            )
        return ClassCard(
            class_info=class_info,
            schedule=list(self._periods.list_for_teacher_class(teacher_id=ctx.user_id, class_id=class_info.class_id)),
            current_period=current,
            attendance_count=count,
        )

    def teacher_dashboard(self, ctx: RequestContext, *, now: datetime | None = None) -> TeacherDashboard:
        """Classes being taught right now, else the teacher's classes, else every class."""

        ctx.require(Role.TEACHER)
        now = now or self._clock.now()

        assigned = [self._card(ctx, c, now) for c in self._classes.list_for_teacher(ctx.user_id)]
        current = [card for card in assigned if card.current_period]
        if current:
            shown = current
        elif assigned:
            shown = assigned
        else:
            logger.info("Teacher %s has no timetable assignments, listing all classes", ctx.user_id)
            shown = [ClassCard(class_info=c) for c in self._classes.list_all()]

        return TeacherDashboard(
            classes=shown,
            current_classes=current,
            assigned_classes=assigned or shown,
            current_day_name=DAY_NAMES[self._clock.day_of_week(now)],
            current_time=self._clock.time_of_day(now),
        )

    def teacher_summary(self, ctx: RequestContext, *, now: datetime | None = None) -> dict:
        """Figures behind the dashboard's periodic refresh."""

        ctx.require(Role.TEACHER)
        now = now or self._clock.now()
        cards = [self._card(ctx, c, now) for c in self._classes.list_for_teacher(ctx.user_id)]
        total_students = sum(card.class_info.total_students for card in cards)
        return {
            "totalClasses": len(cards),
            "totalStudents": total_students,
            "attendanceToday": sum(card.attendance_count for card in cards),
            "studentsToday": total_students,
            "classes": [
                {
                    "id": card.class_info.class_id,
                    "name": card.class_info.class_name,
                    "students": card.class_info.total_students,
                    "year": card.class_info.year,
                    "section": card.class_info.section,
                }
                for card in cards
            ],
            "lastUpdated": now.isoformat(timespec="seconds"),
        }

    def admin_stats(self, ctx: RequestContext) -> AdminStats:
        ctx.require(Role.ADMIN)
        by_role = self._users.count_by_role()
        return AdminStats(
            teachers=by_role.get(Role.TEACHER.value, 0),
            students=by_role.get(Role.STUDENT.value, 0),
            classes=len(self._classes.list_all()),
            total_students=self._classes.count_students(),
        )

    def student_summary(self, ctx: RequestContext) -> Optional[StudentSummary]:
        """The caller's own totals, or None when no student record is linked."""

        ctx.require(Role.STUDENT)
        student = self._classes.get_student_by_user(ctx.user_id)
        if not student:
            return None

        entries = self._attendance.list_for_student(student_id=student.student_id)
        present = sum(1 for e in entries if e.status is AttendanceStatus.PRESENT)
        absent = len(entries) - present
        return StudentSummary(
            student=student,
            class_info=self._classes.get_class(student.class_id),
            present_days=present,
            absent_days=absent,
            percentage=attendance_percentage(present, present + absent),
        )
