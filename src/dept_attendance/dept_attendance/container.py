from __future__ import annotations

from dataclasses import dataclass

from .attendance.history import HistoryGridBuilder
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.report import ReportAggregator
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .bookmarks.mysql_bookmark_repository import MySQLBookmarkRepository
from .bookmarks.repository import BookmarkRepository
from .bookmarks.service import BookmarkService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .common.datetime_utils import CivilClock
from .core.constants import DEFAULT_TIME_OFFSET_MINUTES, DEFAULT_TIMEZONE_OFFSET_MINUTES
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .timetable.matcher import PeriodMatcher
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.repository import TimetableRepository
from .timetable.service import TimetableService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    clock: CivilClock

    users_repo: UserRepository
    classes_repo: ClassRepository
    timetable_repo: TimetableRepository
    attendance_repo: AttendanceRepository
    bookmarks_repo: BookmarkRepository

    matcher: PeriodMatcher
    auth_service: AuthService
    timetable_service: TimetableService
    attendance_service: AttendanceService
    history_builder: HistoryGridBuilder
    report_aggregator: ReportAggregator
    bookmark_service: BookmarkService
    dashboard_service: DashboardService


def wire_container(
    *,
    clock: CivilClock,
    users_repo: UserRepository,
    classes_repo: ClassRepository,
    timetable_repo: TimetableRepository,
    attendance_repo: AttendanceRepository,
    bookmarks_repo: BookmarkRepository,
) -> Container:
    """Build the services on top of any set of repositories."""

    matcher = PeriodMatcher(timetable_repo, clock)
    return Container(
        clock=clock,
        users_repo=users_repo,
        classes_repo=classes_repo,
        timetable_repo=timetable_repo,
        attendance_repo=attendance_repo,
        bookmarks_repo=bookmarks_repo,
        matcher=matcher,
        auth_service=AuthService(users_repo),
        timetable_service=TimetableService(timetable_repo, classes_repo, matcher, clock),
        attendance_service=AttendanceService(attendance_repo, classes_repo, timetable_repo, matcher, clock),
        history_builder=HistoryGridBuilder(attendance_repo, classes_repo, timetable_repo, bookmarks_repo),
        report_aggregator=ReportAggregator(attendance_repo, classes_repo, timetable_repo, clock),
        bookmark_service=BookmarkService(bookmarks_repo, classes_repo, timetable_repo),
        dashboard_service=DashboardService(users_repo, classes_repo, timetable_repo, attendance_repo, matcher, clock),
    )


def build_container(
    *,
    db_config: dict,
    utc_offset_minutes: int = DEFAULT_TIMEZONE_OFFSET_MINUTES,
    extra_minutes: int = DEFAULT_TIME_OFFSET_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        clock=CivilClock(utc_offset_minutes=int(utc_offset_minutes), extra_minutes=int(extra_minutes)),
        users_repo=MySQLUserRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        timetable_repo=MySQLTimetableRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        bookmarks_repo=MySQLBookmarkRepository(conn),
    )
