from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import ER_NO_REFERENCED_ROW, db_cursor, fetchall, fetchone, normalize_mysql_date, normalize_mysql_time
from .model import HistoryEntry, ReportEntry
from .repository import AttendanceRepository


def _to_report_entry(r: dict) -> ReportEntry:
    return ReportEntry(
        student_id=int(r["student_id"]),
        on_date=normalize_mysql_date(r["date"]),
        status=AttendanceStatus(r["status"]),
        period_id=int(r["period_id"]) if r.get("period_id") is not None else None,
        period_teacher_id=int(r["teacher_id"]) if r.get("teacher_id") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_for_period(
        self,
        *,
        student_id: int,
        class_id: int,
        period_id: int,
        on_date: date,
        status: AttendanceStatus,
        marked_by: int,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance(student_id, class_id, period_id, date, status, marked_by)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE status=VALUES(status), marked_by=VALUES(marked_by)
                    """,
                    (int(student_id), int(class_id), int(period_id), on_date, status.value, int(marked_by)),
                )
            except mysql.connector.IntegrityError as e:
                if e.errno == ER_NO_REFERENCED_ROW:
                    raise ConflictError("The period was removed from the timetable, please retry") from e
                raise

    def statuses_for_period(self, *, class_id: int, period_id: int, on_date: date) -> dict[int, AttendanceStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, status FROM attendance
                WHERE class_id=%s AND period_id=%s AND date=%s
                """,
                (int(class_id), int(period_id), on_date),
            )
            return {int(r["student_id"]): AttendanceStatus(r["status"]) for r in fetchall(cur)}

    def count_for_period(self, *, class_id: int, period_id: int, on_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total FROM attendance
                WHERE class_id=%s AND period_id=%s AND date=%s
                """,
                (int(class_id), int(period_id), on_date),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def exists_for_student_date(self, *, student_id: int, on_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS ok FROM attendance WHERE student_id=%s AND date=%s LIMIT 1",
                (int(student_id), on_date),
            )
            return fetchone(cur) is not None

    def update_status_for_student_date(self, *, student_id: int, on_date: date, status: AttendanceStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET status=%s WHERE student_id=%s AND date=%s",
                (status.value, int(student_id), on_date),
            )
            return int(cur.rowcount)

    def insert_manual(
        self,
        *,
        student_id: int,
        class_id: int,
        on_date: date,
        status: AttendanceStatus,
        marked_by: int,
    ) -> int:
        """Insert or overwrite the single period-less row of (student, date)."""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id FROM attendance
                WHERE student_id=%s AND date=%s AND period_id IS NULL
                ORDER BY id
                FOR UPDATE
                """,
                (int(student_id), on_date),
            )
            existing = fetchone(cur)
            if existing:
                cur.execute(
                    "UPDATE attendance SET status=%s, marked_by=%s WHERE id=%s",
                    (status.value, int(marked_by), int(existing["id"])),
                )
                return int(existing["id"])

            cur.execute(
                """
                INSERT INTO attendance(student_id, class_id, period_id, date, status, marked_by)
                VALUES(%s,%s,NULL,%s,%s,%s)
                """,
                (int(student_id), int(class_id), on_date, status.value, int(marked_by)),
            )
            return int(cur.lastrowid or 0)

    def delete_for_student_date(self, *, student_id: int, on_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE student_id=%s AND date=%s", (int(student_id), on_date))
            return int(cur.rowcount)

    def delete_for_class_dates(self, *, class_id: int, dates: Sequence[date]) -> int:
        if not dates:
            return 0
        placeholders = ",".join(["%s"] * len(dates))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM attendance WHERE class_id=%s AND date IN ({placeholders})",
                (int(class_id), *dates),
            )
            return int(cur.rowcount)

    def list_history(self, *, class_id: int, start: date, end: date) -> Sequence[HistoryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    a.student_id, a.date, a.status, a.period_id,
                    tp.period_number, tp.start_time, tp.end_time,
                    sub.subject_name, sub.subject_code
                FROM attendance a
                JOIN students s ON s.id = a.student_id
                LEFT JOIN timetable_periods tp ON tp.id = a.period_id
                LEFT JOIN subjects sub ON sub.id = tp.subject_id
                WHERE s.class_id=%s AND a.date BETWEEN %s AND %s
                ORDER BY a.date, tp.period_number
                """,
                (int(class_id), start, end),
            )
            return [
                HistoryEntry(
                    student_id=int(r["student_id"]),
                    on_date=normalize_mysql_date(r["date"]),
                    status=AttendanceStatus(r["status"]),
                    period_id=int(r["period_id"]) if r.get("period_id") is not None else None,
                    period_number=int(r["period_number"]) if r.get("period_number") is not None else None,
                    start_time=normalize_mysql_time(r.get("start_time")),
                    end_time=normalize_mysql_time(r.get("end_time")),
                    subject_name=r.get("subject_name"),
                    subject_code=r.get("subject_code"),
                )
                for r in fetchall(cur)
            ]

    def list_for_report(self, *, class_id: int, since: Optional[date] = None) -> Sequence[ReportEntry]:
        sql = """
            SELECT a.student_id, a.date, a.status, a.period_id, tp.teacher_id
            FROM attendance a
            JOIN students s ON s.id = a.student_id
            LEFT JOIN timetable_periods tp ON tp.id = a.period_id
            WHERE s.class_id=%s
        """
        params: list[object] = [int(class_id)]
        if since is not None:
            sql += " AND a.date >= %s"
            params.append(since)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_report_entry(r) for r in fetchall(cur)]

    def list_for_student(self, *, student_id: int) -> Sequence[ReportEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.student_id, a.date, a.status, a.period_id, tp.teacher_id
                FROM attendance a
                LEFT JOIN timetable_periods tp ON tp.id = a.period_id
                WHERE a.student_id=%s
                ORDER BY a.date DESC
                """,
                (int(student_id),),
            )
            return [_to_report_entry(r) for r in fetchall(cur)]
