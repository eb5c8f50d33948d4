from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import PeriodInput, TimetablePeriod
from .repository import TimetableRepository

_SELECT = """
    SELECT
        tp.id, tp.class_id, tp.day_of_week, tp.period_number,
        tp.start_time, tp.end_time, tp.subject_id, tp.teacher_id,
        tp.is_break, tp.break_name,
        s.subject_name, s.subject_code,
        u.name AS teacher_name,
        c.class_name
    FROM timetable_periods tp
    LEFT JOIN subjects s ON s.id = tp.subject_id
    LEFT JOIN users u ON u.id = tp.teacher_id
    LEFT JOIN classes c ON c.id = tp.class_id
"""


def _to_period(r: dict) -> TimetablePeriod:
    return TimetablePeriod(
        period_id=int(r["id"]),
        class_id=int(r["class_id"]),
        day_of_week=int(r["day_of_week"]),
        period_number=int(r["period_number"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        subject_id=int(r["subject_id"]) if r.get("subject_id") is not None else None,
        teacher_id=int(r["teacher_id"]) if r.get("teacher_id") is not None else None,
        is_break=bool(r.get("is_break")),
        break_name=r.get("break_name"),
        subject_name=r.get("subject_name"),
        subject_code=r.get("subject_code"),
        teacher_name=r.get("teacher_name"),
        class_name=r.get("class_name"),
    )


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _query(self, where: str, params: tuple, order: str = "tp.day_of_week, tp.period_number") -> list[TimetablePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY {order}", params)
            return [_to_period(r) for r in fetchall(cur)]

    def get(self, period_id: int) -> Optional[TimetablePeriod]:
        rows = self._query("tp.id=%s", (int(period_id),))
        return rows[0] if rows else None

    def list_for_class_day(
        self,
        *,
        class_id: int,
        day_of_week: int,
        teacher_id: Optional[int] = None,
    ) -> Sequence[TimetablePeriod]:
        clauses = ["tp.class_id=%s", "tp.day_of_week=%s"]
        params: list[object] = [int(class_id), int(day_of_week)]
        if teacher_id is not None:
            clauses.append("tp.teacher_id=%s")
            params.append(int(teacher_id))
        return self._query(" AND ".join(clauses), tuple(params))

    def list_for_teacher_day(self, *, teacher_id: int, day_of_week: int) -> Sequence[TimetablePeriod]:
        return self._query(
            "tp.teacher_id=%s AND tp.day_of_week=%s AND tp.is_break=0",
            (int(teacher_id), int(day_of_week)),
            order="c.year, c.section, tp.period_number",
        )

    def list_for_teacher_class(self, *, teacher_id: int, class_id: int) -> Sequence[TimetablePeriod]:
        return self._query(
            "tp.teacher_id=%s AND tp.class_id=%s AND tp.is_break=0",
            (int(teacher_id), int(class_id)),
        )

    def list_for_teacher(self, *, teacher_id: int) -> Sequence[TimetablePeriod]:
        return self._query("tp.teacher_id=%s AND tp.is_break=0", (int(teacher_id),))

    def list_for_class(self, *, class_id: int) -> Sequence[TimetablePeriod]:
        return self._query("tp.class_id=%s", (int(class_id),))

    def teaches_class(self, *, teacher_id: int, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS ok FROM timetable_periods
                WHERE class_id=%s AND teacher_id=%s AND is_break=0
                LIMIT 1
                """,
                (int(class_id), int(teacher_id)),
            )
            return fetchone(cur) is not None

    def upsert(self, data: PeriodInput) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timetable_periods(
                    class_id, day_of_week, period_number, start_time, end_time,
                    subject_id, teacher_id, is_break, break_name
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    start_time=VALUES(start_time), end_time=VALUES(end_time),
                    subject_id=VALUES(subject_id), teacher_id=VALUES(teacher_id),
                    is_break=VALUES(is_break), break_name=VALUES(break_name)
                """,
                (
                    int(data.class_id),
                    int(data.day_of_week),
                    int(data.period_number),
                    data.start_time,
                    data.end_time,
                    data.subject_id,
                    data.teacher_id,
                    1 if data.is_break else 0,
                    data.break_name,
                ),
            )

            # If it was an update, lastrowid can be 0; fetch the id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT id FROM timetable_periods WHERE class_id=%s AND day_of_week=%s AND period_number=%s",
                (int(data.class_id), int(data.day_of_week), int(data.period_number)),
            )
            r = fetchone(cur)
            return int(r["id"]) if r else 0

    def delete(self, *, period_id: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM timetable_periods WHERE id=%s FOR UPDATE", (int(period_id),))
            if not fetchone(cur):
                return None
            cur.execute("SELECT COUNT(*) AS total FROM attendance WHERE period_id=%s", (int(period_id),))
            removed = int(fetchone(cur)["total"])
            cur.execute("DELETE FROM timetable_periods WHERE id=%s", (int(period_id),))
            return removed

    def delete_for_class(self, *, class_id: int) -> tuple[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total FROM attendance a
                JOIN timetable_periods tp ON tp.id = a.period_id
                WHERE tp.class_id=%s
                """,
                (int(class_id),),
            )
            attendance = int(fetchone(cur)["total"])
            cur.execute("DELETE FROM timetable_periods WHERE class_id=%s", (int(class_id),))
            return int(cur.rowcount), attendance
