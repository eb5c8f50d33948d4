from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClassInfo, Student
from .repository import ClassRepository

# total_students is recomputed instead of trusting the cached column.
_CLASS_COLUMNS = """
    c.id, c.class_name, c.year, c.section,
    (SELECT COUNT(*) FROM students st WHERE st.class_id = c.id) AS total_students
"""


def _to_class(r: dict) -> ClassInfo:
    return ClassInfo(
        class_id=int(r["id"]),
        class_name=r["class_name"],
        year=int(r["year"]),
        section=r["section"],
        total_students=int(r.get("total_students") or 0),
    )


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["id"]),
        class_id=int(r["class_id"]),
        roll_no=int(r["roll_no"]),
        student_name=r["student_name"],
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_class(self, class_id: int) -> Optional[ClassInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CLASS_COLUMNS} FROM classes c WHERE c.id=%s", (int(class_id),))
            r = fetchone(cur)
            return _to_class(r) if r else None

    def find_by_name(self, class_name: str) -> Optional[ClassInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CLASS_COLUMNS} FROM classes c WHERE c.class_name=%s LIMIT 1", (class_name,))
            r = fetchone(cur)
            return _to_class(r) if r else None

    def list_all(self) -> Sequence[ClassInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CLASS_COLUMNS} FROM classes c ORDER BY c.year, c.section")
            return [_to_class(r) for r in fetchall(cur)]

    def list_for_teacher(self, teacher_id: int) -> Sequence[ClassInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CLASS_COLUMNS}
                FROM classes c
                WHERE EXISTS (
                    SELECT 1 FROM timetable_periods tp
                    WHERE tp.class_id = c.id AND tp.teacher_id = %s AND tp.is_break = 0
                )
                ORDER BY c.year, c.section
                """,
                (int(teacher_id),),
            )
            return [_to_class(r) for r in fetchall(cur)]

    def list_students(self, class_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, class_id, roll_no, student_name, user_id
                FROM students
                WHERE class_id=%s
                ORDER BY roll_no
                """,
                (int(class_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get_student_by_user(self, user_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, class_id, roll_no, student_name, user_id FROM students WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def count_students(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM students")
            r = fetchone(cur)
            return int(r["total"]) if r else 0
