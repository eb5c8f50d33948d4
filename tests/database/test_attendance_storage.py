from __future__ import annotations

from datetime import date
from pathlib import Path

from src.dept_attendance.dept_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.dept_attendance.dept_attendance.core.enums import AttendanceStatus
from src.dept_attendance.dept_attendance.database.bootstrap import (
    _iter_sql_statements,
    _strip_create_db_and_use,
    _strip_line_comments,
)

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def _attendance_table() -> str:
    sql = _strip_line_comments(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8")))
    [stmt] = [s for s in _iter_sql_statements(sql) if "CREATE TABLE IF NOT EXISTS attendance" in s]
    return " ".join(stmt.split())


class FakeCursor:
    def __init__(self, rows):
        self.rows = list(rows)
        self.executed: list[str] = []
        self.lastrowid = 42
        self.rowcount = 1

    def execute(self, sql, params=()):
        self.executed.append(" ".join(sql.split()))

    def fetchone(self):
        return self.rows.pop(0) if self.rows else None

    def fetchall(self):
        return []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeFactory:
    def __init__(self, *rows):
        self.cursor = FakeCursor(rows)
        self.conn = FakeConnection(self.cursor)

    def connect(self, *, with_database: bool = True):
        return self.conn


def test_attendance_period_fk_cascades_without_generated_columns():
    table = _attendance_table()

    assert "FOREIGN KEY (period_id) REFERENCES timetable_periods(id) ON DELETE CASCADE" in table
    assert "STORED" not in table and "VIRTUAL" not in table and " AS (" not in table
    assert "UNIQUE (student_id, date, period_id)" in table


def test_insert_manual_locks_and_inserts_when_no_row_exists():
    factory = FakeFactory()
    repo = MySQLAttendanceRepository(factory)

    new_id = repo.insert_manual(
        student_id=1, class_id=3, on_date=date(2025, 1, 6), status=AttendanceStatus.PRESENT, marked_by=2
    )

    select, insert = factory.cursor.executed
    assert "period_id IS NULL" in select and select.endswith("FOR UPDATE")
    assert insert.startswith("INSERT INTO attendance")
    assert new_id == 42
    assert factory.conn.committed


def test_insert_manual_overwrites_existing_period_less_row():
    factory = FakeFactory({"id": 7})
    repo = MySQLAttendanceRepository(factory)

    row_id = repo.insert_manual(
        student_id=1, class_id=3, on_date=date(2025, 1, 6), status=AttendanceStatus.ABSENT, marked_by=2
    )

    assert row_id == 7
    assert [sql.split()[0] for sql in factory.cursor.executed] == ["SELECT", "UPDATE"]
