from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql_file(db_config: dict, path: Path) -> None:
    sql = _strip_line_comments(_strip_create_db_and_use(path.read_text(encoding="utf-8")))
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _exec_sql_file(db_config, Path(schema_path))
    logger.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _exec_sql_file(db_config, Path(seed_path))
    logger.info("Applied seed %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create (or reset) the demo HOD and teacher accounts.

    Demo students log in with their register id as both username and password.
    """

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(name: str, username: str, password: str, role: str, register_id: str | None = None) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT id FROM users WHERE username=%s", (username,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE users SET name=%s, password_hash=%s, role=%s, register_id=%s WHERE id=%s",
                    (name, password_hash, role, register_id, int(existing["id"])),
                )
                return int(existing["id"])
            cur.execute(
                """
                INSERT INTO users (username, password_hash, role, name, register_id)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (username, password_hash, role, name, register_id),
            )
            return int(cur.lastrowid)

        upsert_user("Head of Department - IT", "hod", "password", "admin")
        teacher_id = upsert_user("Demo Teacher", "teacher1", "password", "teacher")

        # Monday-Friday: period 1 Data Structures, break, period 3 Database Systems.
        for day in range(1, 6):
            for number, start, end, subject_id, is_break, break_name in (
                (1, "09:00", "10:00", 1, 0, None),
                (2, "10:00", "10:15", None, 1, "Tea Break"),
                (3, "10:15", "11:15", 2, 0, None),
            ):
                cur.execute(
                    """
                    INSERT IGNORE INTO timetable_periods
                        (class_id, day_of_week, period_number, start_time, end_time,
                         subject_id, teacher_id, is_break, break_name)
                    VALUES (3, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (day, number, start, end, subject_id, None if is_break else teacher_id, is_break, break_name),
                )

        cur.execute("SELECT id, roll_no, class_id, student_name FROM students WHERE user_id IS NULL")
        for s in cur.fetchall():
            register_id = f"REG{int(s['class_id']):02d}{int(s['roll_no']):03d}"
            user_id = upsert_user(s["student_name"], register_id, register_id, "student", register_id)
            cur.execute("UPDATE students SET user_id=%s WHERE id=%s", (user_id, int(s["id"])))

        cur.execute(
            """
            UPDATE classes c
            SET total_students = (SELECT COUNT(*) FROM students s WHERE s.class_id = c.id)
            """
        )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
