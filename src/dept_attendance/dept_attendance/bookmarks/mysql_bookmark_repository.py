from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import Bookmark
from .repository import BookmarkRepository

_SELECT = """
    SELECT b.id, b.date, b.class_id, b.title, b.description, b.marked_by, u.name AS marked_by_name
    FROM bookmarks b
    LEFT JOIN users u ON u.id = b.marked_by
"""


def _to_bookmark(r: dict) -> Bookmark:
    return Bookmark(
        bookmark_id=int(r["id"]),
        on_date=normalize_mysql_date(r["date"]),
        class_id=int(r["class_id"]),
        title=str(r["title"]),
        description=r.get("description"),
        marked_by=int(r["marked_by"]) if r.get("marked_by") is not None else None,
        marked_by_name=r.get("marked_by_name"),
    )


class MySQLBookmarkRepository(BookmarkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_class(
        self,
        *,
        class_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Bookmark]:
        sql = _SELECT + " WHERE b.class_id=%s"
        params: list[object] = [int(class_id)]
        if start is not None:
            sql += " AND b.date >= %s"
            params.append(start)
        if end is not None:
            sql += " AND b.date <= %s"
            params.append(end)
        sql += " ORDER BY b.date"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_bookmark(r) for r in fetchall(cur)]

    def get(self, bookmark_id: int) -> Optional[Bookmark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE b.id=%s", (int(bookmark_id),))
            r = fetchone(cur)
            return _to_bookmark(r) if r else None

    def upsert(
        self,
        *,
        class_id: int,
        on_date: date,
        title: str,
        description: Optional[str],
        marked_by: int,
    ) -> Bookmark:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO bookmarks(date, class_id, title, description, marked_by)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    title=VALUES(title), description=VALUES(description), marked_by=VALUES(marked_by)
                """,
                (on_date, int(class_id), title, description, int(marked_by)),
            )
            cur.execute(_SELECT + " WHERE b.class_id=%s AND b.date=%s", (int(class_id), on_date))
            return _to_bookmark(fetchone(cur))

    def delete(self, bookmark_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM bookmarks WHERE id=%s", (int(bookmark_id),))
            return cur.rowcount > 0
