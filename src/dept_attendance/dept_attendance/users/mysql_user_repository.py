from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["id"]),
        username=r["username"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        name=r["name"],
        register_id=r.get("register_id"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, username, password_hash, role, name, register_id FROM users WHERE id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, username, password_hash, role, name, register_id FROM users WHERE username=%s",
                (username,),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None

    def count_by_role(self) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role, COUNT(*) AS total FROM users GROUP BY role")
            return {r["role"]: int(r["total"]) for r in fetchall(cur)}
