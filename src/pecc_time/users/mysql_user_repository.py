from __future__ import annotations

import dataclasses
from typing import Any, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "id, name, role, password, force_password_change"


def _row_to_user(row: dict[str, Any]) -> User:
    return User(
        id=int(row["id"]),
        name=row["name"],
        role=Role(row["role"]),
        password=row["password"],
        force_password_change=bool(row.get("force_password_change", False)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY id")
            return [_row_to_user(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def find_by_credentials(self, name: str, password: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE name=%s AND password=%s ORDER BY id LIMIT 1",
                (name, password),
            )
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create(self, user: User) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, role, password, force_password_change)
                VALUES(%s,%s,%s,%s)
                """,
                (user.name, user.role.value, user.password, int(user.force_password_change)),
            )
            return dataclasses.replace(user, id=int(cur.lastrowid))

    def save(self, user: User) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET name=%s, role=%s, password=%s, force_password_change=%s
                WHERE id=%s
                """,
                (user.name, user.role.value, user.password, int(user.force_password_change), int(user.id)),
            )
        return user

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (int(user_id),))
            return cur.rowcount > 0
