from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role, SuperRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import conflict_on_duplicate, db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, name, email, phone, username, password_hash, role, super_role, created_at, updated_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row.get("email"),
        phone=row["phone"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        super_role=SuperRole(row["super_role"]) if row.get("super_role") else None,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_identifier(self, identifier: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE username=%s OR email=%s LIMIT 1",
                (identifier, identifier),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def exists_with(self, *, username: str, email: Optional[str], phone: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 FROM users WHERE username=%s OR phone=%s OR (email IS NOT NULL AND email=%s) LIMIT 1",
                (username, phone, email),
            )
            return fetchone(cur) is not None

    def create_user(
        self,
        *,
        name: str,
        email: Optional[str],
        phone: str,
        username: str,
        password_hash: str,
        role: Role,
    ) -> int:
        with conflict_on_duplicate("Username, email or phone already in use"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, email, phone, username, password_hash, role)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (name, email, phone, username, password_hash, role.value),
                )
                return int(cur.lastrowid)

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        email: Optional[str],
        phone: str,
        username: str,
        role: Role,
    ) -> bool:
        with conflict_on_duplicate("Email, phone or username already exists"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE users
                    SET name=%s, email=%s, phone=%s, username=%s, role=%s
                    WHERE user_id=%s
                    """,
                    (name, email, phone, username, role.value, int(user_id)),
                )
                # rowcount is 0 when values are unchanged; confirm the row exists instead
                cur.execute("SELECT 1 FROM users WHERE user_id=%s", (int(user_id),))
                return fetchone(cur) is not None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at DESC")
            return [_to_user(r) for r in fetchall(cur)]

    def list_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM users")
            return [int(r["user_id"]) for r in fetchall(cur)]
