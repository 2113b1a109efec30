from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, name, email, password_hash, role, phone, institution,
    is_blocked, block_reason, block_date, blocked_by, warning_count, created_at
"""


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        phone=row.get("phone"),
        institution=row.get("institution"),
        is_blocked=bool(row.get("is_blocked")),
        block_reason=row.get("block_reason"),
        block_date=row.get("block_date"),
        blocked_by=row.get("blocked_by"),
        warning_count=int(row.get("warning_count") or 0),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users(name, email, password_hash, role) VALUES(%s,%s,%s,%s)",
                (name, email, password_hash, role.value),
            )
            return int(cur.lastrowid)

    def list_users(self, *, role: Optional[Role] = None) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY created_at DESC, user_id DESC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY created_at DESC, user_id DESC",
                    (role.value,),
                )
            return [_row_to_user(r) for r in fetchall(cur)]

    def set_blocked(self, user_id: int, *, reason: Optional[str], blocked_by: str, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET is_blocked=1, block_reason=%s, block_date=%s, blocked_by=%s
                WHERE user_id=%s
                """,
                (reason, at, blocked_by, int(user_id)),
            )
            return cur.rowcount > 0

    def clear_block(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET is_blocked=0, block_reason=NULL, block_date=NULL, blocked_by=NULL
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            # rowcount is 0 for an already-unblocked user, so check existence separately
            cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s", (int(user_id),))
            return fetchone(cur) is not None

    def add_warning(self, user_id: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET warning_count = warning_count + 1 WHERE user_id=%s", (int(user_id),))
            if cur.rowcount == 0:
                return None
            cur.execute("SELECT warning_count FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return int(row["warning_count"]) if row else None

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def stats(self) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total_users,
                       COALESCE(SUM(role='student'), 0) AS total_students,
                       COALESCE(SUM(role='admin'), 0) AS total_admins,
                       COALESCE(SUM(is_blocked=1), 0) AS blocked_users
                FROM users
                """
            )
            row = fetchone(cur) or {}
            total = int(row.get("total_users") or 0)
            blocked = int(row.get("blocked_users") or 0)
            return {
                "total_users": total,
                "total_students": int(row.get("total_students") or 0),
                "total_admins": int(row.get("total_admins") or 0),
                "blocked_users": blocked,
                "active_users": total - blocked,
            }
