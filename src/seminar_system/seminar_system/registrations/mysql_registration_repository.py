from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Registration
from .repository import RegistrationRepository

_COLUMNS = "registration_id, seminar_id, student_name, student_id, email, department, registration_date"


def row_to_registration(r: dict) -> Registration:
    return Registration(
        registration_id=int(r["registration_id"]),
        seminar_id=int(r["seminar_id"]),
        student_name=r["student_name"],
        email=r["email"],
        student_id=r.get("student_id"),
        department=r.get("department"),
        registration_date=r.get("registration_date"),
    )


class MySQLRegistrationRepository(RegistrationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, registration_id: int) -> Optional[Registration]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM registrations WHERE registration_id=%s", (int(registration_id),))
            r = fetchone(cur)
            return row_to_registration(r) if r else None

    def find(self, *, seminar_id: int, email: str) -> Optional[Registration]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM registrations WHERE seminar_id=%s AND email=%s",
                (int(seminar_id), email),
            )
            r = fetchone(cur)
            return row_to_registration(r) if r else None

    def list_by_seminar(self, seminar_id: int) -> Sequence[Registration]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM registrations
                WHERE seminar_id=%s
                ORDER BY registration_date DESC, registration_id DESC
                """,
                (int(seminar_id),),
            )
            return [row_to_registration(r) for r in fetchall(cur)]

    def list_by_email(self, email: str) -> Sequence[Registration]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM registrations
                WHERE email=%s
                ORDER BY registration_date DESC, registration_id DESC
                """,
                (email,),
            )
            return [row_to_registration(r) for r in fetchall(cur)]

    def create_with_seat(
        self,
        *,
        seminar_id: int,
        student_name: str,
        student_id: str,
        email: str,
        department: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (conn, cur):
            # The unique index (seminar_id, email) rejects duplicates here.
            cur.execute(
                """
                INSERT INTO registrations(seminar_id, student_name, student_id, email, department)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(seminar_id), student_name, student_id, email, department),
            )
            registration_id = int(cur.lastrowid)

            # Seat claim; the row lock serialises concurrent claims on one seminar.
            cur.execute(
                """
                UPDATE seminars
                SET registered_count = registered_count + 1
                WHERE seminar_id=%s AND registered_count < capacity AND is_archived = 0
                """,
                (int(seminar_id),),
            )
            if cur.rowcount == 0:
                conn.rollback()
                return 0
            return registration_id

    def cancel(self, registration_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT seminar_id FROM registrations WHERE registration_id=%s FOR UPDATE",
                (int(registration_id),),
            )
            r = fetchone(cur)
            if not r:
                return False
            cur.execute("DELETE FROM registrations WHERE registration_id=%s", (int(registration_id),))
            cur.execute(
                "UPDATE seminars SET registered_count = GREATEST(registered_count - 1, 0) WHERE seminar_id=%s",
                (int(r["seminar_id"]),),
            )
            return True
