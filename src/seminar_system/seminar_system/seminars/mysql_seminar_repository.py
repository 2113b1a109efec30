from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Seminar
from .repository import SeminarRepository

_COLUMNS = """
    seminar_id, title, speaker, topic, description, date, time, venue,
    capacity, registered_count, is_archived, archived_at, created_by, created_at, updated_at
"""

# Whitelist for dynamic UPDATE statements.
UPDATABLE_FIELDS = ("title", "speaker", "topic", "description", "date", "time", "venue", "capacity")


def row_to_seminar(row: dict) -> Seminar:
    return Seminar(
        seminar_id=int(row["seminar_id"]),
        title=row["title"],
        speaker=row["speaker"],
        topic=row["topic"],
        description=row["description"],
        capacity=int(row["capacity"]),
        registered_count=int(row.get("registered_count") or 0),
        date=row.get("date"),
        time=row.get("time"),
        venue=row.get("venue"),
        is_archived=bool(row.get("is_archived")),
        archived_at=row.get("archived_at"),
        created_by=row.get("created_by"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLSeminarRepository(SeminarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, seminar_id: int) -> Optional[Seminar]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM seminars WHERE seminar_id=%s", (int(seminar_id),))
            row = fetchone(cur)
            return row_to_seminar(row) if row else None

    def list_seminars(self, *, include_archived: bool = False) -> Sequence[Seminar]:
        where = "" if include_archived else "WHERE is_archived = 0"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM seminars {where} ORDER BY created_at DESC, seminar_id DESC")
            return [row_to_seminar(r) for r in fetchall(cur)]

    def list_on_date(self, day: date) -> Sequence[Seminar]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM seminars WHERE date=%s AND is_archived=0 ORDER BY time, seminar_id",
                (day,),
            )
            return [row_to_seminar(r) for r in fetchall(cur)]

    def create(self, *, fields: Mapping[str, Any], created_by: Optional[int]) -> int:
        columns = [c for c in UPDATABLE_FIELDS if c in fields]
        placeholders = ",".join(["%s"] * (len(columns) + 1))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO seminars({', '.join(columns)}, created_by) VALUES({placeholders})",
                tuple(fields[c] for c in columns) + (created_by,),
            )
            return int(cur.lastrowid)

    def update(self, seminar_id: int, *, fields: Mapping[str, Any]) -> None:
        columns = [c for c in UPDATABLE_FIELDS if c in fields]
        if not columns:
            return
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE seminars SET {assignments} WHERE seminar_id=%s",
                tuple(fields[c] for c in columns) + (int(seminar_id),),
            )

    def delete(self, seminar_id: int) -> bool:
        # schedules/registrations/feedback/certificates cascade via foreign keys
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM seminars WHERE seminar_id=%s", (int(seminar_id),))
            return cur.rowcount > 0

    def mark_archived(self, seminar_id: int, *, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE seminars SET is_archived=1, archived_at=%s WHERE seminar_id=%s",
                (at, int(seminar_id)),
            )
            return cur.rowcount > 0

    def reconcile_counts(self, seminar_id: Optional[int] = None) -> int:
        params: tuple = ()
        where = ""
        if seminar_id is not None:
            where = "WHERE s.seminar_id=%s"
            params = (int(seminar_id),)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE seminars s
                LEFT JOIN (
                    SELECT seminar_id, COUNT(*) AS live
                    FROM registrations
                    GROUP BY seminar_id
                ) r ON r.seminar_id = s.seminar_id
                SET s.registered_count = COALESCE(r.live, 0)
                {where}
                """,
                params,
            )
            return int(cur.rowcount)
