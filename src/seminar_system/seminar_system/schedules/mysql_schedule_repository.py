from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ScheduleView
from .repository import ScheduleRepository

_SELECT = """
    SELECT sc.schedule_id, sc.seminar_id, sc.date, sc.time, sc.is_active,
           s.title AS seminar_title, s.speaker AS seminar_speaker, s.topic AS seminar_topic
    FROM schedules sc
    JOIN seminars s ON s.seminar_id = sc.seminar_id
"""


def _row_to_view(r: dict) -> ScheduleView:
    return ScheduleView(
        schedule_id=int(r["schedule_id"]),
        seminar_id=int(r["seminar_id"]),
        date=r["date"],
        time=r["time"],
        is_active=bool(r["is_active"]),
        seminar_title=r.get("seminar_title"),
        seminar_speaker=r.get("seminar_speaker"),
        seminar_topic=r.get("seminar_topic"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[ScheduleView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE sc.schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _row_to_view(r) if r else None

    def create(self, *, seminar_id: int, day: date, time: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO schedules(seminar_id, date, time) VALUES(%s,%s,%s)",
                (int(seminar_id), day, time),
            )
            return int(cur.lastrowid)

    def update(self, schedule_id: int, *, day: Optional[date], time: Optional[str], is_active: Optional[bool]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedules
                SET date=COALESCE(%s, date), time=COALESCE(%s, time), is_active=COALESCE(%s, is_active)
                WHERE schedule_id=%s
                """,
                (day, time, None if is_active is None else int(is_active), int(schedule_id)),
            )
            # unchanged rows report rowcount 0; existence decides the outcome
            cur.execute("SELECT 1 AS found FROM schedules WHERE schedule_id=%s", (int(schedule_id),))
            return fetchone(cur) is not None

    def delete(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[ScheduleView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY sc.date ASC, sc.time ASC")
            return [_row_to_view(r) for r in fetchall(cur)]
