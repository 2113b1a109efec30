from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import CertificateStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRow, SystemStats
from .repository import ReportRepository


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def system_stats(self) -> SystemStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    (SELECT COUNT(*) FROM seminars) AS total_seminars,
                    (SELECT COUNT(*) FROM seminars WHERE is_archived=0) AS active_seminars,
                    (SELECT COUNT(*) FROM seminars WHERE is_archived=1) AS archived_seminars,
                    (SELECT COUNT(*) FROM registrations) AS total_registrations,
                    (SELECT COUNT(*) FROM feedback) AS total_feedback,
                    (SELECT COUNT(*) FROM certificates WHERE status=%s) AS certificates_issued,
                    (SELECT COUNT(*) FROM certificates WHERE status=%s) AS certificates_revoked,
                    (SELECT COUNT(*) FROM users) AS total_users,
                    (SELECT COUNT(*) FROM speakers) AS total_speakers
                """,
                (CertificateStatus.ISSUED.value, CertificateStatus.REVOKED.value),
            )
            row = fetchone(cur) or {}
            return SystemStats(**{k: int(v or 0) for k, v in row.items()})

    def attendance(self) -> Sequence[AttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT seminar_id, title, speaker, date, capacity, registered_count, is_archived
                FROM seminars
                ORDER BY date IS NULL, date DESC, seminar_id DESC
                """
            )
            return [
                AttendanceRow(
                    seminar_id=int(r["seminar_id"]),
                    title=r["title"],
                    speaker=r["speaker"],
                    date=r.get("date"),
                    capacity=int(r["capacity"]),
                    registered_count=int(r["registered_count"]),
                    is_archived=bool(r["is_archived"]),
                )
                for r in fetchall(cur)
            ]

    def registrations_per_month(self, *, since: date) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DATE_FORMAT(registration_date, '%%Y-%%m') AS month, COUNT(*) AS total
                FROM registrations
                WHERE registration_date >= %s
                GROUP BY month
                ORDER BY month
                """,
                (since,),
            )
            return {r["month"]: int(r["total"]) for r in fetchall(cur)}
