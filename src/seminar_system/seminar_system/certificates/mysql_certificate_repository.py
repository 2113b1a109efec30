from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import CertificateStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Certificate
from .repository import CertificateRepository

_SELECT = """
    SELECT c.certificate_id, c.registration_id, c.seminar_id, c.student_name, c.seminar_title,
           c.certificate_number, c.verification_code, c.status, c.issue_date,
           r.email AS student_email,
           s.date AS seminar_date, s.speaker AS seminar_speaker, s.venue AS seminar_venue
    FROM certificates c
    LEFT JOIN registrations r ON r.registration_id = c.registration_id
    LEFT JOIN seminars s ON s.seminar_id = c.seminar_id
"""


def _row_to_certificate(r: dict) -> Certificate:
    return Certificate(
        certificate_id=int(r["certificate_id"]),
        registration_id=int(r["registration_id"]),
        seminar_id=int(r["seminar_id"]),
        student_name=r["student_name"],
        seminar_title=r["seminar_title"],
        certificate_number=r["certificate_number"],
        verification_code=r["verification_code"],
        status=CertificateStatus(r["status"]),
        issue_date=r.get("issue_date"),
        student_email=r.get("student_email"),
        seminar_date=r.get("seminar_date"),
        seminar_speaker=r.get("seminar_speaker"),
        seminar_venue=r.get("seminar_venue"),
    )


class MySQLCertificateRepository(CertificateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, certificate_id: int) -> Optional[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.certificate_id=%s", (int(certificate_id),))
            r = fetchone(cur)
            return _row_to_certificate(r) if r else None

    def get_by_registration(self, registration_id: int) -> Optional[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.registration_id=%s", (int(registration_id),))
            r = fetchone(cur)
            return _row_to_certificate(r) if r else None

    def find_by_number_and_code(self, *, certificate_number: str, verification_code: str) -> Optional[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE c.certificate_number=%s AND c.verification_code=%s",
                (certificate_number, verification_code),
            )
            r = fetchone(cur)
            return _row_to_certificate(r) if r else None

    def create(
        self,
        *,
        registration_id: int,
        seminar_id: int,
        student_name: str,
        seminar_title: str,
        certificate_number: str,
        verification_code: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO certificates(registration_id, seminar_id, student_name, seminar_title,
                                         certificate_number, verification_code, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(registration_id),
                    int(seminar_id),
                    student_name,
                    seminar_title,
                    certificate_number,
                    verification_code,
                    CertificateStatus.ISSUED.value,
                ),
            )
            return int(cur.lastrowid)

    def set_revoked(self, certificate_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE certificates SET status=%s WHERE certificate_id=%s",
                (CertificateStatus.REVOKED.value, int(certificate_id)),
            )
            cur.execute("SELECT 1 AS found FROM certificates WHERE certificate_id=%s", (int(certificate_id),))
            return fetchone(cur) is not None

    def list_by_email(self, email: str) -> Sequence[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.email=%s ORDER BY c.issue_date DESC", (email,))
            return [_row_to_certificate(r) for r in fetchall(cur)]

    def list_by_seminar(self, seminar_id: int) -> Sequence[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.seminar_id=%s ORDER BY c.issue_date DESC", (int(seminar_id),))
            return [_row_to_certificate(r) for r in fetchall(cur)]
