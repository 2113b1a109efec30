from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Feedback, FeedbackStats
from .repository import FeedbackRepository

_SELECT = """
    SELECT f.feedback_id, f.registration_id, f.seminar_id, f.rating, f.content_quality,
           f.speaker_effectiveness, f.organization_quality, f.comments, f.suggestions, f.submitted_at,
           r.student_name, r.email AS student_email,
           s.title AS seminar_title, s.date AS seminar_date, s.speaker AS seminar_speaker
    FROM feedback f
    JOIN registrations r ON r.registration_id = f.registration_id
    JOIN seminars s ON s.seminar_id = f.seminar_id
"""


def _row_to_feedback(r: dict) -> Feedback:
    return Feedback(
        feedback_id=int(r["feedback_id"]),
        registration_id=int(r["registration_id"]),
        seminar_id=int(r["seminar_id"]),
        rating=int(r["rating"]),
        content_quality=int(r["content_quality"]),
        speaker_effectiveness=int(r["speaker_effectiveness"]),
        organization_quality=int(r["organization_quality"]),
        comments=r.get("comments"),
        suggestions=r.get("suggestions"),
        submitted_at=r.get("submitted_at"),
        student_name=r.get("student_name"),
        student_email=r.get("student_email"),
        seminar_title=r.get("seminar_title"),
        seminar_date=r.get("seminar_date"),
        seminar_speaker=r.get("seminar_speaker"),
    )


class MySQLFeedbackRepository(FeedbackRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, feedback_id: int) -> Optional[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE f.feedback_id=%s", (int(feedback_id),))
            r = fetchone(cur)
            return _row_to_feedback(r) if r else None

    def get_by_registration(self, registration_id: int) -> Optional[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE f.registration_id=%s", (int(registration_id),))
            r = fetchone(cur)
            return _row_to_feedback(r) if r else None

    def create(
        self,
        *,
        registration_id: int,
        seminar_id: int,
        rating: int,
        content_quality: int,
        speaker_effectiveness: int,
        organization_quality: int,
        comments: Optional[str],
        suggestions: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO feedback(registration_id, seminar_id, rating, content_quality,
                                     speaker_effectiveness, organization_quality, comments, suggestions)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(registration_id),
                    int(seminar_id),
                    rating,
                    content_quality,
                    speaker_effectiveness,
                    organization_quality,
                    comments,
                    suggestions,
                ),
            )
            return int(cur.lastrowid)

    def list_by_seminar(self, seminar_id: int) -> Sequence[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE f.seminar_id=%s ORDER BY f.submitted_at DESC", (int(seminar_id),))
            return [_row_to_feedback(r) for r in fetchall(cur)]

    def list_by_email(self, email: str) -> Sequence[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.email=%s ORDER BY f.submitted_at DESC", (email,))
            return [_row_to_feedback(r) for r in fetchall(cur)]

    def stats_by_seminar(self) -> Sequence[FeedbackStats]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT f.seminar_id, s.title AS seminar_title,
                       AVG(f.rating) AS average_rating,
                       AVG(f.content_quality) AS average_content_quality,
                       AVG(f.speaker_effectiveness) AS average_speaker_effectiveness,
                       AVG(f.organization_quality) AS average_organization_quality,
                       COUNT(*) AS count
                FROM feedback f
                JOIN seminars s ON s.seminar_id = f.seminar_id
                GROUP BY f.seminar_id, s.title
                """
            )
            return [
                FeedbackStats(
                    seminar_id=int(r["seminar_id"]),
                    seminar_title=r["seminar_title"],
                    average_rating=float(r["average_rating"]),
                    average_content_quality=float(r["average_content_quality"]),
                    average_speaker_effectiveness=float(r["average_speaker_effectiveness"]),
                    average_organization_quality=float(r["average_organization_quality"]),
                    count=int(r["count"]),
                )
                for r in fetchall(cur)
            ]
