from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Feedback:
    feedback_id: int
    registration_id: int
    seminar_id: int
    rating: int
    content_quality: int
    speaker_effectiveness: int
    organization_quality: int
    comments: Optional[str] = None
    suggestions: Optional[str] = None
    submitted_at: Optional[datetime] = None
    # joined columns, filled by listing queries only
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    seminar_title: Optional[str] = None
    seminar_date: Optional[date] = None
    seminar_speaker: Optional[str] = None


@dataclass(frozen=True)
class FeedbackStats:
    """Averages of one seminar's feedback (rounded to one decimal)."""

    seminar_id: int
    seminar_title: str
    average_rating: float
    average_content_quality: float
    average_speaker_effectiveness: float
    average_organization_quality: float
    count: int
