from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class ScheduleView:
    """Schedule joined with the headline fields of its seminar."""

    schedule_id: int
    seminar_id: int
    date: date
    time: str
    is_active: bool
    seminar_title: Optional[str] = None
    seminar_speaker: Optional[str] = None
    seminar_topic: Optional[str] = None
