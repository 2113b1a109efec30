from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class SystemStats:
    total_seminars: int = 0
    active_seminars: int = 0
    archived_seminars: int = 0
    total_registrations: int = 0
    total_feedback: int = 0
    certificates_issued: int = 0
    certificates_revoked: int = 0
    total_users: int = 0
    total_speakers: int = 0


@dataclass(frozen=True)
class AttendanceRow:
    seminar_id: int
    title: str
    speaker: str
    date: Optional[date]
    capacity: int
    registered_count: int
    is_archived: bool = False

    @property
    def fill_percentage(self) -> int:
        if not self.capacity:
            return 0
        return int(self.registered_count * 100 / self.capacity + 0.5)
