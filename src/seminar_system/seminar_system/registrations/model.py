from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Registration:
    registration_id: int
    seminar_id: int
    student_name: str
    email: str
    student_id: Optional[str] = None
    department: Optional[str] = None
    registration_date: Optional[datetime] = None

    def summary(self) -> dict:
        """Shape returned right after a successful registration."""
        return {
            "id": self.registration_id,
            "name": self.student_name,
            "email": self.email,
            "seminarId": self.seminar_id,
            "timestamp": self.registration_date.isoformat() if self.registration_date else None,
        }
