from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Seminar:
    seminar_id: int
    title: str
    speaker: str
    topic: str
    description: str
    capacity: int
    registered_count: int = 0
    date: Optional[date] = None
    time: Optional[str] = None
    venue: Optional[str] = None
    is_archived: bool = False
    archived_at: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def available_seats(self) -> int:
        return self.capacity - self.registered_count

    @property
    def is_full(self) -> bool:
        return self.registered_count >= self.capacity


@dataclass(frozen=True)
class CapacityStatus:
    seminar_id: int
    title: str
    capacity: int
    registered_count: int
    available_seats: int
    is_full: bool
    percentage_filled: int

    @classmethod
    def of(cls, seminar: Seminar) -> "CapacityStatus":
        return cls(
            seminar_id=seminar.seminar_id,
            title=seminar.title,
            capacity=seminar.capacity,
            registered_count=seminar.registered_count,
            available_seats=seminar.available_seats,
            is_full=seminar.is_full,
            # round-half-up to match what clients display
            percentage_filled=int(seminar.registered_count * 100 / seminar.capacity + 0.5) if seminar.capacity else 0,
        )
