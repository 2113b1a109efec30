from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ScheduleView


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[ScheduleView]:
        raise NotImplementedError

    def create(self, *, seminar_id: int, day: date, time: str) -> int:
        raise NotImplementedError

    def update(self, schedule_id: int, *, day: Optional[date], time: Optional[str], is_active: Optional[bool]) -> bool:
        """Returns False when the schedule does not exist."""

        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[ScheduleView]:
        """Ordered by date, then time."""

        raise NotImplementedError
