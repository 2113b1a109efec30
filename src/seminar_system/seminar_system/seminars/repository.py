from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Seminar


class SeminarRepository(Protocol):
    def get_by_id(self, seminar_id: int) -> Optional[Seminar]:
        raise NotImplementedError

    def list_seminars(self, *, include_archived: bool = False) -> Sequence[Seminar]:
        """Newest first."""

        raise NotImplementedError

    def list_on_date(self, day: date) -> Sequence[Seminar]:
        """Non-archived seminars scheduled on `day`."""

        raise NotImplementedError

    def create(self, *, fields: Mapping[str, Any], created_by: Optional[int]) -> int:
        raise NotImplementedError

    def update(self, seminar_id: int, *, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, seminar_id: int) -> bool:
        """Delete the seminar; schedules and registrations go with it."""

        raise NotImplementedError

    def mark_archived(self, seminar_id: int, *, at: datetime) -> bool:
        raise NotImplementedError

    def reconcile_counts(self, seminar_id: Optional[int] = None) -> int:
        """Reset registered_count from live registration rows.

        Returns the number of seminars whose counter changed.
        """

        raise NotImplementedError
