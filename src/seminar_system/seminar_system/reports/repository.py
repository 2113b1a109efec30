from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRow, SystemStats


class ReportRepository(Protocol):
    def system_stats(self) -> SystemStats:
        raise NotImplementedError

    def attendance(self) -> Sequence[AttendanceRow]:
        """One row per seminar, most recent date first."""

        raise NotImplementedError

    def registrations_per_month(self, *, since: date) -> dict[str, int]:
        """'YYYY-MM' -> number of registrations made on/after `since`."""

        raise NotImplementedError
