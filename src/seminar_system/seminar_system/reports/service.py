from __future__ import annotations

import io
from datetime import date
from typing import Optional, Sequence

import pandas as pd

from ..common.datetime_utils import today_local
from ..common.validators import require_int
from ..core.constants import DEFAULT_TREND_MONTHS, MAX_TREND_MONTHS
from ..feedback.model import FeedbackStats
from ..feedback.service import FeedbackService
from .model import AttendanceRow, SystemStats
from .repository import ReportRepository

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def month_keys(today: date, months: int) -> list[str]:
    """The last `months` calendar months ending with today's, oldest first."""

    year, month = today.year, today.month
    keys: list[str] = []
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


class ReportService:
    def __init__(self, reports: ReportRepository, feedback: FeedbackService):
        self._reports = reports
        self._feedback = feedback

    def system_stats(self) -> SystemStats:
        return self._reports.system_stats()

    def attendance(self) -> list[dict]:
        return [
            {
                "seminar_id": row.seminar_id,
                "title": row.title,
                "speaker": row.speaker,
                "date": row.date,
                "capacity": row.capacity,
                "registered_count": row.registered_count,
                "available_seats": max(row.capacity - row.registered_count, 0),
                "fill_percentage": row.fill_percentage,
                "is_archived": row.is_archived,
            }
            for row in self._reports.attendance()
        ]

    def feedback_stats(self) -> Sequence[FeedbackStats]:
        return self._feedback.stats()

    def trends(self, *, months: Optional[int] = None, today: Optional[date] = None) -> list[dict]:
        if months is None:
            months = DEFAULT_TREND_MONTHS
        else:
            months = require_int(months, "months", minimum=1, maximum=MAX_TREND_MONTHS)
        today = today or today_local()
        keys = month_keys(today, months)
        first = date(int(keys[0][:4]), int(keys[0][5:]), 1)
        counts = self._reports.registrations_per_month(since=first)
        return [{"month": k, "count": int(counts.get(k, 0))} for k in keys]

    def attendance_xlsx(self) -> bytes:
        rows = self._reports.attendance()
        df = pd.DataFrame(
            [
                {
                    "Seminar ID": r.seminar_id,
                    "Title": r.title,
                    "Speaker": r.speaker,
                    "Date": r.date.isoformat() if r.date else "",
                    "Capacity": r.capacity,
                    "Registered": r.registered_count,
                    "Fill %": r.fill_percentage,
                    "Archived": "Yes" if r.is_archived else "No",
                }
                for r in rows
            ],
            columns=["Seminar ID", "Title", "Speaker", "Date", "Capacity", "Registered", "Fill %", "Archived"],
        )

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Attendance")
        return output.getvalue()
