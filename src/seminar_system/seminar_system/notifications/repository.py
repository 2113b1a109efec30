from __future__ import annotations

from datetime import date
from typing import Protocol


class JobRunRepository(Protocol):
    def claim(self, *, job_name: str, run_date: date) -> bool:
        """Record that `job_name` runs for `run_date`.

        Returns False when another worker already claimed the same day.
        """

        raise NotImplementedError

    def release(self, *, job_name: str, run_date: date) -> None:
        """Drop a claim so a later firing on the same day runs the job again."""

        raise NotImplementedError
