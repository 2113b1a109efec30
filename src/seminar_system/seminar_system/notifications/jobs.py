"""Daily email jobs (tomorrow's reminders, yesterday's feedback requests).

Each run first claims (job_name, run_date) so that several schedulers
firing on the same day send at most one batch. A run that raises releases
its claim, so a retry sends the day again (recipients reached before the
failure may get a second copy).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import today_local
from ..core.constants import JOB_FEEDBACK_REQUESTS, JOB_TOMORROW_REMINDERS
from ..registrations.repository import RegistrationRepository
from ..seminars.model import Seminar
from ..seminars.repository import SeminarRepository
from .repository import JobRunRepository
from .service import NotificationService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobReport:
    job_name: str
    run_date: date
    target_date: date
    seminars: int = 0
    sent: int = 0
    failed: int = 0
    skipped: bool = False


class DailyJobs:
    def __init__(
        self,
        notifications: NotificationService,
        seminars: SeminarRepository,
        registrations: RegistrationRepository,
        job_runs: JobRunRepository,
    ):
        self._notifications = notifications
        self._seminars = seminars
        self._registrations = registrations
        self._job_runs = job_runs

    def _run(
        self,
        job_name: str,
        today: date,
        target: date,
        send: Callable,
    ) -> JobReport:
        if not self._job_runs.claim(job_name=job_name, run_date=today):
            logger.info("%s already ran for %s, skipping", job_name, today)
            return JobReport(job_name=job_name, run_date=today, target_date=target, skipped=True)

        try:
            seminars: list[Seminar] = list(self._seminars.list_on_date(target))
            logger.info("%s: %d seminar(s) on %s", job_name, len(seminars), target)

            sent = failed = 0
            for seminar in seminars:
                registrations = self._registrations.list_by_seminar(seminar.seminar_id)
                result = self._notifications.deliver_all(registrations, seminar, send)
                sent += result.success
                failed += result.failed
        except Exception:
            # the day stays open for a retry
            logger.exception("%s failed for %s, releasing the claim", job_name, today)
            self._job_runs.release(job_name=job_name, run_date=today)
            raise

        logger.info("%s completed: sent=%d failed=%d", job_name, sent, failed)
        return JobReport(
            job_name=job_name,
            run_date=today,
            target_date=target,
            seminars=len(seminars),
            sent=sent,
            failed=failed,
        )

    def send_tomorrow_reminders(self, today: Optional[date] = None) -> JobReport:
        today = today or today_local()
        return self._run(
            JOB_TOMORROW_REMINDERS, today, today + timedelta(days=1), self._notifications.seminar_reminder
        )

    def send_feedback_requests(self, today: Optional[date] = None) -> JobReport:
        today = today or today_local()
        return self._run(
            JOB_FEEDBACK_REQUESTS, today, today - timedelta(days=1), self._notifications.feedback_request
        )
