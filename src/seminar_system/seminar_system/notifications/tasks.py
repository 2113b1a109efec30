from __future__ import annotations

import logging
from functools import lru_cache

from config import load_settings

from ..common.datetime_utils import today_in
from ..common.serialization import to_json
from ..core.log import configure_logging
from .celery_app import celery_app

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _daily_jobs():
    # Imported lazily so the worker only touches the database when a job runs.
    from ..container import build_container

    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)
    return container.daily_jobs, getattr(settings, "SCHEDULER_TIMEZONE", None)


@celery_app.task(name="notifications.send_tomorrow_reminders")
def send_tomorrow_reminders() -> dict:
    jobs, tz = _daily_jobs()
    report = jobs.send_tomorrow_reminders(today_in(tz))
    logger.info("Reminder job for %s: %s", report.target_date, "skipped" if report.skipped else report.sent)
    return to_json(report)


@celery_app.task(name="notifications.send_feedback_requests")
def send_feedback_requests() -> dict:
    jobs, tz = _daily_jobs()
    report = jobs.send_feedback_requests(today_in(tz))
    logger.info("Feedback request job for %s: %s", report.target_date, "skipped" if report.skipped else report.sent)
    return to_json(report)
