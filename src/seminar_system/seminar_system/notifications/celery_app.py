"""Celery application running the two daily email jobs on beat.

Worker:  celery -A src.seminar_system.seminar_system.notifications.celery_app worker -B -l info
"""

from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from config import load_settings


def make_celery(settings=None) -> Celery:
    settings = settings or load_settings()
    tz = getattr(settings, "SCHEDULER_TIMEZONE", "Asia/Dhaka")

    app = Celery(
        "seminar_system",
        broker=getattr(settings, "CELERY_BROKER_URL", "redis://localhost:6379/0"),
        include=[__name__.rsplit(".", 1)[0] + ".tasks"],
    )
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        task_ignore_result=True,
        timezone=tz,
        enable_utc=False,
        broker_connection_retry_on_startup=True,
    )
    app.conf.beat_schedule = {
        "tomorrow-reminders": {
            "task": "notifications.send_tomorrow_reminders",
            "schedule": crontab(hour=int(getattr(settings, "REMINDER_HOUR", 9)), minute=0),
        },
        "feedback-requests": {
            "task": "notifications.send_feedback_requests",
            "schedule": crontab(hour=int(getattr(settings, "FEEDBACK_REQUEST_HOUR", 10)), minute=0),
        },
    }
    return app


celery_app = make_celery()
