from __future__ import annotations

from types import SimpleNamespace

from src.seminar_system.seminar_system.notifications.celery_app import make_celery


def test_beat_runs_both_jobs_daily_in_configured_timezone():
    app = make_celery(
        SimpleNamespace(
            CELERY_BROKER_URL="memory://",
            SCHEDULER_TIMEZONE="Asia/Dhaka",
            REMINDER_HOUR=9,
            FEEDBACK_REQUEST_HOUR=10,
        )
    )

    schedule = app.conf.beat_schedule
    assert schedule["tomorrow-reminders"]["task"] == "notifications.send_tomorrow_reminders"
    assert schedule["tomorrow-reminders"]["schedule"].hour == {9}
    assert schedule["feedback-requests"]["schedule"].hour == {10}
    assert app.conf.timezone == "Asia/Dhaka"
