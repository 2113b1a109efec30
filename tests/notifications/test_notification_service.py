from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from src.seminar_system.seminar_system.core.exceptions import NotFoundError
from src.seminar_system.seminar_system.notifications.jobs import DailyJobs
from src.seminar_system.seminar_system.notifications.mailer import ConsoleEmailSender, SMTPEmailSender, build_sender
from src.seminar_system.seminar_system.notifications.service import NotificationService
from src.seminar_system.seminar_system.notifications.templates import render
from tests.fakes import FailingSender, add_registration, add_seminar, make_repos

TODAY = date(2026, 3, 19)


def _notifications(repos, sender):
    return NotificationService(sender, repos.registrations, repos.seminars, repos.certificates,
                               frontend_url="https://seminex.test/")


def test_one_failed_recipient_does_not_stop_the_rest():
    repos = make_repos()
    seminar = add_seminar(repos)
    for email in ("a@x.com", "b@x.com", "c@x.com"):
        add_registration(repos, seminar, email)
    sender = FailingSender({"b@x.com"})

    result = _notifications(repos, sender).send_seminar_reminders(seminar.seminar_id)

    assert (result.success, result.failed) == (2, 1)
    assert sorted(to for to, _ in sender.sent) == ["a@x.com", "c@x.com"]
    assert all(subject.startswith("Reminder: ") for _, subject in sender.sent)


def test_broadcast_without_registrations_is_not_found():
    repos = make_repos()
    seminar = add_seminar(repos)
    svc = _notifications(repos, FailingSender())

    with pytest.raises(NotFoundError):
        svc.send_cancellation_notices(seminar.seminar_id)
    with pytest.raises(NotFoundError):
        svc.send_feedback_requests(404)


def test_feedback_request_links_to_registration():
    repos = make_repos()
    seminar = add_seminar(repos, title="Rust <for> Pythonistas")
    reg = add_registration(repos, seminar, "a@x.com", name="Ana")
    sender = ConsoleEmailSender()

    _notifications(repos, sender).feedback_request(reg, seminar)

    (msg,) = sender.outbox
    html = msg.get_body(preferencelist=("html",)).get_content()
    assert f"https://seminex.test/feedback/{reg.registration_id}" in html
    assert "Rust &lt;for&gt; Pythonistas" in html
    assert "Ana" in html


def test_templates_render_missing_date_as_tba():
    repos = make_repos()
    seminar = add_seminar(repos, date=None, time=None, venue=None)
    reg = add_registration(repos, seminar, "a@x.com")

    html = render("seminar_reminder.html", registration=reg, seminar=seminar)
    assert "To be announced" in html


def test_daily_jobs_pick_tomorrow_and_yesterday():
    repos = make_repos()
    tomorrow = add_seminar(repos, title="Tomorrow", date=date(2026, 3, 20))
    yesterday = add_seminar(repos, title="Yesterday", date=date(2026, 3, 18))
    later = add_seminar(repos, title="Later", date=date(2026, 3, 25))
    archived = add_seminar(repos, title="Archived", date=date(2026, 3, 20))
    for seminar in (tomorrow, yesterday, later, archived):
        add_registration(repos, seminar, f"{seminar.title.lower()}@x.com")
    repos.seminars.mark_archived(archived.seminar_id, at=None)

    sender = FailingSender()
    notifications = _notifications(repos, sender)
    jobs = DailyJobs(notifications, repos.seminars, repos.registrations, repos.job_runs)

    reminders = jobs.send_tomorrow_reminders(TODAY)
    assert (reminders.target_date, reminders.seminars, reminders.sent) == (date(2026, 3, 20), 1, 1)

    requests = jobs.send_feedback_requests(TODAY)
    assert (requests.target_date, requests.seminars, requests.sent) == (date(2026, 3, 18), 1, 1)

    assert [to for to, _ in sender.sent] == ["tomorrow@x.com", "yesterday@x.com"]


def test_daily_job_runs_once_per_day():
    repos = make_repos()
    seminar = add_seminar(repos, date=date(2026, 3, 20))
    add_registration(repos, seminar, "a@x.com")
    sender = FailingSender()
    jobs = DailyJobs(_notifications(repos, sender), repos.seminars, repos.registrations, repos.job_runs)

    assert jobs.send_tomorrow_reminders(TODAY).sent == 1
    second = jobs.send_tomorrow_reminders(TODAY)
    assert second.skipped is True
    assert len(sender.sent) == 1

    # feedback requests have their own claim
    assert jobs.send_feedback_requests(TODAY).skipped is False


def test_failed_daily_job_can_be_retried_the_same_day(monkeypatch):
    repos = make_repos()
    seminar = add_seminar(repos, date=date(2026, 3, 20))
    add_registration(repos, seminar, "a@x.com")
    sender = FailingSender()
    jobs = DailyJobs(_notifications(repos, sender), repos.seminars, repos.registrations, repos.job_runs)
    list_on_date = repos.seminars.list_on_date
    calls = []

    def flaky_list_on_date(day):
        calls.append(day)
        if len(calls) == 1:
            raise RuntimeError("database unavailable")
        return list_on_date(day)

    monkeypatch.setattr(repos.seminars, "list_on_date", flaky_list_on_date)

    with pytest.raises(RuntimeError):
        jobs.send_tomorrow_reminders(TODAY)
    assert sender.sent == []

    retry = jobs.send_tomorrow_reminders(TODAY)
    assert (retry.skipped, retry.sent) == (False, 1)
    assert jobs.send_tomorrow_reminders(TODAY).skipped is True
    assert [to for to, _ in sender.sent] == ["a@x.com"]


def test_build_sender_follows_mail_backend():
    assert isinstance(build_sender(SimpleNamespace(MAIL_BACKEND="console")), ConsoleEmailSender)
    smtp = build_sender(SimpleNamespace(MAIL_BACKEND="smtp", SMTP_HOST="mail.test", SMTP_PORT=2525))
    assert isinstance(smtp, SMTPEmailSender)
