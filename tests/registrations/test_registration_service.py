from __future__ import annotations

import pytest

from src.seminar_system.seminar_system.core.exceptions import (
    CapacityExceededError,
    DuplicateRegistrationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.seminar_system.seminar_system.notifications.service import NotificationService
from src.seminar_system.seminar_system.registrations.service import RegistrationService
from tests.fakes import FakeRegistrations, FailingSender, add_seminar, make_repos


def _service(repos, notifier=None):
    return RegistrationService(repos.registrations, repos.seminars, notifier)


def test_capacity_one_scenario():
    repos = make_repos()
    seminar = add_seminar(repos, capacity=1)
    svc = _service(repos)

    reg = svc.register(seminar_id=seminar.seminar_id, name="A", email="a@x.com")
    assert reg.registration_id
    assert repos.seminars.get_by_id(seminar.seminar_id).registered_count == 1

    with pytest.raises(CapacityExceededError):
        svc.register(seminar_id=seminar.seminar_id, name="B", email="b@x.com")
    with pytest.raises(DuplicateRegistrationError):
        svc.register(seminar_id=seminar.seminar_id, name="A", email="A@x.com")

    assert repos.seminars.get_by_id(seminar.seminar_id).registered_count == 1


def test_defaults_and_normalisation():
    repos = make_repos()
    seminar = add_seminar(repos)
    reg = _service(repos).register(seminar_id=str(seminar.seminar_id), name=" Rafi ", email="Rafi@Uni.EDU")

    assert reg.email == "rafi@uni.edu"
    assert reg.student_name == "Rafi"
    assert reg.student_id == "rafi"
    assert reg.department == "General"


def test_missing_fields_unknown_and_archived_seminar():
    repos = make_repos()
    svc = _service(repos)
    seminar = add_seminar(repos)

    with pytest.raises(ValidationError, match="required"):
        svc.register(seminar_id=seminar.seminar_id, name="", email="a@x.com")
    with pytest.raises(NotFoundError):
        svc.register(seminar_id=999, name="A", email="a@x.com")

    repos.seminars.mark_archived(seminar.seminar_id, at=None)
    with pytest.raises(InvalidStateError, match="archived"):
        svc.register(seminar_id=seminar.seminar_id, name="A", email="a@x.com")


class _RacingRegistrations(FakeRegistrations):
    """Pre-check sees nothing: the other request commits in between."""

    def find(self, *, seminar_id, email):
        return None


def test_racing_duplicate_is_reported_once():
    repos = make_repos()
    seminar = add_seminar(repos, capacity=5)
    racing = _RacingRegistrations(repos.seminars)
    svc = RegistrationService(racing, repos.seminars)

    svc.register(seminar_id=seminar.seminar_id, name="A", email="a@x.com")
    with pytest.raises(DuplicateRegistrationError):
        svc.register(seminar_id=seminar.seminar_id, name="A", email="a@x.com")

    assert len(racing.rows) == 1
    assert repos.seminars.get_by_id(seminar.seminar_id).registered_count == 1


class _LostSeatRegistrations(FakeRegistrations):
    def create_with_seat(self, **kwargs):
        return 0


def test_lost_seat_claim_is_capacity_exceeded():
    repos = make_repos()
    seminar = add_seminar(repos, capacity=5)
    svc = RegistrationService(_LostSeatRegistrations(repos.seminars), repos.seminars)

    with pytest.raises(CapacityExceededError):
        svc.register(seminar_id=seminar.seminar_id, name="A", email="a@x.com")
    assert repos.seminars.get_by_id(seminar.seminar_id).registered_count == 0


def test_cancel_releases_seat_and_never_goes_negative():
    repos = make_repos()
    seminar = add_seminar(repos, capacity=1)
    svc = _service(repos)
    reg = svc.register(seminar_id=seminar.seminar_id, name="A", email="a@x.com")

    svc.cancel(reg.registration_id)
    assert repos.seminars.get_by_id(seminar.seminar_id).registered_count == 0
    assert repos.registrations.get_by_id(reg.registration_id) is None

    again = svc.register(seminar_id=seminar.seminar_id, name="B", email="b@x.com")
    repos.seminars.set_count(seminar.seminar_id, 0)
    svc.cancel(again.registration_id)
    assert repos.seminars.get_by_id(seminar.seminar_id).registered_count == 0

    with pytest.raises(NotFoundError):
        svc.cancel(again.registration_id)


def test_email_failure_does_not_fail_registration():
    repos = make_repos()
    seminar = add_seminar(repos)

    notifier = NotificationService(
        FailingSender({"a@x.com"}), repos.registrations, repos.seminars, repos.certificates
    )
    reg = _service(repos, notifier).register(seminar_id=seminar.seminar_id, name="A", email="a@x.com")
    assert reg.registration_id


def test_for_seminar_summary():
    repos = make_repos()
    seminar = add_seminar(repos, capacity=3)
    svc = _service(repos)
    svc.register(seminar_id=seminar.seminar_id, name="A", email="a@x.com")
    svc.register(seminar_id=seminar.seminar_id, name="B", email="b@x.com")

    summary = svc.for_seminar(seminar.seminar_id)
    assert summary["count"] == 2
    assert summary["seminar_capacity"] == 3
    assert summary["available_seats"] == 1
    assert [r.email for r in summary["registrations"]] == ["b@x.com", "a@x.com"]
    assert svc.check(seminar_id=seminar.seminar_id, email="A@X.com").student_name == "A"


def test_non_finite_seminar_id_is_a_validation_error():
    repos = make_repos()
    svc = _service(repos)

    for bad in (float("inf"), float("-inf"), float("nan")):
        with pytest.raises(ValidationError, match="seminarId"):
            svc.register(seminar_id=bad, name="A", email="a@x.com")


def test_text_fields_fit_their_columns():
    repos = make_repos()
    seminar = add_seminar(repos)
    svc = _service(repos)

    reg = svc.register(seminar_id=seminar.seminar_id, name="n" * 100, email="a@x.com")
    assert len(reg.student_name) == 100

    with pytest.raises(ValidationError, match="name"):
        svc.register(seminar_id=seminar.seminar_id, name="n" * 101, email="b@x.com")
    with pytest.raises(ValidationError, match="studentId"):
        svc.register(seminar_id=seminar.seminar_id, name="B", email="b@x.com", student_id="s" * 101)
    with pytest.raises(ValidationError, match="department"):
        svc.register(seminar_id=seminar.seminar_id, name="B", email="b@x.com", department="d" * 101)

    # the student id derived from a long local part is cut to the column width
    reg = svc.register(seminar_id=seminar.seminar_id, name="C", email=("c" * 150) + "@x.com")
    assert reg.student_id == "c" * 100
    assert repos.seminars.get_by_id(seminar.seminar_id).registered_count == 2
