from __future__ import annotations

import pytest

from src.seminar_system.seminar_system.core.exceptions import NotFoundError, ValidationError
from src.seminar_system.seminar_system.seminars.service import SeminarService
from tests.fakes import add_registration, add_seminar, make_repos

VALID = {
    "title": "Applied ML",
    "speaker": "Dr. Karim",
    "topic": "Machine learning",
    "description": "From baselines to production.",
    "capacity": 3,
    "date": "2026-04-01",
    "time": "2:00 PM",
    "venue": "Lab 2",
}


def test_create_validates_required_fields_and_capacity():
    svc = SeminarService(make_repos().seminars)

    seminar = svc.create(VALID, created_by=7)
    assert seminar.registered_count == 0
    assert seminar.created_by == 7
    assert seminar.date.isoformat() == "2026-04-01"

    with pytest.raises(ValidationError, match="title"):
        svc.create({**VALID, "title": "  "})
    with pytest.raises(ValidationError, match="capacity"):
        svc.create({**VALID, "capacity": 0})
    with pytest.raises(ValidationError):
        svc.create({**VALID, "title": "x" * 201})
    with pytest.raises(ValidationError, match="time"):
        svc.create({**VALID, "time": "t" * 21})
    with pytest.raises(ValidationError, match="capacity"):
        svc.create({**VALID, "capacity": float("inf")})


def test_capacity_cannot_drop_below_registrations():
    repos = make_repos()
    svc = SeminarService(repos.seminars)
    seminar = add_seminar(repos, capacity=5)
    add_registration(repos, seminar, "a@x.com")
    add_registration(repos, seminar, "b@x.com")

    with pytest.raises(ValidationError, match="Cannot reduce capacity"):
        svc.update(seminar.seminar_id, {"capacity": 1})

    updated = svc.update(seminar.seminar_id, {"capacity": 2, "venue": "Hall B"})
    assert updated.capacity == 2
    assert updated.venue == "Hall B"
    assert updated.title == seminar.title


def test_capacity_status_rounds_percentage():
    repos = make_repos()
    svc = SeminarService(repos.seminars)
    seminar = add_seminar(repos, capacity=3)
    add_registration(repos, seminar, "a@x.com")

    status = svc.capacity_status(seminar.seminar_id)
    assert status.available_seats == 2
    assert status.is_full is False
    assert status.percentage_filled == 33


def test_reconcile_repairs_drifted_counter():
    repos = make_repos()
    svc = SeminarService(repos.seminars)
    seminar = add_seminar(repos, capacity=10)
    add_registration(repos, seminar, "a@x.com")
    repos.seminars.set_count(seminar.seminar_id, 4)

    assert svc.reconcile(seminar.seminar_id) == 1
    assert svc.get(seminar.seminar_id).registered_count == 1
    assert svc.reconcile() == 0

    with pytest.raises(NotFoundError):
        svc.reconcile(999)


def test_listing_excludes_archived_by_default():
    repos = make_repos()
    svc = SeminarService(repos.seminars)
    live = add_seminar(repos, title="Live")
    old = add_seminar(repos, title="Old")
    repos.seminars.mark_archived(old.seminar_id, at=None)

    assert [s.seminar_id for s in svc.list_seminars()] == [live.seminar_id]
    assert {s.seminar_id for s in svc.list_seminars(include_archived=True)} == {live.seminar_id, old.seminar_id}
