"""In-memory repositories shared by the service and controller tests.

They follow the MySQL repositories' contracts, including the unique keys
(`DuplicateKeyError`) and the conditional seat claim of `create_with_seat`.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Any, Optional

from src.seminar_system.seminar_system.archives.model import ArchiveMaterial, NewMaterial, SeminarArchive
from src.seminar_system.seminar_system.archives.storage import MaterialStorage
from src.seminar_system.seminar_system.certificates.model import Certificate
from src.seminar_system.seminar_system.container import Container, Repositories, assemble
from src.seminar_system.seminar_system.core.enums import CertificateStatus, Role
from src.seminar_system.seminar_system.database.mysql_base import DuplicateKeyError
from src.seminar_system.seminar_system.feedback.model import Feedback, FeedbackStats
from src.seminar_system.seminar_system.notifications.mailer import ConsoleEmailSender
from src.seminar_system.seminar_system.registrations.model import Registration
from src.seminar_system.seminar_system.reports.model import AttendanceRow, SystemStats
from src.seminar_system.seminar_system.schedules.model import ScheduleView
from src.seminar_system.seminar_system.seminars.model import Seminar
from src.seminar_system.seminar_system.speakers.model import Speaker
from src.seminar_system.seminar_system.users.model import User
from src.seminar_system.seminar_system.users.tokens import TokenService

NOW = datetime(2026, 3, 10, 9, 0, 0)


class _Ids:
    def __init__(self):
        self._next = 0

    def __call__(self) -> int:
        self._next += 1
        return self._next


class FakeUsers:
    def __init__(self):
        self.rows: dict[int, User] = {}
        self._ids = _Ids()

    def get_by_id(self, user_id):
        return self.rows.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.rows.values() if u.email == email), None)

    def create_user(self, *, name, email, password_hash, role):
        if self.get_by_email(email):
            raise DuplicateKeyError("uq_users_email")
        user_id = self._ids()
        self.rows[user_id] = User(
            user_id=user_id, name=name, email=email, password_hash=password_hash, role=role, created_at=NOW
        )
        return user_id

    def list_users(self, *, role=None):
        users = [u for u in self.rows.values() if role is None or u.role == role]
        return sorted(users, key=lambda u: u.user_id, reverse=True)

    def _replace(self, user_id, **changes) -> bool:
        user = self.rows.get(int(user_id))
        if not user:
            return False
        self.rows[user.user_id] = dataclasses.replace(user, **changes)
        return True

    def set_blocked(self, user_id, *, reason, blocked_by, at):
        return self._replace(user_id, is_blocked=True, block_reason=reason, blocked_by=blocked_by, block_date=at)

    def clear_block(self, user_id):
        return self._replace(user_id, is_blocked=False, block_reason=None, blocked_by=None, block_date=None)

    def add_warning(self, user_id):
        user = self.rows.get(int(user_id))
        if not user:
            return None
        self._replace(user_id, warning_count=user.warning_count + 1)
        return user.warning_count + 1

    def delete_by_id(self, user_id):
        return self.rows.pop(int(user_id), None) is not None

    def stats(self):
        users = list(self.rows.values())
        blocked = sum(1 for u in users if u.is_blocked)
        return {
            "total_users": len(users),
            "total_students": sum(1 for u in users if u.role == Role.STUDENT),
            "total_admins": sum(1 for u in users if u.role == Role.ADMIN),
            "blocked_users": blocked,
            "active_users": len(users) - blocked,
        }


class FakeSeminars:
    def __init__(self):
        self.rows: dict[int, Seminar] = {}
        self.registrations: Optional["FakeRegistrations"] = None
        self._ids = _Ids()

    def get_by_id(self, seminar_id):
        return self.rows.get(int(seminar_id))

    def list_seminars(self, *, include_archived=False):
        rows = [s for s in self.rows.values() if include_archived or not s.is_archived]
        return sorted(rows, key=lambda s: s.seminar_id, reverse=True)

    def list_on_date(self, day):
        return [s for s in self.rows.values() if s.date == day and not s.is_archived]

    def create(self, *, fields, created_by):
        seminar_id = self._ids()
        self.rows[seminar_id] = Seminar(seminar_id=seminar_id, created_by=created_by, created_at=NOW, **fields)
        return seminar_id

    def update(self, seminar_id, *, fields):
        seminar = self.rows[int(seminar_id)]
        self.rows[seminar.seminar_id] = dataclasses.replace(seminar, **fields)

    def delete(self, seminar_id):
        seminar = self.rows.pop(int(seminar_id), None)
        if seminar and self.registrations:
            for reg in list(self.registrations.rows.values()):
                if reg.seminar_id == seminar.seminar_id:
                    del self.registrations.rows[reg.registration_id]
        return seminar is not None

    def mark_archived(self, seminar_id, *, at):
        seminar = self.rows.get(int(seminar_id))
        if not seminar:
            return False
        self.rows[seminar.seminar_id] = dataclasses.replace(seminar, is_archived=True, archived_at=at)
        return True

    def set_count(self, seminar_id: int, count: int) -> None:
        self.rows[seminar_id] = dataclasses.replace(self.rows[seminar_id], registered_count=count)

    def reconcile_counts(self, seminar_id=None):
        changed = 0
        for seminar in list(self.rows.values()):
            if seminar_id is not None and seminar.seminar_id != int(seminar_id):
                continue
            live = sum(1 for r in self.registrations.rows.values() if r.seminar_id == seminar.seminar_id)
            if live != seminar.registered_count:
                self.set_count(seminar.seminar_id, live)
                changed += 1
        return changed


class FakeSpeakers:
    def __init__(self):
        self.rows: dict[int, Speaker] = {}
        self._ids = _Ids()

    def get_by_id(self, speaker_id):
        return self.rows.get(int(speaker_id))

    def get_by_email(self, email):
        return next((s for s in self.rows.values() if s.email == email), None)

    def list_all(self):
        return sorted(self.rows.values(), key=lambda s: s.name)

    def create(self, *, fields):
        if self.get_by_email(fields["email"]):
            raise DuplicateKeyError("uq_speakers_email")
        speaker_id = self._ids()
        self.rows[speaker_id] = Speaker(speaker_id=speaker_id, created_at=NOW, **fields)
        return speaker_id

    def update(self, speaker_id, *, fields):
        speaker = self.rows[int(speaker_id)]
        self.rows[speaker.speaker_id] = dataclasses.replace(speaker, **fields)

    def delete(self, speaker_id):
        return self.rows.pop(int(speaker_id), None) is not None


class FakeSchedules:
    def __init__(self, seminars: FakeSeminars):
        self._seminars = seminars
        self.rows: dict[int, dict] = {}
        self._ids = _Ids()

    def _view(self, row: dict) -> ScheduleView:
        seminar = self._seminars.get_by_id(row["seminar_id"])
        return ScheduleView(
            schedule_id=row["schedule_id"],
            seminar_id=row["seminar_id"],
            date=row["date"],
            time=row["time"],
            is_active=row["is_active"],
            seminar_title=seminar.title if seminar else None,
            seminar_speaker=seminar.speaker if seminar else None,
            seminar_topic=seminar.topic if seminar else None,
        )

    def get_by_id(self, schedule_id):
        row = self.rows.get(int(schedule_id))
        return self._view(row) if row else None

    def create(self, *, seminar_id, day, time):
        schedule_id = self._ids()
        self.rows[schedule_id] = {
            "schedule_id": schedule_id, "seminar_id": seminar_id, "date": day, "time": time, "is_active": True,
        }
        return schedule_id

    def update(self, schedule_id, *, day, time, is_active):
        row = self.rows.get(int(schedule_id))
        if not row:
            return False
        if day is not None:
            row["date"] = day
        if time is not None:
            row["time"] = time
        if is_active is not None:
            row["is_active"] = bool(is_active)
        return True

    def delete(self, schedule_id):
        return self.rows.pop(int(schedule_id), None) is not None

    def list_all(self):
        rows = sorted(self.rows.values(), key=lambda r: (r["date"], r["time"]))
        return [self._view(r) for r in rows]


class FakeRegistrations:
    def __init__(self, seminars: FakeSeminars):
        self._seminars = seminars
        seminars.registrations = self
        self.rows: dict[int, Registration] = {}
        self._ids = _Ids()

    def get_by_id(self, registration_id):
        return self.rows.get(int(registration_id))

    def find(self, *, seminar_id, email):
        return next(
            (r for r in self.rows.values() if r.seminar_id == int(seminar_id) and r.email == email),
            None,
        )

    def list_by_seminar(self, seminar_id):
        rows = [r for r in self.rows.values() if r.seminar_id == int(seminar_id)]
        return sorted(rows, key=lambda r: r.registration_id, reverse=True)

    def list_by_email(self, email):
        rows = [r for r in self.rows.values() if r.email == email]
        return sorted(rows, key=lambda r: r.registration_id, reverse=True)

    def create_with_seat(self, *, seminar_id, student_name, student_id, email, department):
        # the unique (seminar_id, email) index, independent of find()
        if any(r.seminar_id == int(seminar_id) and r.email == email for r in self.rows.values()):
            raise DuplicateKeyError("uq_registrations_seminar_email")
        seminar = self._seminars.get_by_id(seminar_id)
        if not seminar or seminar.is_archived or seminar.registered_count >= seminar.capacity:
            return 0
        registration_id = self._ids()
        self.rows[registration_id] = Registration(
            registration_id=registration_id,
            seminar_id=seminar.seminar_id,
            student_name=student_name,
            email=email,
            student_id=student_id,
            department=department,
            registration_date=NOW,
        )
        self._seminars.set_count(seminar.seminar_id, seminar.registered_count + 1)
        return registration_id

    def cancel(self, registration_id):
        registration = self.rows.pop(int(registration_id), None)
        if not registration:
            return False
        seminar = self._seminars.get_by_id(registration.seminar_id)
        if seminar:
            self._seminars.set_count(seminar.seminar_id, max(seminar.registered_count - 1, 0))
        return True


class FakeFeedback:
    def __init__(self, registrations: FakeRegistrations, seminars: FakeSeminars):
        self._registrations = registrations
        self._seminars = seminars
        self.rows: dict[int, Feedback] = {}
        self._ids = _Ids()

    def _joined(self, fb: Feedback) -> Feedback:
        reg = self._registrations.get_by_id(fb.registration_id)
        seminar = self._seminars.get_by_id(fb.seminar_id)
        return dataclasses.replace(
            fb,
            student_name=reg.student_name if reg else None,
            student_email=reg.email if reg else None,
            seminar_title=seminar.title if seminar else None,
            seminar_date=seminar.date if seminar else None,
            seminar_speaker=seminar.speaker if seminar else None,
        )

    def get_by_id(self, feedback_id):
        fb = self.rows.get(int(feedback_id))
        return self._joined(fb) if fb else None

    def get_by_registration(self, registration_id):
        return next((f for f in self.rows.values() if f.registration_id == int(registration_id)), None)

    def create(self, *, registration_id, seminar_id, rating, content_quality, speaker_effectiveness,
               organization_quality, comments, suggestions):
        if self.get_by_registration(registration_id):
            raise DuplicateKeyError("uq_feedback_registration")
        feedback_id = self._ids()
        self.rows[feedback_id] = Feedback(
            feedback_id=feedback_id,
            registration_id=registration_id,
            seminar_id=seminar_id,
            rating=rating,
            content_quality=content_quality,
            speaker_effectiveness=speaker_effectiveness,
            organization_quality=organization_quality,
            comments=comments,
            suggestions=suggestions,
            submitted_at=NOW,
        )
        return feedback_id

    def list_by_seminar(self, seminar_id):
        return [self._joined(f) for f in self.rows.values() if f.seminar_id == int(seminar_id)]

    def list_by_email(self, email):
        return [self._joined(f) for f in self.rows.values() if self._joined(f).student_email == email]

    def stats_by_seminar(self):
        by_seminar: dict[int, list[Feedback]] = {}
        for fb in self.rows.values():
            by_seminar.setdefault(fb.seminar_id, []).append(fb)
        stats = []
        for seminar_id, items in by_seminar.items():
            n = len(items)
            seminar = self._seminars.get_by_id(seminar_id)
            stats.append(
                FeedbackStats(
                    seminar_id=seminar_id,
                    seminar_title=seminar.title if seminar else "",
                    average_rating=sum(f.rating for f in items) / n,
                    average_content_quality=sum(f.content_quality for f in items) / n,
                    average_speaker_effectiveness=sum(f.speaker_effectiveness for f in items) / n,
                    average_organization_quality=sum(f.organization_quality for f in items) / n,
                    count=n,
                )
            )
        return stats


class FakeCertificates:
    def __init__(self, registrations: FakeRegistrations):
        self._registrations = registrations
        self.rows: dict[int, Certificate] = {}
        self._ids = _Ids()

    def get_by_id(self, certificate_id):
        return self.rows.get(int(certificate_id))

    def get_by_registration(self, registration_id):
        return next((c for c in self.rows.values() if c.registration_id == int(registration_id)), None)

    def find_by_number_and_code(self, *, certificate_number, verification_code):
        return next(
            (
                c for c in self.rows.values()
                if c.certificate_number == certificate_number and c.verification_code == verification_code
            ),
            None,
        )

    def create(self, *, registration_id, seminar_id, student_name, seminar_title, certificate_number,
               verification_code):
        if self.get_by_registration(registration_id):
            raise DuplicateKeyError("uq_certificates_registration")
        if any(c.certificate_number == certificate_number for c in self.rows.values()):
            raise DuplicateKeyError("uq_certificates_number")
        if any(c.verification_code == verification_code for c in self.rows.values()):
            raise DuplicateKeyError("uq_certificates_code")
        certificate_id = self._ids()
        reg = self._registrations.get_by_id(registration_id)
        self.rows[certificate_id] = Certificate(
            certificate_id=certificate_id,
            registration_id=registration_id,
            seminar_id=seminar_id,
            student_name=student_name,
            seminar_title=seminar_title,
            certificate_number=certificate_number,
            verification_code=verification_code,
            issue_date=NOW,
            student_email=reg.email if reg else None,
        )
        return certificate_id

    def set_revoked(self, certificate_id):
        cert = self.rows.get(int(certificate_id))
        if not cert:
            return False
        self.rows[cert.certificate_id] = dataclasses.replace(cert, status=CertificateStatus.REVOKED)
        return True

    def list_by_email(self, email):
        return [c for c in self.rows.values() if c.student_email == email]

    def list_by_seminar(self, seminar_id):
        return [c for c in self.rows.values() if c.seminar_id == int(seminar_id)]


class FakeArchives:
    def __init__(self):
        self.rows: dict[int, SeminarArchive] = {}
        self.materials: dict[int, ArchiveMaterial] = {}
        self._ids = _Ids()
        self._material_ids = _Ids()

    def _with_materials(self, archive: SeminarArchive) -> SeminarArchive:
        items = tuple(m for m in self.materials.values() if m.archive_id == archive.archive_id)
        return dataclasses.replace(archive, materials=items)

    def get_by_id(self, archive_id):
        archive = self.rows.get(int(archive_id))
        return self._with_materials(archive) if archive else None

    def get_by_seminar(self, seminar_id):
        archive = next((a for a in self.rows.values() if a.original_seminar_id == int(seminar_id)), None)
        return self._with_materials(archive) if archive else None

    def create(self, *, fields):
        if self.get_by_seminar(fields["original_seminar_id"]):
            raise DuplicateKeyError("uq_archives_seminar")
        archive_id = self._ids()
        self.rows[archive_id] = SeminarArchive(archive_id=archive_id, archived_at=NOW, **fields)
        return archive_id

    def list_all(self):
        return [self._with_materials(a) for a in sorted(self.rows.values(), key=lambda a: a.archive_id, reverse=True)]

    def update(self, archive_id, *, fields):
        archive = self.rows.get(int(archive_id))
        if not archive:
            return False
        self.rows[archive.archive_id] = dataclasses.replace(archive, **fields)
        return True

    def delete(self, archive_id):
        archive = self.rows.pop(int(archive_id), None)
        if archive:
            for material_id in [m.material_id for m in self.materials.values() if m.archive_id == archive.archive_id]:
                del self.materials[material_id]
        return archive is not None

    def add_materials(self, archive_id, materials):
        added = []
        for item in materials:
            material_id = self._material_ids()
            material = ArchiveMaterial(
                material_id=material_id,
                archive_id=int(archive_id),
                filename=item.filename,
                path=item.path,
                size=item.size,
                mimetype=item.mimetype,
                uploaded_at=NOW,
            )
            self.materials[material_id] = material
            added.append(material)
        return added

    def get_material(self, archive_id, material_id):
        material = self.materials.get(int(material_id))
        if not material or material.archive_id != int(archive_id):
            return None
        return material

    def delete_material(self, archive_id, material_id):
        if not self.get_material(archive_id, material_id):
            return False
        del self.materials[int(material_id)]
        return True

    def stats(self):
        archives = list(self.rows.values())
        return {
            "total_archives": len(archives),
            "total_materials": len(self.materials),
            "average_rating": sum(a.average_rating for a in archives) / len(archives) if archives else 0.0,
            "total_attendees": sum(a.total_attendees for a in archives),
        }


class FakeJobRuns:
    def __init__(self):
        self.claimed: set[tuple[str, date]] = set()

    def claim(self, *, job_name, run_date):
        key = (job_name, run_date)
        if key in self.claimed:
            return False
        self.claimed.add(key)
        return True

    def release(self, *, job_name, run_date):
        self.claimed.discard((job_name, run_date))


class FakeReports:
    def __init__(self, repos: "Repositories"):
        self._repos = repos

    def system_stats(self):
        seminars = list(self._repos.seminars.rows.values())
        certificates = list(self._repos.certificates.rows.values())
        return SystemStats(
            total_seminars=len(seminars),
            active_seminars=sum(1 for s in seminars if not s.is_archived),
            archived_seminars=sum(1 for s in seminars if s.is_archived),
            total_registrations=len(self._repos.registrations.rows),
            total_feedback=len(self._repos.feedback.rows),
            certificates_issued=sum(1 for c in certificates if not c.is_revoked),
            certificates_revoked=sum(1 for c in certificates if c.is_revoked),
            total_users=len(self._repos.users.rows),
            total_speakers=len(self._repos.speakers.rows),
        )

    def attendance(self):
        seminars = sorted(self._repos.seminars.rows.values(), key=lambda s: s.seminar_id, reverse=True)
        return [
            AttendanceRow(
                seminar_id=s.seminar_id,
                title=s.title,
                speaker=s.speaker,
                date=s.date,
                capacity=s.capacity,
                registered_count=s.registered_count,
                is_archived=s.is_archived,
            )
            for s in seminars
        ]

    def registrations_per_month(self, *, since):
        counts: dict[str, int] = {}
        for reg in self._repos.registrations.rows.values():
            if reg.registration_date and reg.registration_date.date() >= since:
                key = reg.registration_date.strftime("%Y-%m")
                counts[key] = counts.get(key, 0) + 1
        return counts


class FailingSender:
    """Email sender that refuses some recipients."""

    def __init__(self, fail_for: set[str] = frozenset()):
        self.fail_for = set(fail_for)
        self.sent: list[tuple[str, str]] = []

    def send(self, *, to, subject, html):
        if to in self.fail_for:
            raise ConnectionError(f"SMTP refused {to}")
        self.sent.append((to, subject))


def make_repos() -> Repositories:
    seminars = FakeSeminars()
    registrations = FakeRegistrations(seminars)
    repos = Repositories(
        users=FakeUsers(),
        seminars=seminars,
        speakers=FakeSpeakers(),
        schedules=FakeSchedules(seminars),
        registrations=registrations,
        feedback=FakeFeedback(registrations, seminars),
        certificates=FakeCertificates(registrations),
        archives=FakeArchives(),
        job_runs=FakeJobRuns(),
        reports=None,  # type: ignore[arg-type]
    )
    return dataclasses.replace(repos, reports=FakeReports(repos))


def make_container(upload_root, *, repos: Optional[Repositories] = None, sender: Any = None) -> Container:
    repos = repos or make_repos()
    return assemble(
        repos,
        sender=sender or ConsoleEmailSender(),
        tokens=TokenService("test-jwt-secret-with-at-least-32-bytes"),
        storage=MaterialStorage(upload_root),
    )


def add_seminar(repos: Repositories, **overrides: Any) -> Seminar:
    fields: dict = {
        "title": "Intro to Distributed Systems",
        "speaker": "Dr. Rahman",
        "topic": "Systems",
        "description": "Consensus, replication and failure handling.",
        "capacity": 30,
        "date": date(2026, 3, 20),
        "time": "10:00 AM",
        "venue": "Hall A",
    }
    fields.update(overrides)
    seminar_id = repos.seminars.create(fields=fields, created_by=None)
    return repos.seminars.get_by_id(seminar_id)


def add_registration(repos: Repositories, seminar: Seminar, email: str, name: str = "Student") -> Registration:
    registration_id = repos.registrations.create_with_seat(
        seminar_id=seminar.seminar_id, student_name=name, student_id="S-1", email=email, department="General"
    )
    assert registration_id, "no seat left"
    return repos.registrations.get_by_id(registration_id)
