from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .archives.mysql_archive_repository import MySQLArchiveRepository
from .archives.repository import ArchiveRepository
from .archives.service import ArchiveService
from .archives.storage import MaterialStorage
from .certificates.mysql_certificate_repository import MySQLCertificateRepository
from .certificates.repository import CertificateRepository
from .certificates.service import CertificateService
from .core.constants import MAX_MATERIAL_BYTES, MAX_MATERIAL_FILES
from .database.bootstrap import as_db_config
from .database.connection import DatabaseConnection
from .feedback.mysql_feedback_repository import MySQLFeedbackRepository
from .feedback.repository import FeedbackRepository
from .feedback.service import FeedbackService
from .notifications.jobs import DailyJobs
from .notifications.mailer import EmailSender, build_sender
from .notifications.mysql_job_run_repository import MySQLJobRunRepository
from .notifications.repository import JobRunRepository
from .notifications.service import NotificationService
from .registrations.mysql_registration_repository import MySQLRegistrationRepository
from .registrations.repository import RegistrationRepository
from .registrations.service import RegistrationService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.service import ReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .seminars.mysql_seminar_repository import MySQLSeminarRepository
from .seminars.repository import SeminarRepository
from .seminars.service import SeminarService
from .speakers.mysql_speaker_repository import MySQLSpeakerRepository
from .speakers.repository import SpeakerRepository
from .speakers.service import SpeakerService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService

DEFAULT_UPLOAD_FOLDER = Path(__file__).resolve().parents[3] / "uploads"


@dataclass(frozen=True)
class Repositories:
    users: UserRepository
    seminars: SeminarRepository
    speakers: SpeakerRepository
    schedules: ScheduleRepository
    registrations: RegistrationRepository
    feedback: FeedbackRepository
    certificates: CertificateRepository
    archives: ArchiveRepository
    job_runs: JobRunRepository
    reports: ReportRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    repos: Repositories
    sender: EmailSender

    auth_service: AuthService
    user_service: UserService
    seminar_service: SeminarService
    speaker_service: SpeakerService
    schedule_service: ScheduleService
    registration_service: RegistrationService
    feedback_service: FeedbackService
    certificate_service: CertificateService
    archive_service: ArchiveService
    notification_service: NotificationService
    daily_jobs: DailyJobs
    report_service: ReportService


def assemble(
    repos: Repositories,
    *,
    sender: EmailSender,
    tokens: TokenService,
    storage: MaterialStorage,
    conn: Optional[DatabaseConnection] = None,
    frontend_url: str = "http://localhost:5173",
    max_files: int = MAX_MATERIAL_FILES,
    max_bytes: int = MAX_MATERIAL_BYTES,
    send_registration_emails: bool = True,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""

    notification_service = NotificationService(
        sender,
        repos.registrations,
        repos.seminars,
        repos.certificates,
        frontend_url=frontend_url,
    )
    feedback_service = FeedbackService(repos.feedback, repos.registrations, repos.seminars)

    return Container(
        conn=conn,
        repos=repos,
        sender=sender,
        auth_service=AuthService(repos.users, tokens),
        user_service=UserService(repos.users),
        seminar_service=SeminarService(repos.seminars),
        speaker_service=SpeakerService(repos.speakers),
        schedule_service=ScheduleService(repos.schedules, repos.seminars),
        registration_service=RegistrationService(
            repos.registrations,
            repos.seminars,
            notifier=notification_service if send_registration_emails else None,
        ),
        feedback_service=feedback_service,
        certificate_service=CertificateService(repos.certificates, repos.registrations, repos.seminars),
        archive_service=ArchiveService(
            repos.archives,
            repos.seminars,
            storage,
            max_files=max_files,
            max_bytes=max_bytes,
        ),
        notification_service=notification_service,
        daily_jobs=DailyJobs(notification_service, repos.seminars, repos.registrations, repos.job_runs),
        report_service=ReportService(repos.reports, feedback_service),
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(as_db_config(db_config))

    repos = Repositories(
        users=MySQLUserRepository(conn),
        seminars=MySQLSeminarRepository(conn),
        speakers=MySQLSpeakerRepository(conn),
        schedules=MySQLScheduleRepository(conn),
        registrations=MySQLRegistrationRepository(conn),
        feedback=MySQLFeedbackRepository(conn),
        certificates=MySQLCertificateRepository(conn),
        archives=MySQLArchiveRepository(conn),
        job_runs=MySQLJobRunRepository(conn),
        reports=MySQLReportRepository(conn),
    )

    tokens = TokenService(
        str(getattr(settings, "JWT_SECRET", None) or getattr(settings, "SECRET_KEY", "dev-secret-key")),
        algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
        expires_days=int(getattr(settings, "JWT_EXPIRES_DAYS", 7)),
    )

    return assemble(
        repos,
        sender=build_sender(settings),
        tokens=tokens,
        storage=MaterialStorage(getattr(settings, "UPLOAD_FOLDER", None) or DEFAULT_UPLOAD_FOLDER),
        conn=conn,
        frontend_url=getattr(settings, "FRONTEND_URL", "http://localhost:5173"),
        max_files=int(getattr(settings, "MAX_MATERIAL_FILES", MAX_MATERIAL_FILES)),
        max_bytes=int(getattr(settings, "MAX_MATERIAL_BYTES", MAX_MATERIAL_BYTES)),
        send_registration_emails=bool(getattr(settings, "SEND_REGISTRATION_EMAILS", True)),
    )
