from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from ..certificates.repository import CertificateRepository
from ..common.validators import require_int
from ..core.exceptions import NotFoundError
from ..registrations.model import Registration
from ..registrations.repository import RegistrationRepository
from ..seminars.model import Seminar
from ..seminars.repository import SeminarRepository
from .mailer import EmailSender
from .templates import render

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    success: int = 0
    failed: int = 0


class NotificationService:
    """Compose templated emails and hand them to the configured sender."""

    def __init__(
        self,
        sender: EmailSender,
        registrations: RegistrationRepository,
        seminars: SeminarRepository,
        certificates: CertificateRepository,
        *,
        frontend_url: str = "http://localhost:5173",
    ):
        self._sender = sender
        self._registrations = registrations
        self._seminars = seminars
        self._certificates = certificates
        self._frontend_url = frontend_url.rstrip("/")

    # single messages (raise on delivery failure)

    def registration_confirmation(self, registration: Registration, seminar: Seminar) -> bool:
        self._sender.send(
            to=registration.email,
            subject=f"Registration Confirmed: {seminar.title}",
            html=render("registration_confirmation.html", registration=registration, seminar=seminar),
        )
        return True

    def seminar_reminder(self, registration: Registration, seminar: Seminar) -> None:
        self._sender.send(
            to=registration.email,
            subject=f"Reminder: {seminar.title} - Tomorrow",
            html=render("seminar_reminder.html", registration=registration, seminar=seminar),
        )

    def feedback_request(self, registration: Registration, seminar: Seminar) -> None:
        self._sender.send(
            to=registration.email,
            subject=f"Please Share Your Feedback: {seminar.title}",
            html=render(
                "feedback_request.html",
                registration=registration,
                seminar=seminar,
                feedback_url=f"{self._frontend_url}/feedback/{registration.registration_id}",
            ),
        )

    def seminar_cancellation(self, registration: Registration, seminar: Seminar) -> None:
        self._sender.send(
            to=registration.email,
            subject=f"Important: Seminar Cancellation - {seminar.title}",
            html=render("seminar_cancellation.html", registration=registration, seminar=seminar),
        )

    # admin-triggered sends

    def _seminar(self, seminar_id: Any) -> Seminar:
        seminar = self._seminars.get_by_id(require_int(seminar_id, "seminarId"))
        if not seminar:
            raise NotFoundError("Seminar not found")
        return seminar

    def send_registration_confirmation(self, registration_id: Any) -> None:
        registration = self._registrations.get_by_id(require_int(registration_id, "registrationId"))
        if not registration:
            raise NotFoundError("Registration not found")
        seminar = self._seminars.get_by_id(registration.seminar_id)
        if not seminar:
            raise NotFoundError("Seminar not found")
        self.registration_confirmation(registration, seminar)

    def send_certificate(self, certificate_id: Any) -> None:
        certificate = self._certificates.get_by_id(require_int(certificate_id, "certificateId"))
        if not certificate:
            raise NotFoundError("Certificate not found")
        registration = self._registrations.get_by_id(certificate.registration_id)
        if not registration:
            raise NotFoundError("Registration not found")
        seminar = self._seminars.get_by_id(certificate.seminar_id)
        if not seminar:
            raise NotFoundError("Seminar not found")
        self._sender.send(
            to=registration.email,
            subject=f"Your Certificate for {seminar.title}",
            html=render("certificate_issued.html", registration=registration, seminar=seminar, certificate=certificate),
        )

    def _broadcast(self, seminar_id: Any, send: Callable[[Registration, Seminar], Any]) -> DeliveryResult:
        seminar = self._seminar(seminar_id)
        registrations = self._registrations.list_by_seminar(seminar.seminar_id)
        if not registrations:
            raise NotFoundError("No registrations found for this seminar")
        return self.deliver_all(registrations, seminar, send)

    def deliver_all(
        self,
        registrations: Sequence[Registration],
        seminar: Seminar,
        send: Callable[[Registration, Seminar], Any],
    ) -> DeliveryResult:
        """Send to every registrant; one failure never stops the rest."""

        success = failed = 0
        for registration in registrations:
            try:
                send(registration, seminar)
                success += 1
            except Exception:
                logger.exception("Email to %s failed (seminar %s)", registration.email, seminar.seminar_id)
                failed += 1
        return DeliveryResult(success=success, failed=failed)

    def send_seminar_reminders(self, seminar_id: Any) -> DeliveryResult:
        return self._broadcast(seminar_id, self.seminar_reminder)

    def send_feedback_requests(self, seminar_id: Any) -> DeliveryResult:
        return self._broadcast(seminar_id, self.feedback_request)

    def send_cancellation_notices(self, seminar_id: Any) -> DeliveryResult:
        return self._broadcast(seminar_id, self.seminar_cancellation)
