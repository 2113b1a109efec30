from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence

from ..common.validators import normalize_email, optional_text, require_int, require_max_length, require_non_empty
from ..core.constants import (
    DEFAULT_DEPARTMENT,
    MAX_DEPARTMENT_LENGTH,
    MAX_NAME_LENGTH,
    MAX_STUDENT_ID_LENGTH,
)
from ..core.exceptions import (
    CapacityExceededError,
    DuplicateRegistrationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..database.mysql_base import DuplicateKeyError
from ..seminars.model import Seminar
from ..seminars.repository import SeminarRepository
from .model import Registration
from .repository import RegistrationRepository

logger = logging.getLogger(__name__)

ALREADY_REGISTERED = "This email is already registered for the seminar"


class RegistrationNotifier(Protocol):
    def registration_confirmation(self, registration: Registration, seminar: Seminar) -> bool:
        raise NotImplementedError


class RegistrationService:
    """Register/cancel with capacity and duplicate enforcement.

    The pre-checks give precise errors; the store has the final word:
    the unique (seminar_id, email) index and the conditional seat claim
    in `create_with_seat` keep counts and rows consistent under races.
    """

    def __init__(
        self,
        registrations: RegistrationRepository,
        seminars: SeminarRepository,
        notifier: Optional[RegistrationNotifier] = None,
    ):
        self._registrations = registrations
        self._seminars = seminars
        self._notifier = notifier

    def register(
        self,
        *,
        seminar_id: Any,
        name: Optional[str],
        email: Optional[str],
        student_id: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Registration:
        if not name or not email or seminar_id in (None, ""):
            raise ValidationError("name, email, and seminarId are required")
        name = require_max_length(require_non_empty(name, "name"), "name", MAX_NAME_LENGTH)
        email = normalize_email(email)
        seminar_id = require_int(seminar_id, "seminarId")
        student_id = require_max_length(optional_text(student_id), "studentId", MAX_STUDENT_ID_LENGTH)
        department = require_max_length(optional_text(department), "department", MAX_DEPARTMENT_LENGTH)

        seminar = self._require_open_seminar(seminar_id)

        if self._registrations.find(seminar_id=seminar_id, email=email):
            raise DuplicateRegistrationError(ALREADY_REGISTERED)
        if seminar.is_full:
            raise CapacityExceededError("Seminar has reached maximum capacity")

        try:
            registration_id = self._registrations.create_with_seat(
                seminar_id=seminar_id,
                student_name=name,
                student_id=student_id or email.split("@")[0][:MAX_STUDENT_ID_LENGTH],
                email=email,
                department=department or DEFAULT_DEPARTMENT,
            )
        except DuplicateKeyError:
            raise DuplicateRegistrationError(ALREADY_REGISTERED)

        if not registration_id:
            # Lost the seat claim after the pre-check; re-read to report why.
            self._require_open_seminar(seminar_id)
            raise CapacityExceededError("Seminar has reached maximum capacity")

        registration = self._registrations.get_by_id(registration_id)
        if registration is None:
            raise NotFoundError("Registration not found")
        logger.info("Registration %s for seminar %s", registration_id, seminar_id)

        self._notify(registration, seminar)
        return registration

    def _require_open_seminar(self, seminar_id: int) -> Seminar:
        seminar = self._seminars.get_by_id(seminar_id)
        if not seminar:
            raise NotFoundError("Seminar not found")
        if seminar.is_archived:
            raise InvalidStateError("Cannot register for archived seminar")
        return seminar

    def _notify(self, registration: Registration, seminar: Seminar) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.registration_confirmation(registration, seminar)
        except Exception:
            # email never fails a registration
            logger.exception("Confirmation email failed for registration %s", registration.registration_id)

    def cancel(self, registration_id: int) -> None:
        if not self._registrations.cancel(int(registration_id)):
            raise NotFoundError("Registration not found")
        logger.info("Registration %s cancelled", registration_id)

    def get(self, registration_id: int) -> Registration:
        registration = self._registrations.get_by_id(int(registration_id))
        if not registration:
            raise NotFoundError("Registration not found")
        return registration

    def for_seminar(self, seminar_id: int) -> dict:
        seminar = self._seminars.get_by_id(int(seminar_id))
        if not seminar:
            raise NotFoundError("Seminar not found")
        registrations = list(self._registrations.list_by_seminar(seminar.seminar_id))
        return {
            "registrations": registrations,
            "count": len(registrations),
            "seminar_capacity": seminar.capacity,
            "available_seats": max(seminar.available_seats, 0),
        }

    def check(self, *, seminar_id: int, email: str) -> Optional[Registration]:
        return self._registrations.find(seminar_id=int(seminar_id), email=str(email).strip().lower())

    def for_email(self, email: str) -> Sequence[Registration]:
        return self._registrations.list_by_email(str(email).strip().lower())
