from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from ..common.validators import require_int, require_non_empty
from ..core.constants import CERTIFICATE_MAX_ATTEMPTS
from ..core.exceptions import ConflictError, InvalidStateError, NotFoundError
from ..database.mysql_base import DuplicateKeyError
from ..registrations.model import Registration
from ..registrations.repository import RegistrationRepository
from ..seminars.model import Seminar
from ..seminars.repository import SeminarRepository
from . import numbering
from .model import BulkResult, Certificate, Verification
from .qr import qr_png
from .repository import CertificateRepository

logger = logging.getLogger(__name__)

ALREADY_GENERATED = "Certificate already generated for this registration"
REGISTRATION_KEY = "uq_certificates_registration"


class CertificateService:
    def __init__(
        self,
        certificates: CertificateRepository,
        registrations: RegistrationRepository,
        seminars: SeminarRepository,
        *,
        number_factory: Callable[[], str] = numbering.certificate_number,
        code_factory: Callable[[], str] = numbering.verification_code,
    ):
        self._certificates = certificates
        self._registrations = registrations
        self._seminars = seminars
        self._number_factory = number_factory
        self._code_factory = code_factory

    def generate(self, registration_id: Any) -> Certificate:
        registration_id = require_int(registration_id, "registrationId")
        registration = self._registrations.get_by_id(registration_id)
        if not registration:
            raise NotFoundError("Registration not found")
        if self._certificates.get_by_registration(registration_id):
            raise ConflictError(ALREADY_GENERATED)

        seminar = self._seminars.get_by_id(registration.seminar_id)
        if not seminar:
            raise NotFoundError("Seminar not found")
        return self._issue(registration, seminar)

    def _issue(self, registration: Registration, seminar: Seminar) -> Certificate:
        for attempt in range(1, CERTIFICATE_MAX_ATTEMPTS + 1):
            try:
                certificate_id = self._certificates.create(
                    registration_id=registration.registration_id,
                    seminar_id=seminar.seminar_id,
                    student_name=registration.student_name,
                    seminar_title=seminar.title,
                    certificate_number=self._number_factory(),
                    verification_code=self._code_factory(),
                )
            except DuplicateKeyError as e:
                if e.key == REGISTRATION_KEY:
                    raise ConflictError(ALREADY_GENERATED)
                logger.warning("Certificate number/code collision (attempt %d), retrying", attempt)
                continue

            certificate = self._certificates.get_by_id(certificate_id)
            if certificate is None:
                raise NotFoundError("Certificate not found")
            logger.info("Certificate %s issued for registration %s", certificate.certificate_number, registration.registration_id)
            return certificate

        raise InvalidStateError("Could not allocate a unique certificate number")

    def generate_bulk(self, seminar_id: Any) -> BulkResult:
        seminar_id = require_int(seminar_id, "seminarId")
        seminar = self._seminars.get_by_id(seminar_id)
        if not seminar:
            raise NotFoundError("Seminar not found")

        registrations = self._registrations.list_by_seminar(seminar_id)
        if not registrations:
            raise NotFoundError("No registrations found for this seminar")

        success = already = failed = 0
        issued: list[Certificate] = []
        for registration in registrations:
            try:
                if self._certificates.get_by_registration(registration.registration_id):
                    already += 1
                    continue
                issued.append(self._issue(registration, seminar))
                success += 1
            except ConflictError:
                # lost a race against a concurrent single generate
                already += 1
            except Exception:
                logger.exception("Certificate generation failed for registration %s", registration.registration_id)
                failed += 1

        return BulkResult(success=success, already_exists=already, failed=failed, certificates=issued)

    def verify(self, *, certificate_number: Optional[str], verification_code: Optional[str]) -> Verification:
        certificate = self._certificates.find_by_number_and_code(
            certificate_number=require_non_empty(certificate_number, "certificateNumber"),
            verification_code=require_non_empty(verification_code, "verificationCode").upper(),
        )
        if certificate is None:
            return Verification(is_valid=False)
        return Verification(is_valid=not certificate.is_revoked, certificate=certificate)

    def revoke(self, certificate_id: int) -> Certificate:
        if not self._certificates.set_revoked(int(certificate_id)):
            raise NotFoundError("Certificate not found")
        logger.info("Certificate %s revoked", certificate_id)
        return self.get(certificate_id)

    def get(self, certificate_id: int) -> Certificate:
        certificate = self._certificates.get_by_id(int(certificate_id))
        if not certificate:
            raise NotFoundError("Certificate not found")
        return certificate

    def for_email(self, email: str) -> Sequence[Certificate]:
        return self._certificates.list_by_email(str(email).strip().lower())

    def for_seminar(self, seminar_id: int) -> Sequence[Certificate]:
        return self._certificates.list_by_seminar(int(seminar_id))

    def qr_png(self, certificate_id: int) -> bytes:
        return qr_png(self.get(certificate_id))
