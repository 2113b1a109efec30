from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Certificate


class CertificateRepository(Protocol):
    def get_by_id(self, certificate_id: int) -> Optional[Certificate]:
        raise NotImplementedError

    def get_by_registration(self, registration_id: int) -> Optional[Certificate]:
        raise NotImplementedError

    def find_by_number_and_code(self, *, certificate_number: str, verification_code: str) -> Optional[Certificate]:
        raise NotImplementedError

    def create(
        self,
        *,
        registration_id: int,
        seminar_id: int,
        student_name: str,
        seminar_title: str,
        certificate_number: str,
        verification_code: str,
    ) -> int:
        """Raises DuplicateKeyError naming the violated unique key."""

        raise NotImplementedError

    def set_revoked(self, certificate_id: int) -> bool:
        raise NotImplementedError

    def list_by_email(self, email: str) -> Sequence[Certificate]:
        raise NotImplementedError

    def list_by_seminar(self, seminar_id: int) -> Sequence[Certificate]:
        raise NotImplementedError
