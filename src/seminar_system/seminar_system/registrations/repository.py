from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Registration


class RegistrationRepository(Protocol):
    def get_by_id(self, registration_id: int) -> Optional[Registration]:
        raise NotImplementedError

    def find(self, *, seminar_id: int, email: str) -> Optional[Registration]:
        raise NotImplementedError

    def list_by_seminar(self, seminar_id: int) -> Sequence[Registration]:
        """Newest first."""

        raise NotImplementedError

    def list_by_email(self, email: str) -> Sequence[Registration]:
        """Newest first."""

        raise NotImplementedError

    def create_with_seat(
        self,
        *,
        seminar_id: int,
        student_name: str,
        student_id: str,
        email: str,
        department: str,
    ) -> int:
        """Insert the registration and claim one seat atomically.

        Returns the new registration id, or 0 when no seat could be claimed
        (seminar full, archived or gone); nothing is written in that case.
        Raises DuplicateKeyError if (seminar_id, email) already exists.
        """

        raise NotImplementedError

    def cancel(self, registration_id: int) -> bool:
        """Delete the registration and release its seat (never below 0).

        Returns False when the registration does not exist.
        """

        raise NotImplementedError
