from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import CertificateStatus


@dataclass(frozen=True)
class Certificate:
    certificate_id: int
    registration_id: int
    seminar_id: int
    student_name: str
    seminar_title: str
    certificate_number: str
    verification_code: str
    status: CertificateStatus = CertificateStatus.ISSUED
    issue_date: Optional[datetime] = None
    # joined columns
    student_email: Optional[str] = None
    seminar_date: Optional[date] = None
    seminar_speaker: Optional[str] = None
    seminar_venue: Optional[str] = None

    @property
    def is_revoked(self) -> bool:
        return self.status == CertificateStatus.REVOKED


@dataclass(frozen=True)
class BulkResult:
    success: int = 0
    already_exists: int = 0
    failed: int = 0
    certificates: list[Certificate] = field(default_factory=list)


@dataclass(frozen=True)
class Verification:
    """Outcome of a number + code lookup.

    `certificate` is None when nothing matched.
    """

    is_valid: bool
    certificate: Optional[Certificate] = None
