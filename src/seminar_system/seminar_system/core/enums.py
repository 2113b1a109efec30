from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    STUDENT = "student"


class CertificateStatus(str, Enum):
    ISSUED = "issued"
    REVOKED = "revoked"
