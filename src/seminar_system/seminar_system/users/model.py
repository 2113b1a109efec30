from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Account that can sign in to the API.

    `password_hash` never leaves the service layer; use `public()` for responses.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    phone: Optional[str] = None
    institution: Optional[str] = None
    is_blocked: bool = False
    block_reason: Optional[str] = None
    block_date: Optional[datetime] = None
    blocked_by: Optional[str] = None
    warning_count: int = 0
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def public(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "phone": self.phone,
            "institution": self.institution,
            "isBlocked": self.is_blocked,
            "blockReason": self.block_reason,
            "blockDate": self.block_date.isoformat() if self.block_date else None,
            "blockedBy": self.blocked_by,
            "warningCount": self.warning_count,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
