from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Speaker:
    speaker_id: int
    name: str
    email: str
    organization: str
    designation: str
    bio: str
    expertise: str
    experience: str
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None
    created_at: Optional[datetime] = None
