"""Certificate number and verification code generators."""

from __future__ import annotations

import secrets
import time
from typing import Optional

from ..core.constants import CERTIFICATE_PREFIX


def certificate_number(now_ms: Optional[int] = None, suffix: Optional[int] = None) -> str:
    """`SEMINEX-<last 6 digits of epoch ms>-<4-digit random>`."""

    if now_ms is None:
        now_ms = int(time.time() * 1000)
    if suffix is None:
        suffix = secrets.randbelow(10000)
    return f"{CERTIFICATE_PREFIX}-{str(now_ms)[-6:]}-{suffix:04d}"


def verification_code() -> str:
    """8 uppercase hex characters from 4 random bytes."""
    return secrets.token_hex(4).upper()
