from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from ..core.constants import DEFAULT_TOKEN_DAYS
from ..core.exceptions import AuthenticationError
from .model import User


class TokenService:
    """Issue and verify HS256 bearer tokens."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", expires_days: int = DEFAULT_TOKEN_DAYS):
        self._secret = secret
        self._algorithm = algorithm
        self._expires = timedelta(days=int(expires_days))

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.user_id),
            "role": user.role.value,
            "iat": now,
            "exp": now + self._expires,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Not authorized, token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Not authorized, token failed")

    def user_id_from(self, token: str) -> int:
        payload = self.decode(token)
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Not authorized, token failed")
