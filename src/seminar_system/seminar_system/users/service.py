from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import (
    normalize_email,
    optional_text,
    require_max_length,
    require_min_length,
    require_non_empty,
)
from ..core.constants import MAX_BLOCK_REASON_LENGTH, MAX_NAME_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..database.mysql_base import DuplicateKeyError
from .model import User
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def parse_role(value: Optional[str]) -> Role:
    if value is None or value == "":
        return Role.STUDENT
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise ValidationError("role must be 'admin' or 'student'")


class AuthService:
    """Use cases: sign up, sign in, resolve the caller of a request."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: Optional[str] = None,
        allow_admin: bool = False,
    ) -> dict:
        """Sign up. Only callers vouched for by an admin (`allow_admin`) may create admins."""

        name = require_max_length(require_non_empty(name, "name"), "name", MAX_NAME_LENGTH)
        email = normalize_email(email)
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        user_role = parse_role(role)
        if user_role is Role.ADMIN and not allow_admin:
            raise AuthorizationError("Only an admin can create admin accounts")

        if self._users.get_by_email(email):
            raise ConflictError("User already exists with this email")

        try:
            user_id = self._users.create_user(
                name=name,
                email=email,
                password_hash=generate_password_hash(password),
                role=user_role,
            )
        except DuplicateKeyError:
            raise ConflictError("User already exists with this email")

        user = self._users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        logger.info("Registered user %s (%s)", user.user_id, user.role.value)
        return {"token": self._tokens.issue(user), "user": user.public()}

    def login(self, *, email: str, password: str) -> dict:
        try:
            email = normalize_email(email)
        except ValidationError:
            raise AuthenticationError(INVALID_CREDENTIALS)

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except (TypeError, ValueError):
            # placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError(INVALID_CREDENTIALS)

        if user.is_blocked:
            raise AuthenticationError("Your account has been blocked")

        return {"token": self._tokens.issue(user), "user": user.public()}

    def user_for_token(self, token: Optional[str]) -> User:
        if not token:
            raise AuthenticationError("Not authorized, no token")
        user = self._users.get_by_id(self._tokens.user_id_from(token))
        if user is None:
            raise AuthenticationError("Not authorized, token failed")
        if user.is_blocked:
            raise AuthorizationError("Your account has been blocked")
        return user

    def me(self, user_id: int) -> dict:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user.public()


class UserService:
    """Use case: admin account management."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _require(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, role: Optional[str] = None) -> Sequence[User]:
        if role is None:
            return self._users.list_users()
        return self._users.list_users(role=parse_role(role))

    def get(self, user_id: int) -> User:
        return self._require(user_id)

    def block(self, user_id: int, *, reason: Optional[str], blocked_by: str) -> None:
        self._require(user_id)
        reason = require_max_length(optional_text(reason), "reason", MAX_BLOCK_REASON_LENGTH)
        self._users.set_blocked(int(user_id), reason=reason, blocked_by=blocked_by, at=now_local())
        logger.info("User %s blocked by %s", user_id, blocked_by)

    def unblock(self, user_id: int) -> None:
        if not self._users.clear_block(int(user_id)):
            raise NotFoundError("User not found")

    def add_warning(self, user_id: int) -> int:
        count = self._users.add_warning(int(user_id))
        if count is None:
            raise NotFoundError("User not found")
        return count

    def delete(self, user_id: int) -> None:
        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError("User not found")

    def stats(self) -> dict:
        return self._users.stats()
