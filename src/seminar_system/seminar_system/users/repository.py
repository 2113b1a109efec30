from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Storage port for accounts.

    Services depend on this interface only; MySQL and in-memory versions both satisfy it.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        """Insert a user and return its id.

        Raises DuplicateKeyError when the email is already taken.
        """

        raise NotImplementedError

    def list_users(self, *, role: Optional[Role] = None) -> Sequence[User]:
        raise NotImplementedError

    def set_blocked(self, user_id: int, *, reason: Optional[str], blocked_by: str, at: datetime) -> bool:
        raise NotImplementedError

    def clear_block(self, user_id: int) -> bool:
        raise NotImplementedError

    def add_warning(self, user_id: int) -> Optional[int]:
        """Increment the warning counter; returns the new value or None if the user is missing."""

        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def stats(self) -> dict:
        raise NotImplementedError
