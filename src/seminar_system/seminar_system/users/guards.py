"""Bearer-token decorators for JSON routes.

The authenticated user is stored on `flask.g.current_user`.
"""

from __future__ import annotations

from functools import wraps

from flask import g, jsonify, request

from ..core.exceptions import AuthenticationError, AuthorizationError
from .service import AuthService


def bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer"):
        return None
    parts = header.split(" ", 1)
    return parts[1].strip() if len(parts) == 2 and parts[1].strip() else None


class Guards:
    def __init__(self, auth_service: AuthService):
        self._auth = auth_service

    def optional_user(self):
        """Caller behind a valid bearer token, or None for anonymous requests."""

        token = bearer_token()
        if not token:
            return None
        try:
            return self._auth.user_for_token(token)
        except (AuthenticationError, AuthorizationError):
            return None

    def _authenticate(self):
        try:
            g.current_user = self._auth.user_for_token(bearer_token())
        except AuthenticationError as e:
            return jsonify({"message": str(e)}), 401
        except AuthorizationError as e:
            return jsonify({"message": str(e)}), 403
        return None

    def token_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            denied = self._authenticate()
            if denied is not None:
                return denied
            return view(*args, **kwargs)

        return wrapper

    def admin_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            denied = self._authenticate()
            if denied is not None:
                return denied
            if not g.current_user.is_admin:
                return jsonify({"message": "Access denied. Admin only."}), 403
            return view(*args, **kwargs)

        return wrapper
