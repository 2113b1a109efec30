from __future__ import annotations

from typing import Any, Optional

from ..core.constants import MAX_EMAIL_LENGTH, MAX_RATING, MIN_RATING
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_email(value: Optional[str], field_name: str = "email") -> str:
    email = require_non_empty(value, field_name).lower()
    require_max_length(email, field_name, MAX_EMAIL_LENGTH)
    if "@" not in email:
        raise ValidationError(f"{field_name} is not a valid email address")
    return email


def require_int(
    value: Any, field_name: str, *, minimum: Optional[int] = None, maximum: Optional[int] = None
) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        # OverflowError: JSON numbers like 1e999 decode to inf
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field_name} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field_name} must be at most {maximum}")
    return number


def require_rating(value: Any, field_name: str) -> int:
    rating = require_int(value, field_name)
    if rating < MIN_RATING or rating > MAX_RATING:
        raise ValidationError(f"{field_name} must be between {MIN_RATING} and {MAX_RATING}")
    return rating
