from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..common.validators import normalize_email, optional_text, require_max_length, require_non_empty
from ..core.constants import (
    MAX_EXPERTISE_LENGTH,
    MAX_NAME_LENGTH,
    MAX_ORGANIZATION_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_URL_LENGTH,
)
from ..core.exceptions import ConflictError, NotFoundError
from ..database.mysql_base import DuplicateKeyError
from .model import Speaker
from .repository import SpeakerRepository

# bio is TEXT and has no width
REQUIRED = (
    ("name", MAX_NAME_LENGTH),
    ("organization", MAX_ORGANIZATION_LENGTH),
    ("designation", MAX_ORGANIZATION_LENGTH),
    ("bio", None),
    ("expertise", MAX_EXPERTISE_LENGTH),
    ("experience", MAX_ORGANIZATION_LENGTH),
)
OPTIONAL = (("phone", MAX_PHONE_LENGTH), ("linkedin", MAX_URL_LENGTH), ("website", MAX_URL_LENGTH))
DUPLICATE_EMAIL = "Speaker with this email already exists"


class SpeakerService:
    def __init__(self, speakers: SpeakerRepository):
        self._speakers = speakers

    def _clean(self, data: Mapping[str, Any], *, partial: bool) -> dict:
        fields: dict = {}
        for name, max_len in REQUIRED:
            if partial and data.get(name) is None:
                continue
            value = require_non_empty(data.get(name), name)
            fields[name] = value if max_len is None else require_max_length(value, name, max_len)
        if not partial or data.get("email") is not None:
            fields["email"] = normalize_email(data.get("email"))
        for name, max_len in OPTIONAL:
            if not partial or name in data:
                fields[name] = require_max_length(optional_text(data.get(name)), name, max_len)
        return fields

    def list_all(self) -> Sequence[Speaker]:
        return self._speakers.list_all()

    def get(self, speaker_id: int) -> Speaker:
        speaker = self._speakers.get_by_id(int(speaker_id))
        if not speaker:
            raise NotFoundError("Speaker not found")
        return speaker

    def create(self, data: Mapping[str, Any]) -> Speaker:
        fields = self._clean(data, partial=False)
        if self._speakers.get_by_email(fields["email"]):
            raise ConflictError(DUPLICATE_EMAIL)
        try:
            speaker_id = self._speakers.create(fields=fields)
        except DuplicateKeyError:
            raise ConflictError(DUPLICATE_EMAIL)
        return self.get(speaker_id)

    def update(self, speaker_id: int, data: Mapping[str, Any]) -> Speaker:
        current = self.get(speaker_id)
        fields = self._clean(data, partial=True)
        email = fields.get("email")
        if email and email != current.email:
            other = self._speakers.get_by_email(email)
            if other and other.speaker_id != current.speaker_id:
                raise ConflictError(DUPLICATE_EMAIL)
        try:
            self._speakers.update(current.speaker_id, fields=fields)
        except DuplicateKeyError:
            raise ConflictError(DUPLICATE_EMAIL)
        return self.get(current.speaker_id)

    def delete(self, speaker_id: int) -> None:
        if not self._speakers.delete(int(speaker_id)):
            raise NotFoundError("Speaker not found")
