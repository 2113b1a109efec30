from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Speaker


class SpeakerRepository(Protocol):
    def get_by_id(self, speaker_id: int) -> Optional[Speaker]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Speaker]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Speaker]:
        raise NotImplementedError

    def create(self, *, fields: Mapping[str, Any]) -> int:
        """Raises DuplicateKeyError on an email already in use."""

        raise NotImplementedError

    def update(self, speaker_id: int, *, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, speaker_id: int) -> bool:
        raise NotImplementedError
