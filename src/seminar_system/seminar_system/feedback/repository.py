from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Feedback, FeedbackStats


class FeedbackRepository(Protocol):
    def get_by_id(self, feedback_id: int) -> Optional[Feedback]:
        raise NotImplementedError

    def get_by_registration(self, registration_id: int) -> Optional[Feedback]:
        raise NotImplementedError

    def create(
        self,
        *,
        registration_id: int,
        seminar_id: int,
        rating: int,
        content_quality: int,
        speaker_effectiveness: int,
        organization_quality: int,
        comments: Optional[str],
        suggestions: Optional[str],
    ) -> int:
        """Raises DuplicateKeyError if the registration already has feedback."""

        raise NotImplementedError

    def list_by_seminar(self, seminar_id: int) -> Sequence[Feedback]:
        raise NotImplementedError

    def list_by_email(self, email: str) -> Sequence[Feedback]:
        raise NotImplementedError

    def stats_by_seminar(self) -> Sequence[FeedbackStats]:
        """Unrounded averages per seminar that has feedback."""

        raise NotImplementedError
