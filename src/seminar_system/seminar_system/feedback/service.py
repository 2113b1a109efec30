from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional, Sequence

from ..common.validators import optional_text, require_int, require_max_length, require_rating
from ..core.constants import MAX_COMMENT_LENGTH
from ..core.exceptions import ConflictError, MismatchError, NotFoundError
from ..database.mysql_base import DuplicateKeyError
from ..registrations.repository import RegistrationRepository
from ..seminars.repository import SeminarRepository
from .model import Feedback, FeedbackStats
from .repository import FeedbackRepository

logger = logging.getLogger(__name__)

ALREADY_SUBMITTED = "Feedback already submitted for this registration"


def _average(values: Sequence[int]) -> Optional[float]:
    if not values:
        return None
    return round(sum(values) / len(values), 1)


class FeedbackService:
    def __init__(
        self,
        feedback: FeedbackRepository,
        registrations: RegistrationRepository,
        seminars: SeminarRepository,
    ):
        self._feedback = feedback
        self._registrations = registrations
        self._seminars = seminars

    def submit(
        self,
        *,
        registration_id: Any,
        seminar_id: Any,
        rating: Any,
        content_quality: Any,
        speaker_effectiveness: Any,
        organization_quality: Any,
        comments: Optional[str] = None,
        suggestions: Optional[str] = None,
    ) -> Feedback:
        registration_id = require_int(registration_id, "registrationId")
        seminar_id = require_int(seminar_id, "seminarId")

        registration = self._registrations.get_by_id(registration_id)
        if not registration:
            raise NotFoundError("Registration not found")
        if registration.seminar_id != seminar_id:
            raise MismatchError("Registration does not match the seminar")
        if self._feedback.get_by_registration(registration_id):
            raise ConflictError(ALREADY_SUBMITTED)

        scores = {
            "rating": require_rating(rating, "rating"),
            "content_quality": require_rating(content_quality, "contentQuality"),
            "speaker_effectiveness": require_rating(speaker_effectiveness, "speakerEffectiveness"),
            "organization_quality": require_rating(organization_quality, "organizationQuality"),
        }

        try:
            feedback_id = self._feedback.create(
                registration_id=registration_id,
                seminar_id=seminar_id,
                comments=require_max_length(optional_text(comments), "comments", MAX_COMMENT_LENGTH),
                suggestions=require_max_length(optional_text(suggestions), "suggestions", MAX_COMMENT_LENGTH),
                **scores,
            )
        except DuplicateKeyError:
            raise ConflictError(ALREADY_SUBMITTED)

        logger.info("Feedback %s for registration %s", feedback_id, registration_id)
        return self.get(feedback_id)

    def get(self, feedback_id: int) -> Feedback:
        feedback = self._feedback.get_by_id(int(feedback_id))
        if not feedback:
            raise NotFoundError("Feedback not found")
        return feedback

    def for_seminar(self, seminar_id: int) -> dict:
        if not self._seminars.get_by_id(int(seminar_id)):
            raise NotFoundError("Seminar not found")

        items = list(self._feedback.list_by_seminar(int(seminar_id)))
        averages = None
        if items:
            averages = {
                "overall_rating": _average([f.rating for f in items]),
                "content_quality": _average([f.content_quality for f in items]),
                "speaker_effectiveness": _average([f.speaker_effectiveness for f in items]),
                "organization_quality": _average([f.organization_quality for f in items]),
            }
        return {"feedback": items, "average_ratings": averages, "count": len(items)}

    def check(self, *, seminar_id: int, email: str) -> dict:
        registration = self._registrations.find(seminar_id=int(seminar_id), email=str(email).strip().lower())
        if not registration:
            return {"is_registered": False, "has_feedback": False}

        feedback = self._feedback.get_by_registration(registration.registration_id)
        return {
            "is_registered": True,
            "registration_id": registration.registration_id,
            "has_feedback": feedback is not None,
            "feedback_id": feedback.feedback_id if feedback else None,
        }

    def stats(self) -> list[FeedbackStats]:
        rounded = [
            replace(
                s,
                average_rating=round(s.average_rating, 1),
                average_content_quality=round(s.average_content_quality, 1),
                average_speaker_effectiveness=round(s.average_speaker_effectiveness, 1),
                average_organization_quality=round(s.average_organization_quality, 1),
            )
            for s in self._feedback.stats_by_seminar()
        ]
        return sorted(rounded, key=lambda s: s.average_rating, reverse=True)

    def for_email(self, email: str) -> Sequence[Feedback]:
        return self._feedback.list_by_email(str(email).strip().lower())
