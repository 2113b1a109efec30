from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import optional_date
from ..common.validators import optional_text, require_int, require_max_length, require_non_empty
from ..core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_SPEAKER_LENGTH,
    MAX_TIME_LENGTH,
    MAX_TITLE_LENGTH,
    MAX_TOPIC_LENGTH,
    MAX_VENUE_LENGTH,
)
from ..core.exceptions import NotFoundError, ValidationError
from .model import CapacityStatus, Seminar
from .repository import SeminarRepository

logger = logging.getLogger(__name__)

_REQUIRED_TEXT = (
    ("title", MAX_TITLE_LENGTH),
    ("speaker", MAX_SPEAKER_LENGTH),
    ("topic", MAX_TOPIC_LENGTH),
    ("description", MAX_DESCRIPTION_LENGTH),
)


def _clean_fields(data: Mapping[str, Any], *, partial: bool) -> dict:
    fields: dict = {}
    for name, max_len in _REQUIRED_TEXT:
        if partial and data.get(name) is None:
            continue
        fields[name] = require_max_length(require_non_empty(data.get(name), name), name, max_len)

    if not partial or "venue" in data:
        fields["venue"] = require_max_length(optional_text(data.get("venue")), "venue", MAX_VENUE_LENGTH)
    if not partial or "time" in data:
        fields["time"] = require_max_length(optional_text(data.get("time")), "time", MAX_TIME_LENGTH)
    if not partial or "date" in data:
        fields["date"] = optional_date(data.get("date"))

    if not partial or data.get("capacity") is not None:
        fields["capacity"] = require_int(data.get("capacity"), "capacity", minimum=1)
    return fields


class SeminarService:
    def __init__(self, seminars: SeminarRepository):
        self._seminars = seminars

    def get(self, seminar_id: int) -> Seminar:
        seminar = self._seminars.get_by_id(int(seminar_id))
        if not seminar:
            raise NotFoundError("Seminar not found")
        return seminar

    def list_seminars(self, *, include_archived: bool = False) -> Sequence[Seminar]:
        return self._seminars.list_seminars(include_archived=include_archived)

    def create(self, data: Mapping[str, Any], *, created_by: Optional[int] = None) -> Seminar:
        fields = _clean_fields(data, partial=False)
        seminar_id = self._seminars.create(fields=fields, created_by=created_by)
        logger.info("Seminar %s created by %s", seminar_id, created_by)
        return self.get(seminar_id)

    def update(self, seminar_id: int, data: Mapping[str, Any]) -> Seminar:
        current = self.get(seminar_id)
        fields = _clean_fields(data, partial=True)
        if "capacity" in fields and fields["capacity"] < current.registered_count:
            raise ValidationError("Cannot reduce capacity below current registration count")
        self._seminars.update(current.seminar_id, fields=fields)
        return self.get(current.seminar_id)

    def delete(self, seminar_id: int) -> None:
        if not self._seminars.delete(int(seminar_id)):
            raise NotFoundError("Seminar not found")
        logger.info("Seminar %s deleted", seminar_id)

    def capacity_status(self, seminar_id: int) -> CapacityStatus:
        return CapacityStatus.of(self.get(seminar_id))

    def reconcile(self, seminar_id: Optional[int] = None) -> int:
        """Repair registered_count drift from the live registration rows."""

        if seminar_id is not None:
            self.get(seminar_id)
        changed = self._seminars.reconcile_counts(seminar_id)
        if changed:
            logger.warning("Reconciled registered_count on %d seminar(s)", changed)
        return changed
