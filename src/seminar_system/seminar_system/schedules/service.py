from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.datetime_utils import optional_date, parse_iso_date
from ..common.validators import optional_text, require_int, require_max_length, require_non_empty
from ..core.constants import MAX_TIME_LENGTH
from ..core.exceptions import NotFoundError
from ..seminars.repository import SeminarRepository
from .model import ScheduleView
from .repository import ScheduleRepository


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, seminars: SeminarRepository):
        self._schedules = schedules
        self._seminars = seminars

    def create(self, *, seminar_id: Any, day: Any, time: Any) -> ScheduleView:
        seminar_id = require_int(seminar_id, "seminarId")
        work_day = parse_iso_date(require_non_empty(day, "date"))
        time = require_max_length(require_non_empty(time, "time"), "time", MAX_TIME_LENGTH)

        if not self._seminars.get_by_id(seminar_id):
            raise NotFoundError("Seminar not found")

        schedule_id = self._schedules.create(seminar_id=seminar_id, day=work_day, time=time)
        return self._get(schedule_id)

    def list_all(self) -> Sequence[ScheduleView]:
        return self._schedules.list_all()

    def update(self, schedule_id: int, *, day: Any = None, time: Any = None, is_active: Optional[bool] = None) -> ScheduleView:
        if not self._schedules.update(
            int(schedule_id),
            day=optional_date(day),
            time=require_max_length(optional_text(time), "time", MAX_TIME_LENGTH),
            is_active=None if is_active is None else bool(is_active),
        ):
            raise NotFoundError("Schedule not found")
        return self._get(schedule_id)

    def delete(self, schedule_id: int) -> None:
        if not self._schedules.delete(int(schedule_id)):
            raise NotFoundError("Schedule not found")

    def _get(self, schedule_id: int) -> ScheduleView:
        view = self._schedules.get_by_id(int(schedule_id))
        if not view:
            raise NotFoundError("Schedule not found")
        return view
