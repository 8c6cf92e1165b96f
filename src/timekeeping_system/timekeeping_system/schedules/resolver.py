from __future__ import annotations

import logging
from datetime import date

from ..core.enums import WEEKDAYS
from .model import ScheduleForDate
from .repository import EmployeeScheduleRepository, WorkScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleResolver:
    """Resolve which schedule (and weekday detail) applies to a user on a day.

    A missing assignment, schedule or detail degrades to an unscheduled day;
    it is never an error.
    """

    def __init__(self, schedules: WorkScheduleRepository, assignments: EmployeeScheduleRepository):
        self._schedules = schedules
        self._assignments = assignments

    def get_employee_work_schedule_for_date(self, user_id: int, day: date) -> ScheduleForDate:
        assignment = self._assignments.find_active_on(user_id=int(user_id), day=day)
        if not assignment:
            return ScheduleForDate()

        schedule = self._schedules.get_by_id(assignment.schedule_id)
        if not schedule:
            logger.warning(
                "Assignment %s points to missing schedule %s", assignment.assignment_id, assignment.schedule_id
            )
            return ScheduleForDate()

        weekday = WEEKDAYS[day.weekday()]
        detail = self._schedules.get_detail_for_weekday(schedule_id=schedule.schedule_id, weekday=weekday)
        return ScheduleForDate(schedule=schedule, detail=detail)
