from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ...schedules.model import WorkScheduleDetail
from ...time_records.model import TimeRecord
from .base import DayBreakdown, DayHoursCalculator, paired_worked_minutes


class UnscheduledDayCalculator(DayHoursCalculator):
    """No schedule or a day off: everything worked is regular time."""

    def calculate(
        self,
        *,
        day: date,
        records: Sequence[TimeRecord],
        detail: Optional[WorkScheduleDetail],
    ) -> DayBreakdown:
        worked = paired_worked_minutes(records)
        return DayBreakdown(day=day, scheduled=False, worked_minutes=worked, regular_minutes=worked)
