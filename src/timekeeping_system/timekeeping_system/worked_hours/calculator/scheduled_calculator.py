from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ...common.datetime_utils import minutes_between
from ...core.enums import RecordType
from ...schedules.model import WorkScheduleDetail
from ...time_records.model import TimeRecord
from .base import DayBreakdown, DayHoursCalculator, paired_worked_minutes


class ScheduledDayCalculator(DayHoursCalculator):
    """Working day: compare worked time with the detail's expected time."""

    def calculate(
        self,
        *,
        day: date,
        records: Sequence[TimeRecord],
        detail: Optional[WorkScheduleDetail],
    ) -> DayBreakdown:
        if detail is None:
            raise ValueError("ScheduledDayCalculator requires a schedule detail")

        expected = detail.expected_minutes
        worked = paired_worked_minutes(records)

        late = 0
        first_in = next((r for r in records if r.type == RecordType.IN), None)
        if first_in is not None:
            scheduled_start = datetime.combine(day, detail.start_time)
            if first_in.timestamp > scheduled_start:
                late = minutes_between(scheduled_start, first_in.timestamp)

        if worked > expected:
            regular, overtime, missing = expected, worked - expected, 0
        elif worked < expected:
            regular, overtime, missing = worked, 0, expected - worked
        else:
            regular, overtime, missing = expected, 0, 0

        return DayBreakdown(
            day=day,
            scheduled=True,
            worked_minutes=worked,
            expected_minutes=expected,
            regular_minutes=regular,
            overtime_minutes=overtime,
            missing_minutes=missing,
            late_minutes=late,
        )
