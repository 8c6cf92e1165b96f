from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import time_span_minutes
from ..core.enums import ScheduleType, Weekday


@dataclass(frozen=True)
class WorkSchedule:
    """Domain entity: a named weekly work schedule."""

    schedule_id: int
    name: str
    type: ScheduleType
    weekly_hours: Decimal
    created_by: int
    tolerance_minutes: Optional[int] = None
    break_time: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class WorkScheduleDetail:
    """Per-weekday configuration of a WorkSchedule (unique per schedule/weekday)."""

    detail_id: int
    schedule_id: int
    weekday: Weekday
    start_time: time
    end_time: time
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    is_work_day: bool = True

    @property
    def expected_minutes(self) -> int:
        minutes = time_span_minutes(self.start_time, self.end_time)
        if self.break_start is not None and self.break_end is not None:
            minutes -= time_span_minutes(self.break_start, self.break_end)
        return minutes


@dataclass(frozen=True)
class EmployeeSchedule:
    """Time-bounded assignment of a WorkSchedule to a user."""

    assignment_id: int
    user_id: int
    schedule_id: int
    start_date: date
    end_date: Optional[date] = None
    notes: Optional[str] = None

    def is_active_on(self, day: date) -> bool:
        return self.start_date <= day and (self.end_date is None or self.end_date >= day)


@dataclass(frozen=True)
class ScheduleForDate:
    """Resolved schedule/detail for one user and day; both None when unscheduled."""

    schedule: Optional[WorkSchedule] = None
    detail: Optional[WorkScheduleDetail] = None

    @property
    def is_working_day(self) -> bool:
        return self.schedule is not None and self.detail is not None and self.detail.is_work_day
