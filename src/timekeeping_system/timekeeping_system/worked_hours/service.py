from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from itertools import groupby
from typing import Optional

from ..common.datetime_utils import DateLike, coerce_date, day_bounds
from ..core.exceptions import ValidationError
from ..schedules.resolver import ScheduleResolver
from ..time_records.repository import TimeRecordRepository
from .calculator.base import DayBreakdown
from .factory import DayCalculatorFactory


@dataclass(frozen=True)
class WorkedHoursSummary:
    total_worked_minutes: int = 0
    regular_minutes: int = 0
    overtime_minutes: int = 0
    missing_minutes: int = 0
    late_minutes: int = 0

    def as_dict(self) -> dict:
        return {
            "totalWorkedMinutes": self.total_worked_minutes,
            "regularMinutes": self.regular_minutes,
            "overtimeMinutes": self.overtime_minutes,
            "missingMinutes": self.missing_minutes,
            "lateMinutes": self.late_minutes,
        }


class WorkedHoursService:
    """Reconcile raw clock events with the weekly schedule.

    Pure read path: the result depends only on stored records and schedules.
    """

    def __init__(
        self,
        records: TimeRecordRepository,
        resolver: ScheduleResolver,
        *,
        calculator_factory: Optional[DayCalculatorFactory] = None,
    ):
        self._records = records
        self._resolver = resolver
        self._factory = calculator_factory or DayCalculatorFactory()

    def calculate_daily_breakdown(self, user_id: int, start_date: DateLike, end_date: DateLike) -> list[DayBreakdown]:
        start, end = self._parse_range(start_date, end_date)
        window_start, window_end = day_bounds(start, end)
        records = self._records.list_for_user_between(user_id=int(user_id), start=window_start, end=window_end)

        days: list[DayBreakdown] = []
        for day, day_records in groupby(records, key=lambda r: r.day):
            day_records = list(day_records)
            resolved = self._resolver.get_employee_work_schedule_for_date(int(user_id), day)
            calculator = self._factory.for_day(resolved)
            days.append(calculator.calculate(day=day, records=day_records, detail=resolved.detail))
        return days

    def calculate_worked_hours(self, user_id: int, start_date: DateLike, end_date: DateLike) -> WorkedHoursSummary:
        days = self.calculate_daily_breakdown(user_id, start_date, end_date)
        return WorkedHoursSummary(
            total_worked_minutes=sum(d.worked_minutes for d in days),
            regular_minutes=sum(d.regular_minutes for d in days),
            overtime_minutes=sum(d.overtime_minutes for d in days),
            missing_minutes=sum(d.missing_minutes for d in days),
            late_minutes=sum(d.late_minutes for d in days),
        )

    @staticmethod
    def _parse_range(start_date: DateLike, end_date: DateLike) -> tuple[date, date]:
        start = coerce_date(start_date)
        end = coerce_date(end_date)
        if end < start:
            raise ValidationError("Data final deve ser maior ou igual à data inicial")
        return start, end
