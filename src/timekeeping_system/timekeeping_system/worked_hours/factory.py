from __future__ import annotations

from dataclasses import dataclass

from ..schedules.model import ScheduleForDate
from .calculator.base import DayHoursCalculator
from .calculator.scheduled_calculator import ScheduledDayCalculator
from .calculator.unscheduled_calculator import UnscheduledDayCalculator


@dataclass
class DayCalculatorFactory:
    """Factory Pattern: choose the day calculator from the resolved schedule."""

    def for_day(self, resolved: ScheduleForDate) -> DayHoursCalculator:
        if resolved.is_working_day:
            return ScheduledDayCalculator()
        return UnscheduledDayCalculator()
