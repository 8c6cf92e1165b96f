from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ...common.datetime_utils import minutes_between
from ...schedules.model import WorkScheduleDetail
from ...time_records.model import TimeRecord


@dataclass(frozen=True)
class DayBreakdown:
    """Worked-hours breakdown of one calendar day."""

    day: date
    scheduled: bool
    worked_minutes: int
    expected_minutes: int = 0
    regular_minutes: int = 0
    overtime_minutes: int = 0
    missing_minutes: int = 0
    late_minutes: int = 0


def paired_worked_minutes(records: Sequence[TimeRecord]) -> int:
    """Sum record[0]->record[1], record[2]->record[3], ...; a trailing odd record adds nothing."""
    total = 0
    for i in range(0, len(records) - 1, 2):
        total += minutes_between(records[i].timestamp, records[i + 1].timestamp)
    return total


class DayHoursCalculator(ABC):
    """Strategy Pattern: how one day's records become a DayBreakdown."""

    @abstractmethod
    def calculate(
        self,
        *,
        day: date,
        records: Sequence[TimeRecord],
        detail: Optional[WorkScheduleDetail],
    ) -> DayBreakdown:
        raise NotImplementedError
