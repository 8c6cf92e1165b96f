from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import ScheduleType, Weekday
from .model import EmployeeSchedule, WorkSchedule, WorkScheduleDetail


class WorkScheduleRepository(Protocol):
    def create(
        self,
        *,
        name: str,
        type: ScheduleType,
        weekly_hours: Decimal,
        tolerance_minutes: Optional[int],
        break_time: Optional[int],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        schedule_id: int,
        name: str,
        type: ScheduleType,
        weekly_hours: Decimal,
        tolerance_minutes: Optional[int],
        break_time: Optional[int],
    ) -> bool:
        raise NotImplementedError

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def list_all(self) -> Sequence[WorkSchedule]:
        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError

    # Details
    def create_detail(
        self,
        *,
        schedule_id: int,
        weekday: Weekday,
        start_time: time,
        end_time: time,
        break_start: Optional[time],
        break_end: Optional[time],
        is_work_day: bool,
    ) -> int:
        raise NotImplementedError

    def update_detail(
        self,
        *,
        detail_id: int,
        start_time: time,
        end_time: time,
        break_start: Optional[time],
        break_end: Optional[time],
        is_work_day: bool,
    ) -> bool:
        raise NotImplementedError

    def get_detail(self, detail_id: int) -> Optional[WorkScheduleDetail]:
        raise NotImplementedError

    def get_detail_for_weekday(self, *, schedule_id: int, weekday: Weekday) -> Optional[WorkScheduleDetail]:
        raise NotImplementedError

    def list_details(self, schedule_id: int) -> Sequence[WorkScheduleDetail]:
        raise NotImplementedError

    def delete_detail(self, detail_id: int) -> bool:
        raise NotImplementedError


class EmployeeScheduleRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        schedule_id: int,
        start_date: date,
        end_date: Optional[date],
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, assignment_id: int) -> Optional[EmployeeSchedule]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, for_update: bool = False) -> Sequence[EmployeeSchedule]:
        """All assignments of a user ordered by start_date.

        With ``for_update`` the rows are locked until the surrounding transaction ends.
        """

        raise NotImplementedError

    def find_active_on(self, *, user_id: int, day: date) -> Optional[EmployeeSchedule]:
        """Assignment active on ``day``; the latest start_date wins."""

        raise NotImplementedError

    def set_end_date(self, *, assignment_id: int, end_date: Optional[date]) -> bool:
        raise NotImplementedError

    def count_for_schedule(self, schedule_id: int) -> int:
        raise NotImplementedError
