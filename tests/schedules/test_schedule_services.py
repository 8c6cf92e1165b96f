from __future__ import annotations

from datetime import date, time
from decimal import Decimal

import pytest

from src.timekeeping_system.timekeeping_system.core.enums import Weekday
from src.timekeeping_system.timekeeping_system.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from src.timekeeping_system.timekeeping_system.schedules.service import NewScheduleDetail
from tests.fakes import add_commercial_schedule


def _monday(start=time(8, 0), end=time(17, 0), break_start=None, break_end=None) -> NewScheduleDetail:
    return NewScheduleDetail(
        weekday=Weekday.MONDAY, start_time=start, end_time=end, break_start=break_start, break_end=break_end
    )


def test_create_and_get_schedule(container):
    svc = container.work_schedule_service
    schedule_id = svc.create_schedule(name=" Noturno ", type="shift", weekly_hours="36", created_by=1, tolerance_minutes="5")

    schedule = svc.get_schedule(schedule_id)
    assert schedule.name == "Noturno"
    assert schedule.weekly_hours == Decimal("36")
    assert schedule.tolerance_minutes == 5


def test_unknown_schedule_is_not_found(container):
    with pytest.raises(NotFoundError, match="Jornada de trabalho não encontrada"):
        container.work_schedule_service.get_schedule(42)


def test_invalid_schedule_type_is_rejected(container):
    with pytest.raises(ValidationError):
        container.work_schedule_service.create_schedule(name="X", type="weekly", weekly_hours=40, created_by=1)


def test_duplicate_weekday_detail_is_rejected(container):
    svc = container.work_schedule_service
    schedule_id = svc.create_schedule(name="A", type="regular", weekly_hours=40, created_by=1)
    svc.add_detail(schedule_id=schedule_id, detail=_monday())

    with pytest.raises(InvalidStateError):
        svc.add_detail(schedule_id=schedule_id, detail=_monday(start=time(9, 0)))


@pytest.mark.parametrize(
    "detail",
    [
        _monday(start=time(17, 0), end=time(8, 0)),
        _monday(break_start=time(12, 0)),
        _monday(break_start=time(7, 0), break_end=time(8, 30)),
    ],
)
def test_invalid_detail_times_are_rejected(container, detail):
    svc = container.work_schedule_service
    schedule_id = svc.create_schedule(name="A", type="regular", weekly_hours=40, created_by=1)

    with pytest.raises(ValidationError):
        svc.add_detail(schedule_id=schedule_id, detail=detail)


def test_expected_minutes_subtract_break(stores):
    schedule_id = add_commercial_schedule(stores.schedules)
    detail = stores.schedules.get_detail_for_weekday(schedule_id=schedule_id, weekday=Weekday.MONDAY)

    assert detail.expected_minutes == 480


def test_schedule_in_use_cannot_be_deleted(container, stores):
    schedule_id = add_commercial_schedule(stores.schedules)
    container.employee_schedule_service.assign_schedule(user_id=1, schedule_id=schedule_id, start_date=date(2024, 1, 1))

    with pytest.raises(InvalidStateError):
        container.work_schedule_service.delete_schedule(schedule_id)


def test_new_assignment_closes_the_active_one(container, stores):
    first = add_commercial_schedule(stores.schedules)
    second = add_commercial_schedule(stores.schedules, weekly_hours="30")
    svc = container.employee_schedule_service

    old_id = svc.assign_schedule(user_id=1, schedule_id=first, start_date=date(2024, 1, 1))
    new_id = svc.assign_schedule(user_id=1, schedule_id=second, start_date=date(2024, 3, 1))

    assert stores.assignments.get_by_id(old_id).end_date == date(2024, 2, 29)
    assert svc.get_current_assignment(1, today=date(2024, 2, 29)).assignment_id == old_id
    assert svc.get_current_assignment(1, today=date(2024, 3, 1)).assignment_id == new_id

    for day in (date(2024, 1, 1), date(2024, 2, 29), date(2024, 3, 1), date(2025, 1, 1)):
        active = [a for a in stores.assignments.assignments.values() if a.is_active_on(day)]
        assert len(active) == 1


def test_assignment_overlapping_a_later_one_is_rejected(container, stores):
    schedule_id = add_commercial_schedule(stores.schedules)
    svc = container.employee_schedule_service
    svc.assign_schedule(user_id=1, schedule_id=schedule_id, start_date=date(2024, 3, 1))

    with pytest.raises(InvalidStateError):
        svc.assign_schedule(user_id=1, schedule_id=schedule_id, start_date=date(2024, 1, 1))

    assert len(stores.assignments.assignments) == 1


def test_assignment_to_unknown_schedule_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.employee_schedule_service.assign_schedule(user_id=1, schedule_id=77, start_date=date(2024, 1, 1))


def test_resolver_returns_weekday_detail(container, stores):
    schedule_id = add_commercial_schedule(stores.schedules)
    container.employee_schedule_service.assign_schedule(user_id=1, schedule_id=schedule_id, start_date=date(2024, 1, 1))

    resolved = container.schedule_resolver.get_employee_work_schedule_for_date(1, date(2024, 1, 17))

    assert resolved.schedule.schedule_id == schedule_id
    assert resolved.detail.weekday == Weekday.WEDNESDAY
    assert resolved.is_working_day


def test_resolver_without_assignment_is_empty(container):
    resolved = container.schedule_resolver.get_employee_work_schedule_for_date(1, date(2024, 1, 17))

    assert resolved.schedule is None
    assert resolved.detail is None
    assert not resolved.is_working_day


def test_resolver_before_assignment_start_is_empty(container, stores):
    schedule_id = add_commercial_schedule(stores.schedules)
    container.employee_schedule_service.assign_schedule(user_id=1, schedule_id=schedule_id, start_date=date(2024, 2, 1))

    assert container.schedule_resolver.get_employee_work_schedule_for_date(1, date(2024, 1, 31)).schedule is None


def test_assignment_locks_the_users_assignments(container, stores):
    schedule_id = add_commercial_schedule(stores.schedules)

    container.employee_schedule_service.assign_schedule(user_id=4, schedule_id=schedule_id, start_date=date(2024, 1, 1))

    assert stores.assignments.locked_users == [4]
