from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timekeeping_system.timekeeping_system.core.enums import RecordType
from src.timekeeping_system.timekeeping_system.core.exceptions import ValidationError
from tests.fakes import add_commercial_schedule

MONDAY = date(2024, 1, 15)
SATURDAY = date(2024, 1, 20)


def _at(day: date, hh: int, mm: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hh, mm)


def _clock(stores, user_id, day, *pairs):
    for hh_in, hh_out in pairs:
        stores.records.add(user_id, _at(day, *hh_in), RecordType.IN)
        stores.records.add(user_id, _at(day, *hh_out), RecordType.OUT)


@pytest.fixture
def scheduled_user(stores):
    schedule_id = add_commercial_schedule(stores.schedules)
    stores.assignments.create(user_id=1, schedule_id=schedule_id, start_date=date(2024, 1, 1), end_date=None, notes=None)
    return 1


def test_late_arrival_counts_minutes_after_start(container, stores, scheduled_user):
    _clock(stores, scheduled_user, MONDAY, ((8, 15), (12, 0)), ((14, 0), (18, 0)))

    summary = container.worked_hours_service.calculate_worked_hours(scheduled_user, MONDAY, MONDAY)

    assert summary.late_minutes == 15
    assert summary.total_worked_minutes == 465
    assert summary.regular_minutes == 465
    assert summary.missing_minutes == 15
    assert summary.overtime_minutes == 0


def test_worked_beyond_expected_is_overtime(container, stores, scheduled_user):
    _clock(stores, scheduled_user, MONDAY, ((8, 0), (12, 0)), ((14, 0), (18, 45)))

    summary = container.worked_hours_service.calculate_worked_hours(scheduled_user, "2024-01-15", "2024-01-15")

    assert summary.regular_minutes == 480
    assert summary.overtime_minutes == 45
    assert summary.missing_minutes == 0
    assert summary.late_minutes == 0


def test_exact_day_is_all_regular(container, stores, scheduled_user):
    _clock(stores, scheduled_user, MONDAY, ((8, 0), (12, 0)), ((14, 0), (18, 0)))

    summary = container.worked_hours_service.calculate_worked_hours(scheduled_user, MONDAY, MONDAY)

    assert (summary.regular_minutes, summary.overtime_minutes, summary.missing_minutes) == (480, 0, 0)


def test_only_first_in_of_the_day_is_checked_for_lateness(container, stores, scheduled_user):
    _clock(stores, scheduled_user, MONDAY, ((8, 0), (12, 0)), ((14, 30), (18, 0)))

    summary = container.worked_hours_service.calculate_worked_hours(scheduled_user, MONDAY, MONDAY)

    assert summary.late_minutes == 0
    assert summary.missing_minutes == 30


def test_day_off_counts_everything_as_regular(container, stores, scheduled_user):
    _clock(stores, scheduled_user, SATURDAY, ((9, 0), (11, 0)))

    summary = container.worked_hours_service.calculate_worked_hours(scheduled_user, SATURDAY, SATURDAY)

    assert summary.regular_minutes == 120
    assert summary.missing_minutes == 0
    assert summary.overtime_minutes == 0


def test_unscheduled_user_gets_regular_time_only(container, stores):
    _clock(stores, 7, MONDAY, ((9, 0), (17, 30)))

    summary = container.worked_hours_service.calculate_worked_hours(7, MONDAY, MONDAY)

    assert summary.as_dict() == {
        "totalWorkedMinutes": 510,
        "regularMinutes": 510,
        "overtimeMinutes": 0,
        "missingMinutes": 0,
        "lateMinutes": 0,
    }


def test_trailing_unmatched_record_adds_nothing(container, stores):
    _clock(stores, 7, MONDAY, ((9, 0), (12, 0)))
    stores.records.add(7, _at(MONDAY, 13, 0), RecordType.IN)

    summary = container.worked_hours_service.calculate_worked_hours(7, MONDAY, MONDAY)

    assert summary.total_worked_minutes == 180


def test_pair_durations_are_floored_to_minutes(container, stores):
    stores.records.add(7, datetime(2024, 1, 15, 9, 0, 0), RecordType.IN)
    stores.records.add(7, datetime(2024, 1, 15, 9, 10, 59), RecordType.OUT)

    summary = container.worked_hours_service.calculate_worked_hours(7, MONDAY, MONDAY)

    assert summary.total_worked_minutes == 10


def test_range_accumulates_days(container, stores, scheduled_user):
    tuesday = date(2024, 1, 16)
    _clock(stores, scheduled_user, MONDAY, ((8, 0), (12, 0)), ((14, 0), (18, 45)))
    _clock(stores, scheduled_user, tuesday, ((8, 10), (12, 0)), ((14, 0), (18, 0)))

    days = container.worked_hours_service.calculate_daily_breakdown(scheduled_user, MONDAY, tuesday)
    summary = container.worked_hours_service.calculate_worked_hours(scheduled_user, MONDAY, tuesday)

    assert [d.day for d in days] == [MONDAY, tuesday]
    assert summary.overtime_minutes == 45
    assert summary.late_minutes == 10
    assert summary.missing_minutes == 10
    assert summary.regular_minutes == 480 + 470


def test_calculation_is_repeatable(container, stores, scheduled_user):
    _clock(stores, scheduled_user, MONDAY, ((8, 15), (12, 0)), ((14, 0), (18, 30)))

    first = container.worked_hours_service.calculate_worked_hours(scheduled_user, MONDAY, MONDAY)
    second = container.worked_hours_service.calculate_worked_hours(scheduled_user, MONDAY, MONDAY)

    assert first == second


def test_manual_records_count_like_device_records(container, stores):
    stores.records.add(7, _at(MONDAY, 9), RecordType.IN, is_manual=True, justification="Esqueceu")
    stores.records.add(7, _at(MONDAY, 10), RecordType.OUT)

    summary = container.worked_hours_service.calculate_worked_hours(7, MONDAY, MONDAY)

    assert summary.total_worked_minutes == 60


def test_end_before_start_is_rejected(container):
    with pytest.raises(ValidationError):
        container.worked_hours_service.calculate_worked_hours(1, "2024-01-16", "2024-01-15")


def test_malformed_date_is_rejected(container):
    with pytest.raises(ValidationError):
        container.worked_hours_service.calculate_worked_hours(1, "15/01/2024", "2024-01-15")
