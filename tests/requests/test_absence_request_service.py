from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timekeeping_system.timekeeping_system.core.enums import RequestStatus, TimeBankEntryType
from src.timekeeping_system.timekeeping_system.core.exceptions import (
    InsufficientBalanceError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.timekeeping_system.timekeeping_system.requests.service import NewAbsenceRequest
from tests.fakes import add_commercial_schedule, credit

USER = 4
REVIEWER = 1
NOW = datetime(2024, 1, 15, 10, 0)


@pytest.fixture
def scheduled(stores):
    schedule_id = add_commercial_schedule(stores.schedules, weekly_hours="40")
    stores.assignments.create(user_id=USER, schedule_id=schedule_id, start_date=date(2024, 1, 1), end_date=None, notes=None)
    return schedule_id


def _request(container, type="compensation", start="2024-01-18", end="2024-01-19", reason="Consulta"):
    return container.absence_request_service.create_absence_request(
        user_id=USER, data=NewAbsenceRequest(start_date=start, end_date=end, type=type, reason=reason)
    )


def test_create_validates_dates_and_reason(container):
    with pytest.raises(ValidationError):
        _request(container, start="2024-01-19", end="2024-01-18")
    with pytest.raises(ValidationError):
        _request(container, reason=" ")
    with pytest.raises(ValidationError):
        _request(container, type="holiday")


def test_compensation_approval_debits_business_days(container, stores, scheduled):
    credit(stores.time_bank, USER, date(2024, 1, 2), "20.00")
    req = _request(container)  # Thursday + Friday

    approved = container.absence_request_service.approve_absence_request(
        req.request_id, REVIEWER, "ok", today=NOW.date(), now=NOW
    )

    assert approved.status == RequestStatus.APPROVED
    assert approved.reviewed_by == REVIEWER
    assert approved.review_notes == "ok"
    debit = [e for e in stores.time_bank.entries.values() if e.type == TimeBankEntryType.COMPENSATION]
    assert len(debit) == 1
    assert debit[0].minutes == -960
    assert debit[0].date == date(2024, 1, 18)
    assert "Consulta" in debit[0].description
    assert container.time_bank_service.get_user_time_bank_balance(USER, today=NOW.date()) == 1200 - 960


def test_weekend_days_are_not_debited(container, stores, scheduled):
    credit(stores.time_bank, USER, date(2024, 1, 2), "10.00")
    req = _request(container, start="2024-01-19", end="2024-01-21")  # Friday to Sunday

    container.absence_request_service.approve_absence_request(req.request_id, REVIEWER, today=NOW.date(), now=NOW)

    assert container.time_bank_service.get_user_time_bank_balance(USER, today=NOW.date()) == 600 - 480


def test_insufficient_balance_rolls_back_the_approval(container, stores, scheduled):
    credit(stores.time_bank, USER, date(2024, 1, 2), "8.00")
    req = _request(container)

    with pytest.raises(InsufficientBalanceError):
        container.absence_request_service.approve_absence_request(req.request_id, REVIEWER, today=NOW.date(), now=NOW)

    assert stores.absences.get_by_id(req.request_id).status == RequestStatus.PENDING
    assert container.time_bank_service.get_user_time_bank_balance(USER, today=NOW.date()) == 480


def test_compensation_without_schedule_is_not_found(container, stores):
    credit(stores.time_bank, USER, date(2024, 1, 2), "20.00")
    req = _request(container)

    with pytest.raises(NotFoundError):
        container.absence_request_service.approve_absence_request(req.request_id, REVIEWER, today=NOW.date(), now=NOW)

    assert stores.absences.get_by_id(req.request_id).status == RequestStatus.PENDING


def test_vacation_approval_does_not_touch_time_bank(container, stores):
    req = _request(container, type="vacation")

    approved = container.absence_request_service.approve_absence_request(req.request_id, REVIEWER, now=NOW)

    assert approved.status == RequestStatus.APPROVED
    assert stores.time_bank.entries == {}


def test_decided_request_cannot_be_decided_again(container):
    req = _request(container, type="personal")
    svc = container.absence_request_service
    svc.reject_absence_request(req.request_id, REVIEWER, "sem cobertura", now=NOW)

    with pytest.raises(InvalidStateError, match="Solicitação já foi processada"):
        svc.approve_absence_request(req.request_id, REVIEWER, now=NOW)
    with pytest.raises(InvalidStateError):
        svc.reject_absence_request(req.request_id, REVIEWER, now=NOW)


def test_only_pending_requests_can_be_edited_or_deleted(container):
    req = _request(container, type="sick_leave")
    svc = container.absence_request_service

    edited = svc.update_absence_request(
        request_id=req.request_id,
        data=NewAbsenceRequest(start_date="2024-01-22", end_date="2024-01-22", type="sick_leave", reason="Gripe"),
    )
    assert edited.reason == "Gripe"

    svc.approve_absence_request(req.request_id, REVIEWER, now=NOW)
    with pytest.raises(InvalidStateError):
        svc.delete_absence_request(req.request_id)


def test_list_filters_by_status(container):
    svc = container.absence_request_service
    first = _request(container, type="personal")
    _request(container, type="personal")
    svc.reject_absence_request(first.request_id, REVIEWER, now=NOW)

    pending = svc.list_absence_requests(status="pending")
    assert len(pending) == 1
    assert pending[0].request_id != first.request_id
