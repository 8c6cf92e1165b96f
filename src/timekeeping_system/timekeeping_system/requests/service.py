from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import DateLike, business_days_between, coerce_date, hours_to_minutes, now_local
from ..common.validators import require_enum, require_non_empty
from ..core.constants import BUSINESS_DAYS_PER_WEEK, DEFAULT_LIST_LIMIT
from ..core.enums import AbsenceType, RequestStatus
from ..core.exceptions import InvalidStateError, NotFoundError, ValidationError
from ..database.unit_of_work import TransactionManager
from ..schedules.resolver import ScheduleResolver
from ..time_bank.service import TimeBankService
from .model import AbsenceRequest
from .repository import AbsenceRequestRepository

logger = logging.getLogger(__name__)

REQUEST_NOT_FOUND = "Solicitação não encontrada"
ALREADY_PROCESSED = "Solicitação já foi processada"


@dataclass(frozen=True)
class NewAbsenceRequest:
    start_date: DateLike
    end_date: DateLike
    type: AbsenceType | str
    reason: str


class AbsenceRequestService:
    """Absence requests: pending -> approved | rejected.

    Approving a ``compensation`` absence debits the requester's time bank in
    the same transaction as the status change.
    """

    def __init__(
        self,
        requests: AbsenceRequestRepository,
        time_bank: TimeBankService,
        resolver: ScheduleResolver,
        tx: TransactionManager,
        *,
        business_days_per_week: int = BUSINESS_DAYS_PER_WEEK,
    ):
        self._requests = requests
        self._time_bank = time_bank
        self._resolver = resolver
        self._tx = tx
        self._business_days_per_week = int(business_days_per_week)

    @staticmethod
    def _validate(data: NewAbsenceRequest) -> tuple[date, date, AbsenceType, str]:
        start = coerce_date(data.start_date)
        end = coerce_date(data.end_date)
        if end < start:
            raise ValidationError("Data final deve ser maior ou igual à data inicial")
        absence_type = require_enum(AbsenceType, data.type, "Tipo de ausência")
        reason = require_non_empty(data.reason, "Motivo")
        return start, end, absence_type, reason

    def create_absence_request(self, *, user_id: int, data: NewAbsenceRequest) -> AbsenceRequest:
        start, end, absence_type, reason = self._validate(data)
        request_id = self._requests.create(
            user_id=int(user_id),
            start_date=start,
            end_date=end,
            type=absence_type,
            reason=reason,
        )
        logger.info("Absence request %s created by user %s (%s)", request_id, user_id, absence_type.value)
        return self.get_absence_request(request_id)

    def get_absence_request(self, request_id: int) -> AbsenceRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError(REQUEST_NOT_FOUND)
        return req

    def list_absence_requests(
        self,
        *,
        status: RequestStatus | str | None = None,
        user_id: Optional[int] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AbsenceRequest]:
        status_enum = require_enum(RequestStatus, status, "Status") if status else None
        return self._requests.list_requests(
            status=status_enum,
            user_id=int(user_id) if user_id is not None else None,
            limit=int(limit),
        )

    def update_absence_request(self, *, request_id: int, data: NewAbsenceRequest) -> AbsenceRequest:
        req = self.get_absence_request(request_id)
        if not req.is_pending:
            raise InvalidStateError(ALREADY_PROCESSED)

        start, end, absence_type, reason = self._validate(data)
        updated = self._requests.update_pending(
            request_id=req.request_id,
            start_date=start,
            end_date=end,
            type=absence_type,
            reason=reason,
        )
        if not updated and not self.get_absence_request(req.request_id).is_pending:
            raise InvalidStateError(ALREADY_PROCESSED)
        return self.get_absence_request(req.request_id)

    def delete_absence_request(self, request_id: int) -> None:
        req = self.get_absence_request(request_id)
        if not req.is_pending:
            raise InvalidStateError(ALREADY_PROCESSED)
        if not self._requests.delete_pending(req.request_id):
            raise InvalidStateError(ALREADY_PROCESSED)
        logger.info("Absence request %s deleted", req.request_id)

    def approve_absence_request(
        self,
        request_id: int,
        reviewer_id: int,
        notes: Optional[str] = None,
        *,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> AbsenceRequest:
        now = now or now_local()
        today = today or now.date()

        with self._tx.transaction():
            req = self._decide(request_id, RequestStatus.APPROVED, reviewer_id, notes, now)
            if req.type == AbsenceType.COMPENSATION:
                self._debit_time_bank(req, reviewer_id, today)

        logger.info("Absence request %s approved by %s", req.request_id, reviewer_id)
        return self.get_absence_request(req.request_id)

    def reject_absence_request(
        self,
        request_id: int,
        reviewer_id: int,
        notes: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AbsenceRequest:
        now = now or now_local()
        with self._tx.transaction():
            req = self._decide(request_id, RequestStatus.REJECTED, reviewer_id, notes, now)

        logger.info("Absence request %s rejected by %s", req.request_id, reviewer_id)
        return self.get_absence_request(req.request_id)

    def _decide(
        self,
        request_id: int,
        status: RequestStatus,
        reviewer_id: int,
        notes: Optional[str],
        now: datetime,
    ) -> AbsenceRequest:
        req = self._requests.get_by_id(int(request_id), for_update=True)
        if not req:
            raise NotFoundError(REQUEST_NOT_FOUND)
        if not req.is_pending:
            logger.warning("Absence request %s already %s", req.request_id, req.status.value)
            raise InvalidStateError(ALREADY_PROCESSED)

        decided = self._requests.decide(
            request_id=req.request_id,
            status=status,
            reviewed_by=int(reviewer_id),
            review_date=now,
            review_notes=(notes or "").strip() or None,
        )
        if not decided:
            raise InvalidStateError(ALREADY_PROCESSED)
        return req

    def _debit_time_bank(self, req: AbsenceRequest, reviewer_id: int, today: date) -> None:
        # The daily quota comes from the schedule in force when the request is approved.
        schedule = self._resolver.get_employee_work_schedule_for_date(req.user_id, today).schedule
        if schedule is None:
            raise NotFoundError("Funcionário não possui jornada de trabalho ativa")

        days = business_days_between(req.start_date, req.end_date)
        if days == 0:
            raise ValidationError("Período solicitado não contém dias úteis")

        daily_hours = Decimal(str(schedule.weekly_hours)) / Decimal(self._business_days_per_week)
        minutes = hours_to_minutes(daily_hours * days)
        self._time_bank.compensate_time_bank_hours(
            req.user_id,
            req.start_date,
            minutes,
            f"Compensação de ausência aprovada: {req.reason}",
            int(reviewer_id),
            today=today,
        )
