from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import DateLike, coerce_date, minutes_between, minutes_to_hours, now_local
from ..core.constants import OVERTIME_EXPIRATION_DAYS, PROCESS_BATCH_LIMIT
from ..core.enums import RecordType, TimeBankEntryType
from ..core.exceptions import NotFoundError, ValidationError
from ..database.unit_of_work import TransactionManager
from ..schedules.resolver import ScheduleResolver
from ..time_records.repository import TimeRecordRepository
from .service import NewTimeBankEntry, TimeBankService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessingResult:
    processed: int = 0
    credited: int = 0
    skipped: int = 0


class TimeBankProcessor:
    """Post overtime credits from clock-out records into the time bank.

    A record is processed at most once; processing a record that was already
    processed is a no-op.
    """

    def __init__(
        self,
        records: TimeRecordRepository,
        time_bank: TimeBankService,
        resolver: ScheduleResolver,
        tx: TransactionManager,
        *,
        expiration_days: int = OVERTIME_EXPIRATION_DAYS,
    ):
        self._records = records
        self._time_bank = time_bank
        self._resolver = resolver
        self._tx = tx
        self._expiration_days = int(expiration_days)

    def process_time_record_for_time_bank(self, record_id: int, admin_id: int, *, now: Optional[datetime] = None) -> bool:
        now = now or now_local()

        with self._tx.transaction():
            record = self._records.get_by_id(int(record_id), for_update=True)
            if not record:
                raise NotFoundError("Registro de ponto não encontrado")
            if record.processed_for_time_bank:
                logger.info("Time record %s already processed", record.record_id)
                return False
            if record.type != RecordType.OUT:
                raise ValidationError("Apenas registros de saída podem ser processados")

            clock_in = self._records.find_previous_of_type(
                user_id=record.user_id, before=record.timestamp, type=RecordType.IN
            )
            if not clock_in:
                raise NotFoundError("Registro de entrada correspondente não encontrado")

            resolved = self._resolver.get_employee_work_schedule_for_date(record.user_id, record.day)
            if not resolved.is_working_day:
                self._records.mark_processed(record_id=record.record_id, overtime=None)
                return False

            scheduled_end = datetime.combine(record.day, resolved.detail.end_time)
            overtime_minutes = minutes_between(scheduled_end, record.timestamp)
            if overtime_minutes <= 0:
                self._records.mark_processed(record_id=record.record_id, overtime=None)
                return False

            hours = minutes_to_hours(overtime_minutes)
            self._time_bank.create_time_bank(
                NewTimeBankEntry(
                    user_id=record.user_id,
                    date=record.day,
                    hours_balance=hours,
                    description=f"Hora extra em {record.day.strftime('%d/%m/%Y')}",
                    type=TimeBankEntryType.OVERTIME,
                    created_by=int(admin_id),
                    related_record_id=record.record_id,
                    expiration_date=now.date() + timedelta(days=self._expiration_days),
                )
            )
            self._records.mark_processed(record_id=record.record_id, overtime=hours)

        logger.info("Credited %s h overtime from record %s (user %s)", hours, record.record_id, record.user_id)
        return True

    def process_pending_records(
        self,
        admin_id: int,
        *,
        user_id: Optional[int] = None,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
        now: Optional[datetime] = None,
    ) -> ProcessingResult:
        start_date: Optional[date] = coerce_date(start) if start else None
        end_date: Optional[date] = coerce_date(end) if end else None
        if start_date and end_date and end_date < start_date:
            raise ValidationError("Data final deve ser maior ou igual à data inicial")
        window_start = datetime.combine(start_date, time.min) if start_date else None
        window_end = datetime.combine(end_date, time(23, 59, 59)) if end_date else None

        processed = credited = skipped = 0
        after: Optional[tuple[datetime, int]] = None
        while True:
            # Oldest first; the cursor moves past skipped records so they never block later ones.
            page = self._records.list_pending_clock_outs(
                user_id=user_id,
                start=window_start,
                end=window_end,
                after=after,
                limit=PROCESS_BATCH_LIMIT,
            )
            for record in page:
                try:
                    was_credited = self.process_time_record_for_time_bank(record.record_id, admin_id, now=now)
                except NotFoundError as e:
                    logger.warning("Skipping time record %s: %s", record.record_id, e)
                    skipped += 1
                    continue
                processed += 1
                if was_credited:
                    credited += 1

            if len(page) < PROCESS_BATCH_LIMIT:
                break
            after = (page[-1].timestamp, page[-1].record_id)

        logger.info("Processed %d pending records (%d credited, %d skipped)", processed, credited, skipped)
        return ProcessingResult(processed=processed, credited=credited, skipped=skipped)
