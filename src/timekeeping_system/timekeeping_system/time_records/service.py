from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RecordType
from ..core.exceptions import InvalidStateError, NotFoundError
from ..schedules.resolver import ScheduleResolver
from .model import TimeRecord, TimeRecordFilter
from .repository import TimeRecordRepository

logger = logging.getLogger(__name__)


class TimeRecordService:
    """Time Record Store: self-service clocking and admin corrections."""

    def __init__(self, records: TimeRecordRepository, resolver: ScheduleResolver):
        self._records = records
        self._resolver = resolver

    def get_user_status(self, user_id: int) -> RecordType:
        latest = self._records.get_latest_for_user(int(user_id))
        if latest is None:
            return RecordType.OUT
        return latest.type

    def register_clock(
        self,
        user_id: int,
        *,
        type: RecordType | str | None = None,
        ip_address: str = "",
        latitude: str = "",
        longitude: str = "",
        photo: Optional[str] = None,
        now: datetime | None = None,
    ) -> TimeRecord:
        now = now or now_local()
        status = self.get_user_status(user_id)
        record_type = status.opposite if type is None else require_enum(RecordType, type, "Tipo de registro")
        if record_type == status and record_type == RecordType.IN:
            raise InvalidStateError("Entrada já registrada; registre a saída primeiro")
        if record_type == status and record_type == RecordType.OUT:
            raise InvalidStateError("Nenhuma entrada em aberto para registrar a saída")

        return self._create(
            user_id=int(user_id),
            timestamp=now,
            type=record_type,
            ip_address=ip_address,
            latitude=latitude,
            longitude=longitude,
            photo=photo,
            is_manual=False,
            justification=None,
            created_by=int(user_id),
        )

    def create_manual_record(
        self,
        *,
        admin_id: int,
        user_id: int,
        timestamp: datetime,
        type: RecordType | str,
        justification: str,
    ) -> TimeRecord:
        return self._create(
            user_id=int(user_id),
            timestamp=timestamp,
            type=require_enum(RecordType, type, "Tipo de registro"),
            ip_address="",
            latitude="",
            longitude="",
            photo=None,
            is_manual=True,
            justification=require_non_empty(justification, "Justificativa"),
            created_by=int(admin_id),
        )

    def get_record(self, record_id: int) -> TimeRecord:
        record = self._records.get_by_id(int(record_id))
        if not record:
            raise NotFoundError("Registro de ponto não encontrado")
        return record

    def list_records(self, record_filter: TimeRecordFilter, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[TimeRecord]:
        return self._records.list_records(record_filter, limit=limit)

    def update_record(
        self,
        *,
        record_id: int,
        timestamp: datetime,
        type: RecordType | str,
        justification: str,
    ) -> TimeRecord:
        record = self.get_record(record_id)
        if record.processed_for_time_bank:
            raise InvalidStateError("Registro já processado no banco de horas não pode ser alterado")

        self._records.update(
            record_id=record.record_id,
            timestamp=timestamp,
            type=require_enum(RecordType, type, "Tipo de registro"),
            justification=require_non_empty(justification, "Justificativa"),
        )
        logger.info("Time record %s corrected", record.record_id)
        return self.get_record(record.record_id)

    def delete_record(self, record_id: int) -> None:
        record = self.get_record(record_id)
        if record.processed_for_time_bank:
            raise InvalidStateError("Registro já processado no banco de horas não pode ser excluído")
        self._records.delete(record.record_id)
        logger.info("Time record %s deleted", record.record_id)

    def _create(self, *, user_id: int, timestamp: datetime, type: RecordType, **fields) -> TimeRecord:
        resolved = self._resolver.get_employee_work_schedule_for_date(user_id, timestamp.date())
        schedule_id = resolved.schedule.schedule_id if resolved.schedule else None

        is_late = False
        if type == RecordType.IN and resolved.is_working_day:
            tolerance = timedelta(minutes=resolved.schedule.tolerance_minutes or 0)
            is_late = timestamp > datetime.combine(timestamp.date(), resolved.detail.start_time) + tolerance

        record_id = self._records.create(
            user_id=user_id,
            timestamp=timestamp,
            type=type,
            schedule_id=schedule_id,
            is_late=is_late,
            **fields,
        )
        return self.get_record(record_id)
