from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import RecordType
from .model import TimeRecord, TimeRecordFilter


class TimeRecordRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        timestamp: datetime,
        type: RecordType,
        ip_address: str,
        latitude: str,
        longitude: str,
        photo: Optional[str],
        is_manual: bool,
        justification: Optional[str],
        created_by: int,
        schedule_id: Optional[int],
        is_late: bool,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, record_id: int, *, for_update: bool = False) -> Optional[TimeRecord]:
        raise NotImplementedError

    def list_for_user_between(self, *, user_id: int, start: datetime, end: datetime) -> Sequence[TimeRecord]:
        """Records with start <= timestamp <= end, ascending by timestamp."""

        raise NotImplementedError

    def find_previous_of_type(self, *, user_id: int, before: datetime, type: RecordType) -> Optional[TimeRecord]:
        """Latest record of ``type`` with a timestamp strictly before ``before``."""

        raise NotImplementedError

    def get_latest_for_user(self, user_id: int) -> Optional[TimeRecord]:
        raise NotImplementedError

    def list_records(self, record_filter: TimeRecordFilter, *, limit: int = 200) -> Sequence[TimeRecord]:
        """Filtered records, newest first."""

        raise NotImplementedError

    def list_pending_clock_outs(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        after: Optional[tuple[datetime, int]] = None,
        limit: int = 1000,
    ) -> Sequence[TimeRecord]:
        """Unprocessed ``out`` records ordered by (timestamp, record_id) ascending.

        ``after`` is the (timestamp, record_id) of the last record of the previous page.
        """

        raise NotImplementedError

    def update(
        self,
        *,
        record_id: int,
        timestamp: datetime,
        type: RecordType,
        justification: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def mark_processed(self, *, record_id: int, overtime: Optional[Decimal]) -> bool:
        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError
