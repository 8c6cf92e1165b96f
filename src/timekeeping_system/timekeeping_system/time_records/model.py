from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import RecordType


@dataclass(frozen=True)
class TimeRecord:
    """Domain entity: one clock-in or clock-out event."""

    record_id: int
    user_id: int
    timestamp: datetime
    type: RecordType
    created_by: int
    ip_address: str = ""
    latitude: str = ""
    longitude: str = ""
    photo: Optional[str] = None
    is_manual: bool = False
    justification: Optional[str] = None
    schedule_id: Optional[int] = None
    is_late: bool = False
    overtime: Optional[Decimal] = None
    processed_for_time_bank: bool = False

    @property
    def day(self) -> date:
        return self.timestamp.date()


@dataclass(frozen=True)
class TimeRecordFilter:
    user_id: Optional[int] = None
    type: Optional[RecordType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    only_unprocessed: bool = False
