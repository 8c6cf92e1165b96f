from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import hours_to_minutes
from ..core.enums import TimeBankEntryType


@dataclass(frozen=True)
class TimeBankEntry:
    """Domain entity: one signed-hours line of the time-bank ledger."""

    entry_id: int
    user_id: int
    date: date
    hours_balance: Decimal
    description: str
    type: TimeBankEntryType
    created_by: int
    related_record_id: Optional[int] = None
    expiration_date: Optional[date] = None
    was_compensated: bool = False
    compensation_date: Optional[date] = None
    created_at: Optional[datetime] = None

    @property
    def minutes(self) -> int:
        return hours_to_minutes(self.hours_balance)

    def is_expired(self, today: date) -> bool:
        return self.expiration_date is not None and self.expiration_date < today

    def counts_towards_balance(self, today: date) -> bool:
        return not self.was_compensated and not self.is_expired(today)


@dataclass(frozen=True)
class TimeBankSummary:
    user_id: int
    balance_minutes: int
    credit_minutes: int
    debit_minutes: int
    expiring_soon_minutes: int
    next_expiration: Optional[date] = None
