from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import TimeBankEntryType
from .model import TimeBankEntry


class TimeBankRepository(Protocol):
    """Ledger storage. Entries are only ever inserted or flagged as compensated."""

    def create(
        self,
        *,
        user_id: int,
        date: date,
        hours_balance: Decimal,
        description: str,
        type: TimeBankEntryType,
        created_by: int,
        related_record_id: Optional[int] = None,
        expiration_date: Optional[date] = None,
        was_compensated: bool = False,
        compensation_date: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[TimeBankEntry]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[TimeBankEntry]:
        """Every entry of the user, newest first."""

        raise NotImplementedError

    def list_open_entries(self, *, user_id: int, today: date, for_update: bool = False) -> Sequence[TimeBankEntry]:
        """Non-compensated, non-expired entries ordered by date then id (FIFO order).

        With ``for_update`` the rows stay locked until the surrounding transaction ends.
        """

        raise NotImplementedError

    def mark_compensated(self, *, entry_id: int, compensation_date: date) -> bool:
        raise NotImplementedError
