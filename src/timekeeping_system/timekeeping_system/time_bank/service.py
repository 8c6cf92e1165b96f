from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import DateLike, coerce_date, minutes_to_hours, quantize_hours, today_local
from ..common.validators import require_decimal, require_enum, require_non_empty
from ..core.constants import REMAINDER_DESCRIPTION_PREFIX, TIME_BANK_EXPIRY_WARNING_DAYS
from ..core.enums import TimeBankEntryType
from ..core.exceptions import InsufficientBalanceError, InvalidStateError, NotFoundError, ValidationError
from ..database.unit_of_work import TransactionManager
from .model import TimeBankEntry, TimeBankSummary
from .repository import TimeBankRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewTimeBankEntry:
    user_id: int
    date: DateLike
    hours_balance: Decimal | float | int | str
    description: str
    type: TimeBankEntryType | str
    created_by: int
    related_record_id: Optional[int] = None
    expiration_date: Optional[DateLike] = None


class TimeBankService:
    """Time-bank ledger: signed-hour credits and debits with FIFO compensation.

    Invariant: the balance is the sum of every entry that is neither
    compensated nor expired. Consumption never edits an amount in place; it
    flags consumed credits and, for a partially used credit, books the
    remainder as a new entry with the same expiration date.
    """

    def __init__(
        self,
        entries: TimeBankRepository,
        tx: TransactionManager,
        *,
        expiry_warning_days: int = TIME_BANK_EXPIRY_WARNING_DAYS,
    ):
        self._entries = entries
        self._tx = tx
        self._expiry_warning_days = int(expiry_warning_days)

    def create_time_bank(self, entry: NewTimeBankEntry) -> TimeBankEntry:
        entry_type = require_enum(TimeBankEntryType, entry.type, "Tipo de lançamento")
        hours = quantize_hours(require_decimal(entry.hours_balance, "Horas"))
        expiration = coerce_date(entry.expiration_date) if entry.expiration_date else None

        entry_id = self._entries.create(
            user_id=int(entry.user_id),
            date=coerce_date(entry.date),
            hours_balance=hours,
            description=require_non_empty(entry.description, "Descrição"),
            type=entry_type,
            created_by=int(entry.created_by),
            related_record_id=entry.related_record_id,
            expiration_date=expiration,
        )
        logger.info("Time bank entry %s: user=%s type=%s hours=%s", entry_id, entry.user_id, entry_type.value, hours)
        return self._entries.get_by_id(entry_id)

    def add_manual_adjustment(
        self,
        *,
        user_id: int,
        hours,
        description: str,
        created_by: int,
        entry_date: Optional[DateLike] = None,
        expiration_date: Optional[DateLike] = None,
    ) -> TimeBankEntry:
        if require_decimal(hours, "Horas") == 0:
            raise ValidationError("Ajuste deve ser diferente de zero")
        return self.create_time_bank(
            NewTimeBankEntry(
                user_id=user_id,
                date=entry_date or today_local(),
                hours_balance=hours,
                description=description,
                type=TimeBankEntryType.MANUAL_ADJUSTMENT,
                created_by=created_by,
                expiration_date=expiration_date,
            )
        )

    def get_entry(self, entry_id: int) -> TimeBankEntry:
        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Lançamento do banco de horas não encontrado")
        return entry

    def list_user_entries(self, user_id: int) -> Sequence[TimeBankEntry]:
        return self._entries.list_for_user(int(user_id))

    def get_user_time_bank_balance(self, user_id: int, *, today: Optional[date] = None) -> int:
        today = today or today_local()
        return sum(e.minutes for e in self._entries.list_open_entries(user_id=int(user_id), today=today))

    def get_user_summary(self, user_id: int, *, today: Optional[date] = None) -> TimeBankSummary:
        today = today or today_local()
        open_entries = self._entries.list_open_entries(user_id=int(user_id), today=today)
        warning_limit = today + timedelta(days=self._expiry_warning_days)

        credits = [e for e in open_entries if e.hours_balance > 0]
        expiring = [e for e in credits if e.expiration_date is not None and e.expiration_date <= warning_limit]
        expirations = sorted(e.expiration_date for e in credits if e.expiration_date is not None)

        return TimeBankSummary(
            user_id=int(user_id),
            balance_minutes=sum(e.minutes for e in open_entries),
            credit_minutes=sum(e.minutes for e in credits),
            debit_minutes=-sum(e.minutes for e in open_entries if e.hours_balance < 0),
            expiring_soon_minutes=sum(e.minutes for e in expiring),
            next_expiration=expirations[0] if expirations else None,
        )

    def compensate_time_bank_hours(
        self,
        user_id: int,
        compensation_date: DateLike,
        minutes: int,
        description: str,
        created_by: int,
        *,
        today: Optional[date] = None,
    ) -> bool:
        minutes = int(minutes)
        if minutes <= 0:
            raise ValidationError("Quantidade de minutos deve ser maior que zero")
        comp_date = coerce_date(compensation_date)
        description = require_non_empty(description, "Descrição")
        today = today or today_local()

        with self._tx.transaction():
            open_entries = self._entries.list_open_entries(user_id=int(user_id), today=today, for_update=True)
            balance = sum(e.minutes for e in open_entries)
            if balance < minutes:
                logger.warning(
                    "Compensation refused for user %s: balance=%s requested=%s", user_id, balance, minutes
                )
                raise InsufficientBalanceError(
                    f"Saldo insuficiente no banco de horas (disponível: {balance} min, solicitado: {minutes} min)"
                )

            remaining = minutes
            consumed: list[TimeBankEntry] = []
            for entry in open_entries:
                if remaining <= 0:
                    break
                if entry.hours_balance < 0:
                    continue

                entry_minutes = entry.minutes
                if not self._entries.mark_compensated(entry_id=entry.entry_id, compensation_date=comp_date):
                    raise InvalidStateError("Lançamento já compensado por outra operação")
                consumed.append(entry)

                if entry_minutes <= remaining:
                    remaining -= entry_minutes
                    continue

                leftover = entry_minutes - remaining
                remainder_id = self._entries.create(
                    user_id=entry.user_id,
                    date=entry.date,
                    hours_balance=minutes_to_hours(leftover),
                    description=f"{REMAINDER_DESCRIPTION_PREFIX}{entry.description}",
                    type=TimeBankEntryType.ADJUSTMENT,
                    created_by=int(created_by),
                    related_record_id=entry.related_record_id,
                    expiration_date=entry.expiration_date,
                )
                logger.info("Split entry %s: %s min left as entry %s", entry.entry_id, leftover, remainder_id)
                remaining = 0

            if not consumed:
                return False

            # The debit records a consumption already applied to the credits
            # above, so it is stored as compensated and stays out of the balance.
            self._entries.create(
                user_id=int(user_id),
                date=comp_date,
                hours_balance=-minutes_to_hours(minutes),
                description=description,
                type=TimeBankEntryType.COMPENSATION,
                created_by=int(created_by),
                related_record_id=consumed[0].entry_id,
                was_compensated=True,
                compensation_date=comp_date,
            )

        logger.info(
            "Compensated %s min for user %s on %s (%d entries)", minutes, user_id, comp_date.isoformat(), len(consumed)
        )
        return True
