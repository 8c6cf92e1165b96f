from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import TimeBankEntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_clause, normalize_decimal
from .model import TimeBankEntry
from .repository import TimeBankRepository

_COLUMNS = """
    entry_id, user_id, date, hours_balance, description, type, related_record_id,
    expiration_date, was_compensated, compensation_date, created_by, created_at
"""


def _to_entry(r: dict) -> TimeBankEntry:
    return TimeBankEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        date=r["date"],
        hours_balance=normalize_decimal(r["hours_balance"]),
        description=r["description"],
        type=TimeBankEntryType(r["type"]),
        created_by=int(r["created_by"]),
        related_record_id=r.get("related_record_id"),
        expiration_date=r.get("expiration_date"),
        was_compensated=bool(r.get("was_compensated")),
        compensation_date=r.get("compensation_date"),
        created_at=r.get("created_at"),
    )


class MySQLTimeBankRepository(TimeBankRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_bank(
                    user_id, date, hours_balance, description, type, related_record_id,
                    expiration_date, was_compensated, compensation_date, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    date,
                    hours_balance,
                    description,
                    type.value,
                    related_record_id,
                    expiration_date,
                    int(was_compensated),
                    compensation_date,
                    int(created_by),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, entry_id: int) -> Optional[TimeBankEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_bank WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[TimeBankEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_bank
                WHERE user_id=%s
                ORDER BY date DESC, entry_id DESC
                """,
                (int(user_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_open_entries(self, *, user_id: int, today: date, for_update: bool = False) -> Sequence[TimeBankEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_bank
                WHERE user_id=%s
                  AND was_compensated=0
                  AND (expiration_date IS NULL OR expiration_date>=%s)
                ORDER BY date ASC, entry_id ASC
                """
                + lock_clause(for_update),
                (int(user_id), today),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def mark_compensated(self, *, entry_id: int, compensation_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_bank
                SET was_compensated=1, compensation_date=%s
                WHERE entry_id=%s AND was_compensated=0
                """,
                (compensation_date, int(entry_id)),
            )
            return cur.rowcount > 0
