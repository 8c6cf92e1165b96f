from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import RecordType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_clause, normalize_decimal
from .model import TimeRecord, TimeRecordFilter
from .repository import TimeRecordRepository

_COLUMNS = """
    record_id, user_id, timestamp, type, ip_address, latitude, longitude, photo,
    is_manual, justification, created_by, schedule_id, is_late, overtime, processed_for_time_bank
"""


def _to_record(r: dict) -> TimeRecord:
    return TimeRecord(
        record_id=int(r["record_id"]),
        user_id=int(r["user_id"]),
        timestamp=r["timestamp"],
        type=RecordType(r["type"]),
        created_by=int(r["created_by"]),
        ip_address=r.get("ip_address") or "",
        latitude=r.get("latitude") or "",
        longitude=r.get("longitude") or "",
        photo=r.get("photo"),
        is_manual=bool(r.get("is_manual")),
        justification=r.get("justification"),
        schedule_id=r.get("schedule_id"),
        is_late=bool(r.get("is_late")),
        overtime=normalize_decimal(r.get("overtime")),
        processed_for_time_bank=bool(r.get("processed_for_time_bank")),
    )


class MySQLTimeRecordRepository(TimeRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records(
                    user_id, timestamp, type, ip_address, latitude, longitude, photo,
                    is_manual, justification, created_by, schedule_id, is_late
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    timestamp,
                    type.value,
                    ip_address,
                    latitude,
                    longitude,
                    photo,
                    int(is_manual),
                    justification,
                    int(created_by),
                    schedule_id,
                    int(is_late),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, record_id: int, *, for_update: bool = False) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_records WHERE record_id=%s" + lock_clause(for_update),
                (int(record_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_user_between(self, *, user_id: int, start: datetime, end: datetime) -> Sequence[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE user_id=%s AND timestamp BETWEEN %s AND %s
                ORDER BY timestamp ASC, record_id ASC
                """,
                (int(user_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def find_previous_of_type(self, *, user_id: int, before: datetime, type: RecordType) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE user_id=%s AND type=%s AND timestamp<%s
                ORDER BY timestamp DESC, record_id DESC
                LIMIT 1
                """,
                (int(user_id), type.value, before),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_latest_for_user(self, user_id: int) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE user_id=%s
                ORDER BY timestamp DESC, record_id DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_records(self, record_filter: TimeRecordFilter, *, limit: int = 200) -> Sequence[TimeRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if record_filter.user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(record_filter.user_id))
        if record_filter.type is not None:
            clauses.append("type=%s")
            params.append(record_filter.type.value)
        if record_filter.start_date is not None:
            clauses.append("timestamp>=%s")
            params.append(datetime.combine(record_filter.start_date, time.min))
        if record_filter.end_date is not None:
            clauses.append("timestamp<=%s")
            params.append(datetime.combine(record_filter.end_date, time(23, 59, 59)))
        if record_filter.only_unprocessed:
            clauses.append("processed_for_time_bank=0")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE {where}
                ORDER BY timestamp DESC, record_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_pending_clock_outs(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        after: Optional[tuple[datetime, int]] = None,
        limit: int = 1000,
    ) -> Sequence[TimeRecord]:
        clauses = ["type=%s", "processed_for_time_bank=0"]
        params: list[object] = [RecordType.OUT.value]

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if start is not None:
            clauses.append("timestamp>=%s")
            params.append(start)
        if end is not None:
            clauses.append("timestamp<=%s")
            params.append(end)
        if after is not None:
            after_ts, after_id = after
            clauses.append("(timestamp>%s OR (timestamp=%s AND record_id>%s))")
            params.extend([after_ts, after_ts, int(after_id)])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE {where}
                ORDER BY timestamp ASC, record_id ASC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def update(
        self,
        *,
        record_id: int,
        timestamp: datetime,
        type: RecordType,
        justification: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_records
                SET timestamp=%s, type=%s, justification=%s, is_manual=1
                WHERE record_id=%s AND processed_for_time_bank=0
                """,
                (timestamp, type.value, justification, int(record_id)),
            )
            return cur.rowcount > 0

    def mark_processed(self, *, record_id: int, overtime: Optional[Decimal]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_records
                SET overtime=%s, processed_for_time_bank=1
                WHERE record_id=%s AND processed_for_time_bank=0
                """,
                (overtime, int(record_id)),
            )
            return cur.rowcount > 0

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM time_records WHERE record_id=%s AND processed_for_time_bank=0",
                (int(record_id),),
            )
            return cur.rowcount > 0
