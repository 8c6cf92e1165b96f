from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import ScheduleType, Weekday
from ..core.exceptions import InvalidStateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_clause, normalize_decimal, normalize_mysql_time
from .model import EmployeeSchedule, WorkSchedule, WorkScheduleDetail
from .repository import EmployeeScheduleRepository, WorkScheduleRepository

_SCHEDULE_COLUMNS = (
    "schedule_id, name, type, weekly_hours, tolerance_minutes, break_time, created_by, created_at, updated_at"
)
_DETAIL_COLUMNS = "detail_id, schedule_id, weekday, start_time, end_time, break_start, break_end, is_work_day"
_ASSIGNMENT_COLUMNS = "assignment_id, user_id, schedule_id, start_date, end_date, notes"


def _to_schedule(r: dict) -> WorkSchedule:
    return WorkSchedule(
        schedule_id=int(r["schedule_id"]),
        name=r["name"],
        type=ScheduleType(r["type"]),
        weekly_hours=normalize_decimal(r["weekly_hours"]),
        tolerance_minutes=r.get("tolerance_minutes"),
        break_time=r.get("break_time"),
        created_by=int(r["created_by"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _to_detail(r: dict) -> WorkScheduleDetail:
    return WorkScheduleDetail(
        detail_id=int(r["detail_id"]),
        schedule_id=int(r["schedule_id"]),
        weekday=Weekday(r["weekday"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        break_start=normalize_mysql_time(r.get("break_start")),
        break_end=normalize_mysql_time(r.get("break_end")),
        is_work_day=bool(r["is_work_day"]),
    )


def _to_assignment(r: dict) -> EmployeeSchedule:
    return EmployeeSchedule(
        assignment_id=int(r["assignment_id"]),
        user_id=int(r["user_id"]),
        schedule_id=int(r["schedule_id"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
        notes=r.get("notes"),
    )


class MySQLWorkScheduleRepository(WorkScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        name: str,
        type: ScheduleType,
        weekly_hours: Decimal,
        tolerance_minutes: Optional[int],
        break_time: Optional[int],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_schedules(name, type, weekly_hours, tolerance_minutes, break_time, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, type.value, weekly_hours, tolerance_minutes, break_time, int(created_by)),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        schedule_id: int,
        name: str,
        type: ScheduleType,
        weekly_hours: Decimal,
        tolerance_minutes: Optional[int],
        break_time: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_schedules
                SET name=%s, type=%s, weekly_hours=%s, tolerance_minutes=%s, break_time=%s
                WHERE schedule_id=%s
                """,
                (name, type.value, weekly_hours, tolerance_minutes, break_time, int(schedule_id)),
            )
            return cur.rowcount > 0

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SCHEDULE_COLUMNS} FROM work_schedules WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_all(self) -> Sequence[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SCHEDULE_COLUMNS} FROM work_schedules ORDER BY name")
            return [_to_schedule(r) for r in fetchall(cur)]

    def delete(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0

    def create_detail(
        self,
        *,
        schedule_id: int,
        weekday: Weekday,
        start_time: time,
        end_time: time,
        break_start: Optional[time],
        break_end: Optional[time],
        is_work_day: bool,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO work_schedule_details(
                        schedule_id, weekday, start_time, end_time, break_start, break_end, is_work_day
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(schedule_id), weekday.value, start_time, end_time, break_start, break_end, int(is_work_day)),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError:
            raise InvalidStateError(f"Já existe configuração para {weekday.value} nesta jornada")

    def update_detail(
        self,
        *,
        detail_id: int,
        start_time: time,
        end_time: time,
        break_start: Optional[time],
        break_end: Optional[time],
        is_work_day: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_schedule_details
                SET start_time=%s, end_time=%s, break_start=%s, break_end=%s, is_work_day=%s
                WHERE detail_id=%s
                """,
                (start_time, end_time, break_start, break_end, int(is_work_day), int(detail_id)),
            )
            return cur.rowcount > 0

    def get_detail(self, detail_id: int) -> Optional[WorkScheduleDetail]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_DETAIL_COLUMNS} FROM work_schedule_details WHERE detail_id=%s", (int(detail_id),))
            r = fetchone(cur)
            return _to_detail(r) if r else None

    def get_detail_for_weekday(self, *, schedule_id: int, weekday: Weekday) -> Optional[WorkScheduleDetail]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_DETAIL_COLUMNS} FROM work_schedule_details WHERE schedule_id=%s AND weekday=%s",
                (int(schedule_id), weekday.value),
            )
            r = fetchone(cur)
            return _to_detail(r) if r else None

    def list_details(self, schedule_id: int) -> Sequence[WorkScheduleDetail]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DETAIL_COLUMNS}
                FROM work_schedule_details
                WHERE schedule_id=%s
                ORDER BY FIELD(weekday, 'monday','tuesday','wednesday','thursday','friday','saturday','sunday')
                """,
                (int(schedule_id),),
            )
            return [_to_detail(r) for r in fetchall(cur)]

    def delete_detail(self, detail_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_schedule_details WHERE detail_id=%s", (int(detail_id),))
            return cur.rowcount > 0


class MySQLEmployeeScheduleRepository(EmployeeScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        schedule_id: int,
        start_date: date,
        end_date: Optional[date],
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_schedules(user_id, schedule_id, start_date, end_date, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(schedule_id), start_date, end_date, notes),
            )
            return int(cur.lastrowid)

    def get_by_id(self, assignment_id: int) -> Optional[EmployeeSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ASSIGNMENT_COLUMNS} FROM employee_schedules WHERE assignment_id=%s",
                (int(assignment_id),),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def list_for_user(self, user_id: int, *, for_update: bool = False) -> Sequence[EmployeeSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ASSIGNMENT_COLUMNS}
                FROM employee_schedules
                WHERE user_id=%s
                ORDER BY start_date ASC, assignment_id ASC
                """
                + lock_clause(for_update),
                (int(user_id),),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def find_active_on(self, *, user_id: int, day: date) -> Optional[EmployeeSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ASSIGNMENT_COLUMNS}
                FROM employee_schedules
                WHERE user_id=%s AND start_date<=%s AND (end_date IS NULL OR end_date>=%s)
                ORDER BY start_date DESC, assignment_id DESC
                LIMIT 1
                """,
                (int(user_id), day, day),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def set_end_date(self, *, assignment_id: int, end_date: Optional[date]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employee_schedules SET end_date=%s WHERE assignment_id=%s",
                (end_date, int(assignment_id)),
            )
            return cur.rowcount > 0

    def count_for_schedule(self, schedule_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employee_schedules WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0
