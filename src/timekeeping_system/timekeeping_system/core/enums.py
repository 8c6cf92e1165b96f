from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class RecordType(str, Enum):
    """Direction of a clock event."""

    IN = "in"
    OUT = "out"

    @property
    def opposite(self) -> "RecordType":
        return RecordType.OUT if self is RecordType.IN else RecordType.IN


class ScheduleType(str, Enum):
    REGULAR = "regular"
    FLEXIBLE = "flexible"
    SHIFT = "shift"
    SCALE = "scale"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


# Indexed by date.weekday() (Monday == 0).
WEEKDAYS: tuple[Weekday, ...] = (
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
    Weekday.SUNDAY,
)


class TimeBankEntryType(str, Enum):
    """Origin of a time-bank ledger entry."""

    OVERTIME = "overtime"
    COMPENSATION = "compensation"
    ABSENCE = "absence"
    LATE = "late"
    MANUAL_ADJUSTMENT = "manual_adjustment"
    ADJUSTMENT = "adjustment"


class AbsenceType(str, Enum):
    VACATION = "vacation"
    SICK_LEAVE = "sick_leave"
    PERSONAL = "personal"
    COMPENSATION = "compensation"


class RequestStatus(str, Enum):
    """Approval flow state: pending -> approved | rejected."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TransactionType(str, Enum):
    BONUS = "bonus"
    DEDUCTION = "deduction"
    ADVANCE = "advance"
    REIMBURSEMENT = "reimbursement"
    OTHER = "other"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
