from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from ..core.exceptions import ValidationError

DateLike = Union[date, str]

_HOURS_QUANT = Decimal("0.01")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError(f"Data inválida (AAAA-MM-DD): {value!r}")


def parse_iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValidationError(f"Data/hora inválida: {value!r}")


def coerce_date(value: DateLike) -> date:
    """Accept a date (or datetime) or an ISO string and return a plain date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Inclusive [start 00:00:00, end 23:59:59] window."""
    return datetime.combine(start, time.min), datetime.combine(end, time(23, 59, 59))


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, floored (negative spans floor too)."""
    return int((end - start).total_seconds() // 60)


def time_span_minutes(start: time, end: time) -> int:
    anchor = date(2000, 1, 3)
    return minutes_between(datetime.combine(anchor, start), datetime.combine(anchor, end))


def business_days_between(start: date, end: date) -> int:
    """Count Monday-Friday days in [start, end]."""
    if end < start:
        return 0
    days = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days


def quantize_hours(value: Union[Decimal, float, int, str]) -> Decimal:
    return Decimal(str(value)).quantize(_HOURS_QUANT, rounding=ROUND_HALF_UP)


def minutes_to_hours(minutes: int) -> Decimal:
    return quantize_hours(Decimal(int(minutes)) / Decimal(60))


def hours_to_minutes(hours: Union[Decimal, float, int]) -> int:
    return int((Decimal(str(hours)) * 60).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()
