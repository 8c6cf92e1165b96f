from __future__ import annotations

from datetime import time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} é obrigatório")
    return value.strip()


def require_positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} inválido")
    if number <= 0:
        raise ValidationError(f"{field_name} deve ser maior que zero")
    return number


def require_decimal(value, field_name: str, *, positive: bool = False) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} inválido")
    if not number.is_finite():
        raise ValidationError(f"{field_name} inválido")
    if positive and number <= 0:
        raise ValidationError(f"{field_name} deve ser maior que zero")
    return number


def require_enum(enum_cls: Type[E], value, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} inválido (permitidos: {allowed})")


def parse_time(value, field_name: str) -> Optional[time]:
    """Parse HH:MM or HH:MM:SS; empty values become None."""
    if value is None or isinstance(value, time):
        return value
    v = str(value).strip()
    if not v:
        return None
    parts = v.split(":")
    try:
        if len(parts) not in (2, 3):
            raise ValueError(v)
        return time(int(parts[0]), int(parts[1]), int(parts[2]) if len(parts) == 3 else 0)
    except ValueError:
        raise ValidationError(f"{field_name} inválido (HH:MM)")
