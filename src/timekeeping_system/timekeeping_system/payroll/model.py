from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import TransactionType


@dataclass(frozen=True)
class Salary:
    salary_id: int
    user_id: int
    amount: Decimal
    effective_date: date
    created_by: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class FinancialTransaction:
    transaction_id: int
    user_id: int
    type: TransactionType
    amount: Decimal
    transaction_date: date
    description: str
    created_by: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class TransactionFilter:
    user_id: Optional[int] = None
    type: Optional[TransactionType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
