from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import TransactionType
from .model import FinancialTransaction, Salary, TransactionFilter


class SalaryRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        amount: Decimal,
        effective_date: date,
        notes: Optional[str],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, salary_id: int, *, for_update: bool = False) -> Optional[Salary]:
        raise NotImplementedError

    def get_current(self, *, user_id: int, today: date) -> Optional[Salary]:
        """Latest salary with effective_date <= today."""

        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Salary]:
        """Newest effective date first."""

        raise NotImplementedError

    def update(self, *, salary_id: int, amount: Decimal, effective_date: date, notes: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, salary_id: int) -> bool:
        raise NotImplementedError


class FinancialTransactionRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        type: TransactionType,
        amount: Decimal,
        transaction_date: date,
        description: str,
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, transaction_id: int, *, for_update: bool = False) -> Optional[FinancialTransaction]:
        raise NotImplementedError

    def list_transactions(self, tx_filter: TransactionFilter, *, limit: int = 200) -> Sequence[FinancialTransaction]:
        raise NotImplementedError

    def update(
        self,
        *,
        transaction_id: int,
        type: TransactionType,
        amount: Decimal,
        transaction_date: date,
        description: str,
    ) -> bool:
        raise NotImplementedError

    def delete(self, transaction_id: int) -> bool:
        raise NotImplementedError
