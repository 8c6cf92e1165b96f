from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ..audit.service import AuditService
from ..common.datetime_utils import DateLike, coerce_date, today_local
from ..common.validators import require_decimal, require_enum, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import AuditAction, TransactionType
from ..core.exceptions import NotFoundError, ValidationError
from ..database.unit_of_work import TransactionManager
from .model import FinancialTransaction, Salary, TransactionFilter
from .repository import FinancialTransactionRepository, SalaryRepository

logger = logging.getLogger(__name__)

SALARY_ENTITY = "salary"
TRANSACTION_ENTITY = "financial_transaction"


def _money(value, field_name: str) -> Decimal:
    return require_decimal(value, field_name, positive=True).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SalaryInput:
    amount: Decimal | float | int | str
    effective_date: DateLike
    notes: Optional[str] = None


@dataclass(frozen=True)
class TransactionInput:
    type: TransactionType | str
    amount: Decimal | float | int | str
    transaction_date: DateLike
    description: str


class SalaryService:
    """Salary history. Every mutation is audited in the same transaction."""

    def __init__(self, salaries: SalaryRepository, audit: AuditService, tx: TransactionManager):
        self._salaries = salaries
        self._audit = audit
        self._tx = tx

    def create_salary(self, *, user_id: int, data: SalaryInput, actor_id: int, ip_address: Optional[str] = None) -> Salary:
        amount = _money(data.amount, "Valor")
        effective = coerce_date(data.effective_date)
        notes = (data.notes or "").strip() or None

        with self._tx.transaction():
            salary_id = self._salaries.create(
                user_id=int(user_id), amount=amount, effective_date=effective, notes=notes, created_by=int(actor_id)
            )
            created = self._salaries.get_by_id(salary_id)
            self._audit.record(
                entity_type=SALARY_ENTITY,
                entity_id=salary_id,
                action=AuditAction.CREATE,
                user_id=actor_id,
                after=created,
                ip_address=ip_address,
            )

        logger.info("Salary %s created for user %s", salary_id, user_id)
        return created

    def get_salary(self, salary_id: int) -> Salary:
        salary = self._salaries.get_by_id(int(salary_id))
        if not salary:
            raise NotFoundError("Salário não encontrado")
        return salary

    def get_current_salary(self, user_id: int, *, today: Optional[date] = None) -> Optional[Salary]:
        return self._salaries.get_current(user_id=int(user_id), today=today or today_local())

    def get_salary_history(self, user_id: int) -> Sequence[Salary]:
        return self._salaries.list_for_user(int(user_id))

    def update_salary(self, *, salary_id: int, data: SalaryInput, actor_id: int, ip_address: Optional[str] = None) -> Salary:
        amount = _money(data.amount, "Valor")
        effective = coerce_date(data.effective_date)
        notes = (data.notes or "").strip() or None

        with self._tx.transaction():
            before = self._salaries.get_by_id(int(salary_id), for_update=True)
            if not before:
                raise NotFoundError("Salário não encontrado")
            self._salaries.update(salary_id=before.salary_id, amount=amount, effective_date=effective, notes=notes)
            after = self._salaries.get_by_id(before.salary_id)
            self._audit.record(
                entity_type=SALARY_ENTITY,
                entity_id=before.salary_id,
                action=AuditAction.UPDATE,
                user_id=actor_id,
                before=before,
                after=after,
                ip_address=ip_address,
            )
        return after

    def delete_salary(self, *, salary_id: int, actor_id: int, ip_address: Optional[str] = None) -> None:
        with self._tx.transaction():
            before = self._salaries.get_by_id(int(salary_id), for_update=True)
            if not before:
                raise NotFoundError("Salário não encontrado")
            self._salaries.delete(before.salary_id)
            self._audit.record(
                entity_type=SALARY_ENTITY,
                entity_id=before.salary_id,
                action=AuditAction.DELETE,
                user_id=actor_id,
                before=before,
                ip_address=ip_address,
            )
        logger.info("Salary %s deleted by %s", salary_id, actor_id)


class FinancialTransactionService:
    def __init__(self, transactions: FinancialTransactionRepository, audit: AuditService, tx: TransactionManager):
        self._transactions = transactions
        self._audit = audit
        self._tx = tx

    @staticmethod
    def _validate(data: TransactionInput) -> tuple[TransactionType, Decimal, date, str]:
        return (
            require_enum(TransactionType, data.type, "Tipo de transação"),
            _money(data.amount, "Valor"),
            coerce_date(data.transaction_date),
            require_non_empty(data.description, "Descrição"),
        )

    def create_transaction(
        self, *, user_id: int, data: TransactionInput, actor_id: int, ip_address: Optional[str] = None
    ) -> FinancialTransaction:
        tx_type, amount, tx_date, description = self._validate(data)

        with self._tx.transaction():
            transaction_id = self._transactions.create(
                user_id=int(user_id),
                type=tx_type,
                amount=amount,
                transaction_date=tx_date,
                description=description,
                created_by=int(actor_id),
            )
            created = self._transactions.get_by_id(transaction_id)
            self._audit.record(
                entity_type=TRANSACTION_ENTITY,
                entity_id=transaction_id,
                action=AuditAction.CREATE,
                user_id=actor_id,
                after=created,
                ip_address=ip_address,
            )

        logger.info("Transaction %s (%s %s) created for user %s", transaction_id, tx_type.value, amount, user_id)
        return created

    def get_transaction(self, transaction_id: int) -> FinancialTransaction:
        found = self._transactions.get_by_id(int(transaction_id))
        if not found:
            raise NotFoundError("Transação não encontrada")
        return found

    def list_transactions(
        self,
        *,
        user_id: Optional[int] = None,
        type: TransactionType | str | None = None,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[FinancialTransaction]:
        start = coerce_date(start_date) if start_date else None
        end = coerce_date(end_date) if end_date else None
        if start and end and end < start:
            raise ValidationError("Data final deve ser maior ou igual à data inicial")

        tx_filter = TransactionFilter(
            user_id=int(user_id) if user_id is not None else None,
            type=require_enum(TransactionType, type, "Tipo de transação") if type else None,
            start_date=start,
            end_date=end,
        )
        return self._transactions.list_transactions(tx_filter, limit=int(limit))

    def update_transaction(
        self, *, transaction_id: int, data: TransactionInput, actor_id: int, ip_address: Optional[str] = None
    ) -> FinancialTransaction:
        tx_type, amount, tx_date, description = self._validate(data)

        with self._tx.transaction():
            before = self._transactions.get_by_id(int(transaction_id), for_update=True)
            if not before:
                raise NotFoundError("Transação não encontrada")
            self._transactions.update(
                transaction_id=before.transaction_id,
                type=tx_type,
                amount=amount,
                transaction_date=tx_date,
                description=description,
            )
            after = self._transactions.get_by_id(before.transaction_id)
            self._audit.record(
                entity_type=TRANSACTION_ENTITY,
                entity_id=before.transaction_id,
                action=AuditAction.UPDATE,
                user_id=actor_id,
                before=before,
                after=after,
                ip_address=ip_address,
            )
        return after

    def delete_transaction(self, *, transaction_id: int, actor_id: int, ip_address: Optional[str] = None) -> None:
        with self._tx.transaction():
            before = self._transactions.get_by_id(int(transaction_id), for_update=True)
            if not before:
                raise NotFoundError("Transação não encontrada")
            self._transactions.delete(before.transaction_id)
            self._audit.record(
                entity_type=TRANSACTION_ENTITY,
                entity_id=before.transaction_id,
                action=AuditAction.DELETE,
                user_id=actor_id,
                before=before,
                ip_address=ip_address,
            )
        logger.info("Transaction %s deleted by %s", transaction_id, actor_id)
