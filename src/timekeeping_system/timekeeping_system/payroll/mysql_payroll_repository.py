from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import TransactionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_clause, normalize_decimal
from .model import FinancialTransaction, Salary, TransactionFilter
from .repository import FinancialTransactionRepository, SalaryRepository

_SALARY_COLUMNS = "salary_id, user_id, amount, effective_date, notes, created_by, created_at"
_TRANSACTION_COLUMNS = "transaction_id, user_id, type, amount, transaction_date, description, created_by, created_at"


def _to_salary(r: dict) -> Salary:
    return Salary(
        salary_id=int(r["salary_id"]),
        user_id=int(r["user_id"]),
        amount=normalize_decimal(r["amount"]),
        effective_date=r["effective_date"],
        created_by=int(r["created_by"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
    )


def _to_transaction(r: dict) -> FinancialTransaction:
    return FinancialTransaction(
        transaction_id=int(r["transaction_id"]),
        user_id=int(r["user_id"]),
        type=TransactionType(r["type"]),
        amount=normalize_decimal(r["amount"]),
        transaction_date=r["transaction_date"],
        description=r["description"],
        created_by=int(r["created_by"]),
        created_at=r.get("created_at"),
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        amount: Decimal,
        effective_date: date,
        notes: Optional[str],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salaries(user_id, amount, effective_date, notes, created_by)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), amount, effective_date, notes, int(created_by)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, salary_id: int, *, for_update: bool = False) -> Optional[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SALARY_COLUMNS} FROM salaries WHERE salary_id=%s" + lock_clause(for_update),
                (int(salary_id),),
            )
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def get_current(self, *, user_id: int, today: date) -> Optional[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SALARY_COLUMNS}
                FROM salaries
                WHERE user_id=%s AND effective_date<=%s
                ORDER BY effective_date DESC, salary_id DESC
                LIMIT 1
                """,
                (int(user_id), today),
            )
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SALARY_COLUMNS}
                FROM salaries
                WHERE user_id=%s
                ORDER BY effective_date DESC, salary_id DESC
                """,
                (int(user_id),),
            )
            return [_to_salary(r) for r in fetchall(cur)]

    def update(self, *, salary_id: int, amount: Decimal, effective_date: date, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salaries SET amount=%s, effective_date=%s, notes=%s WHERE salary_id=%s",
                (amount, effective_date, notes, int(salary_id)),
            )
            return cur.rowcount > 0

    def delete(self, salary_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salaries WHERE salary_id=%s", (int(salary_id),))
            return cur.rowcount > 0


class MySQLFinancialTransactionRepository(FinancialTransactionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO financial_transactions(user_id, type, amount, transaction_date, description, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), type.value, amount, transaction_date, description, int(created_by)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, transaction_id: int, *, for_update: bool = False) -> Optional[FinancialTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_TRANSACTION_COLUMNS} FROM financial_transactions WHERE transaction_id=%s"
                + lock_clause(for_update),
                (int(transaction_id),),
            )
            r = fetchone(cur)
            return _to_transaction(r) if r else None

    def list_transactions(self, tx_filter: TransactionFilter, *, limit: int = 200) -> Sequence[FinancialTransaction]:
        clauses = ["1=1"]
        params: list[object] = []

        if tx_filter.user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(tx_filter.user_id))
        if tx_filter.type is not None:
            clauses.append("type=%s")
            params.append(tx_filter.type.value)
        if tx_filter.start_date is not None:
            clauses.append("transaction_date>=%s")
            params.append(tx_filter.start_date)
        if tx_filter.end_date is not None:
            clauses.append("transaction_date<=%s")
            params.append(tx_filter.end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TRANSACTION_COLUMNS}
                FROM financial_transactions
                WHERE {where}
                ORDER BY transaction_date DESC, transaction_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_transaction(r) for r in fetchall(cur)]

    def update(
        self,
        *,
        transaction_id: int,
        type: TransactionType,
        amount: Decimal,
        transaction_date: date,
        description: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE financial_transactions
                SET type=%s, amount=%s, transaction_date=%s, description=%s
                WHERE transaction_id=%s
                """,
                (type.value, amount, transaction_date, description, int(transaction_id)),
            )
            return cur.rowcount > 0

    def delete(self, transaction_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM financial_transactions WHERE transaction_id=%s", (int(transaction_id),))
            return cur.rowcount > 0
