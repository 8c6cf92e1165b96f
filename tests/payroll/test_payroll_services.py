from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.timekeeping_system.timekeeping_system.core.enums import AuditAction, TransactionType
from src.timekeeping_system.timekeeping_system.core.exceptions import NotFoundError, ValidationError
from src.timekeeping_system.timekeeping_system.payroll.service import SalaryInput, TransactionInput

ADMIN = 1


def test_salary_create_is_audited(container, stores):
    salary = container.salary_service.create_salary(
        user_id=2, data=SalaryInput(amount="3500.5", effective_date="2024-01-01"), actor_id=ADMIN, ip_address="10.0.0.1"
    )

    assert salary.amount == Decimal("3500.50")
    logs = container.audit_service.get_audit_logs("salary", salary.salary_id)
    assert len(logs) == 1
    assert logs[0].action == AuditAction.CREATE
    assert logs[0].old_values is None
    assert logs[0].new_values["amount"] == "3500.50"
    assert logs[0].new_values["effective_date"] == "2024-01-01"
    assert logs[0].ip_address == "10.0.0.1"


def test_current_salary_is_latest_effective(container):
    svc = container.salary_service
    svc.create_salary(user_id=2, data=SalaryInput(amount=3000, effective_date="2023-01-01"), actor_id=ADMIN)
    svc.create_salary(user_id=2, data=SalaryInput(amount=3300, effective_date="2024-01-01"), actor_id=ADMIN)
    svc.create_salary(user_id=2, data=SalaryInput(amount=3600, effective_date="2025-01-01"), actor_id=ADMIN)

    current = svc.get_current_salary(2, today=date(2024, 6, 1))

    assert current.amount == Decimal("3300.00")
    assert len(svc.get_salary_history(2)) == 3


def test_salary_update_records_before_and_after(container):
    svc = container.salary_service
    salary = svc.create_salary(user_id=2, data=SalaryInput(amount=3000, effective_date="2024-01-01"), actor_id=ADMIN)

    svc.update_salary(salary_id=salary.salary_id, data=SalaryInput(amount=3200, effective_date="2024-01-01"), actor_id=ADMIN)

    latest = container.audit_service.get_audit_logs("salary", salary.salary_id)[0]
    assert latest.action == AuditAction.UPDATE
    assert latest.old_values["amount"] == "3000.00"
    assert latest.new_values["amount"] == "3200.00"


def test_amount_must_be_positive(container):
    with pytest.raises(ValidationError):
        container.salary_service.create_salary(
            user_id=2, data=SalaryInput(amount=0, effective_date="2024-01-01"), actor_id=ADMIN
        )
    with pytest.raises(ValidationError):
        container.transaction_service.create_transaction(
            user_id=2,
            data=TransactionInput(type="bonus", amount="-10", transaction_date="2024-01-10", description="x"),
            actor_id=ADMIN,
        )


def test_failed_audit_rolls_back_salary(container, stores, monkeypatch):
    def broken_create(**kwargs):
        raise RuntimeError("audit table missing")

    monkeypatch.setattr(stores.audit, "create", broken_create)

    with pytest.raises(RuntimeError):
        container.salary_service.create_salary(
            user_id=2, data=SalaryInput(amount=3000, effective_date="2024-01-01"), actor_id=ADMIN
        )

    assert stores.salaries.salaries == {}


def test_transaction_lifecycle_is_audited(container):
    svc = container.transaction_service
    created = svc.create_transaction(
        user_id=2,
        data=TransactionInput(type="bonus", amount=250, transaction_date="2024-01-10", description="Meta batida"),
        actor_id=ADMIN,
    )
    svc.update_transaction(
        transaction_id=created.transaction_id,
        data=TransactionInput(type="bonus", amount=300, transaction_date="2024-01-10", description="Meta batida"),
        actor_id=ADMIN,
    )
    svc.delete_transaction(transaction_id=created.transaction_id, actor_id=ADMIN)

    actions = [log.action for log in container.audit_service.get_audit_logs("financial_transaction", created.transaction_id)]
    assert actions == [AuditAction.DELETE, AuditAction.UPDATE, AuditAction.CREATE]
    with pytest.raises(NotFoundError):
        svc.get_transaction(created.transaction_id)


def test_list_transactions_filters(container):
    svc = container.transaction_service
    svc.create_transaction(
        user_id=2,
        data=TransactionInput(type="bonus", amount=100, transaction_date="2024-01-05", description="a"),
        actor_id=ADMIN,
    )
    svc.create_transaction(
        user_id=2,
        data=TransactionInput(type="advance", amount=200, transaction_date="2024-02-05", description="b"),
        actor_id=ADMIN,
    )

    january = svc.list_transactions(user_id=2, start_date="2024-01-01", end_date="2024-01-31")
    advances = svc.list_transactions(type="advance")

    assert [t.description for t in january] == ["a"]
    assert [t.type for t in advances] == [TransactionType.ADVANCE]
