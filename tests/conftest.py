from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

import pytest

from src.timekeeping_system.timekeeping_system.container import Container, assemble_container
from tests.fakes import (
    FakeTransactionManager,
    InMemoryAbsenceRequests,
    InMemoryAuditLogs,
    InMemoryEmployeeSchedules,
    InMemorySalaries,
    InMemoryTimeBank,
    InMemoryTimeRecords,
    InMemoryTransactions,
    InMemoryWorkSchedules,
)


@dataclass
class Stores:
    tx: FakeTransactionManager
    records: InMemoryTimeRecords
    schedules: InMemoryWorkSchedules
    assignments: InMemoryEmployeeSchedules
    time_bank: InMemoryTimeBank
    absences: InMemoryAbsenceRequests
    salaries: InMemorySalaries
    transactions: InMemoryTransactions
    audit: InMemoryAuditLogs


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2024, 1, 15, 9, 0, 0)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def stores() -> Stores:
    records = InMemoryTimeRecords()
    schedules = InMemoryWorkSchedules()
    assignments = InMemoryEmployeeSchedules()
    time_bank = InMemoryTimeBank()
    absences = InMemoryAbsenceRequests()
    salaries = InMemorySalaries()
    transactions = InMemoryTransactions()
    audit = InMemoryAuditLogs()
    tx = FakeTransactionManager(records, schedules, assignments, time_bank, absences, salaries, transactions, audit)
    return Stores(
        tx=tx,
        records=records,
        schedules=schedules,
        assignments=assignments,
        time_bank=time_bank,
        absences=absences,
        salaries=salaries,
        transactions=transactions,
        audit=audit,
    )


@pytest.fixture
def container(stores) -> Container:
    return assemble_container(
        tx=stores.tx,
        time_records_repo=stores.records,
        work_schedules_repo=stores.schedules,
        employee_schedules_repo=stores.assignments,
        time_bank_repo=stores.time_bank,
        absence_requests_repo=stores.absences,
        salaries_repo=stores.salaries,
        transactions_repo=stores.transactions,
        audit_repo=stores.audit,
    )
