from __future__ import annotations

from dataclasses import dataclass

from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .audit.repository import AuditLogRepository
from .audit.service import AuditService
from .core.constants import BUSINESS_DAYS_PER_WEEK, OVERTIME_EXPIRATION_DAYS, TIME_BANK_EXPIRY_WARNING_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .database.unit_of_work import TransactionManager
from .payroll.mysql_payroll_repository import MySQLFinancialTransactionRepository, MySQLSalaryRepository
from .payroll.repository import FinancialTransactionRepository, SalaryRepository
from .payroll.service import FinancialTransactionService, SalaryService
from .requests.mysql_absence_request_repository import MySQLAbsenceRequestRepository
from .requests.repository import AbsenceRequestRepository
from .requests.service import AbsenceRequestService
from .schedules.mysql_schedule_repository import MySQLEmployeeScheduleRepository, MySQLWorkScheduleRepository
from .schedules.repository import EmployeeScheduleRepository, WorkScheduleRepository
from .schedules.resolver import ScheduleResolver
from .schedules.service import EmployeeScheduleService, WorkScheduleService
from .time_bank.mysql_time_bank_repository import MySQLTimeBankRepository
from .time_bank.processor import TimeBankProcessor
from .time_bank.repository import TimeBankRepository
from .time_bank.service import TimeBankService
from .time_records.mysql_time_record_repository import MySQLTimeRecordRepository
from .time_records.repository import TimeRecordRepository
from .time_records.service import TimeRecordService
from .worked_hours.service import WorkedHoursService


@dataclass(frozen=True)
class Container:
    tx: TransactionManager

    time_records_repo: TimeRecordRepository
    work_schedules_repo: WorkScheduleRepository
    employee_schedules_repo: EmployeeScheduleRepository
    time_bank_repo: TimeBankRepository
    absence_requests_repo: AbsenceRequestRepository
    salaries_repo: SalaryRepository
    transactions_repo: FinancialTransactionRepository
    audit_repo: AuditLogRepository

    schedule_resolver: ScheduleResolver
    time_record_service: TimeRecordService
    work_schedule_service: WorkScheduleService
    employee_schedule_service: EmployeeScheduleService
    worked_hours_service: WorkedHoursService
    time_bank_service: TimeBankService
    time_bank_processor: TimeBankProcessor
    absence_request_service: AbsenceRequestService
    audit_service: AuditService
    salary_service: SalaryService
    transaction_service: FinancialTransactionService


def assemble_container(
    *,
    tx: TransactionManager,
    time_records_repo: TimeRecordRepository,
    work_schedules_repo: WorkScheduleRepository,
    employee_schedules_repo: EmployeeScheduleRepository,
    time_bank_repo: TimeBankRepository,
    absence_requests_repo: AbsenceRequestRepository,
    salaries_repo: SalaryRepository,
    transactions_repo: FinancialTransactionRepository,
    audit_repo: AuditLogRepository,
    overtime_expiration_days: int = OVERTIME_EXPIRATION_DAYS,
    expiry_warning_days: int = TIME_BANK_EXPIRY_WARNING_DAYS,
    business_days_per_week: int = BUSINESS_DAYS_PER_WEEK,
) -> Container:
    """Wire services over any set of repositories (MySQL in production, fakes in tests)."""
    resolver = ScheduleResolver(work_schedules_repo, employee_schedules_repo)
    time_bank_service = TimeBankService(time_bank_repo, tx, expiry_warning_days=expiry_warning_days)
    audit_service = AuditService(audit_repo)

    return Container(
        tx=tx,
        time_records_repo=time_records_repo,
        work_schedules_repo=work_schedules_repo,
        employee_schedules_repo=employee_schedules_repo,
        time_bank_repo=time_bank_repo,
        absence_requests_repo=absence_requests_repo,
        salaries_repo=salaries_repo,
        transactions_repo=transactions_repo,
        audit_repo=audit_repo,
        schedule_resolver=resolver,
        time_record_service=TimeRecordService(time_records_repo, resolver),
        work_schedule_service=WorkScheduleService(work_schedules_repo, employee_schedules_repo),
        employee_schedule_service=EmployeeScheduleService(employee_schedules_repo, work_schedules_repo, tx),
        worked_hours_service=WorkedHoursService(time_records_repo, resolver),
        time_bank_service=time_bank_service,
        time_bank_processor=TimeBankProcessor(
            time_records_repo,
            time_bank_service,
            resolver,
            tx,
            expiration_days=overtime_expiration_days,
        ),
        absence_request_service=AbsenceRequestService(
            absence_requests_repo,
            time_bank_service,
            resolver,
            tx,
            business_days_per_week=business_days_per_week,
        ),
        audit_service=audit_service,
        salary_service=SalaryService(salaries_repo, audit_service, tx),
        transaction_service=FinancialTransactionService(transactions_repo, audit_service, tx),
    )


def build_container(*, db_config: dict, **settings) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble_container(
        tx=conn,
        time_records_repo=MySQLTimeRecordRepository(conn),
        work_schedules_repo=MySQLWorkScheduleRepository(conn),
        employee_schedules_repo=MySQLEmployeeScheduleRepository(conn),
        time_bank_repo=MySQLTimeBankRepository(conn),
        absence_requests_repo=MySQLAbsenceRequestRepository(conn),
        salaries_repo=MySQLSalaryRepository(conn),
        transactions_repo=MySQLFinancialTransactionRepository(conn),
        audit_repo=MySQLAuditLogRepository(conn),
        **settings,
    )
