from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import require_decimal, require_enum, require_non_empty
from ..core.enums import ScheduleType, Weekday
from ..core.exceptions import InvalidStateError, NotFoundError, ValidationError
from ..database.unit_of_work import TransactionManager
from .model import EmployeeSchedule, WorkSchedule, WorkScheduleDetail
from .repository import EmployeeScheduleRepository, WorkScheduleRepository

logger = logging.getLogger(__name__)

SCHEDULE_NOT_FOUND = "Jornada de trabalho não encontrada"


@dataclass(frozen=True)
class NewScheduleDetail:
    weekday: Weekday
    start_time: time
    end_time: time
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    is_work_day: bool = True


def _validate_detail_times(detail: NewScheduleDetail) -> None:
    if not detail.is_work_day:
        return
    if detail.end_time <= detail.start_time:
        raise ValidationError("Horário de saída deve ser posterior ao de entrada")
    if (detail.break_start is None) != (detail.break_end is None):
        raise ValidationError("Informe início e fim do intervalo")
    if detail.break_start is not None:
        if not (detail.start_time <= detail.break_start < detail.break_end <= detail.end_time):
            raise ValidationError("Intervalo deve estar dentro da jornada")


class WorkScheduleService:
    """Work Schedule Directory: named weekly schedules and their weekday details."""

    def __init__(self, schedules: WorkScheduleRepository, assignments: EmployeeScheduleRepository):
        self._schedules = schedules
        self._assignments = assignments

    def create_schedule(
        self,
        *,
        name: str,
        type: ScheduleType | str,
        weekly_hours,
        created_by: int,
        tolerance_minutes: Optional[int] = None,
        break_time: Optional[int] = None,
    ) -> int:
        schedule_id = self._schedules.create(
            name=require_non_empty(name, "Nome"),
            type=require_enum(ScheduleType, type, "Tipo de jornada"),
            weekly_hours=require_decimal(weekly_hours, "Carga horária semanal", positive=True),
            tolerance_minutes=self._optional_minutes(tolerance_minutes, "Tolerância"),
            break_time=self._optional_minutes(break_time, "Intervalo"),
            created_by=int(created_by),
        )
        logger.info("Work schedule %s created by %s", schedule_id, created_by)
        return schedule_id

    def update_schedule(
        self,
        *,
        schedule_id: int,
        name: str,
        type: ScheduleType | str,
        weekly_hours,
        tolerance_minutes: Optional[int] = None,
        break_time: Optional[int] = None,
    ) -> WorkSchedule:
        self.get_schedule(schedule_id)
        self._schedules.update(
            schedule_id=int(schedule_id),
            name=require_non_empty(name, "Nome"),
            type=require_enum(ScheduleType, type, "Tipo de jornada"),
            weekly_hours=require_decimal(weekly_hours, "Carga horária semanal", positive=True),
            tolerance_minutes=self._optional_minutes(tolerance_minutes, "Tolerância"),
            break_time=self._optional_minutes(break_time, "Intervalo"),
        )
        return self.get_schedule(schedule_id)

    def get_schedule(self, schedule_id: int) -> WorkSchedule:
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule:
            raise NotFoundError(SCHEDULE_NOT_FOUND)
        return schedule

    def list_schedules(self) -> Sequence[WorkSchedule]:
        return self._schedules.list_all()

    def delete_schedule(self, schedule_id: int) -> None:
        self.get_schedule(schedule_id)
        if self._assignments.count_for_schedule(int(schedule_id)) > 0:
            raise InvalidStateError("Jornada em uso por funcionários não pode ser excluída")
        self._schedules.delete(int(schedule_id))
        logger.info("Work schedule %s deleted", schedule_id)

    def add_detail(self, *, schedule_id: int, detail: NewScheduleDetail) -> int:
        self.get_schedule(schedule_id)
        _validate_detail_times(detail)
        if self._schedules.get_detail_for_weekday(schedule_id=int(schedule_id), weekday=detail.weekday):
            raise InvalidStateError(f"Já existe configuração para {detail.weekday.value} nesta jornada")

        return self._schedules.create_detail(
            schedule_id=int(schedule_id),
            weekday=detail.weekday,
            start_time=detail.start_time,
            end_time=detail.end_time,
            break_start=detail.break_start,
            break_end=detail.break_end,
            is_work_day=detail.is_work_day,
        )

    def update_detail(self, *, detail_id: int, detail: NewScheduleDetail) -> WorkScheduleDetail:
        current = self._schedules.get_detail(int(detail_id))
        if not current:
            raise NotFoundError("Configuração do dia não encontrada")
        if detail.weekday != current.weekday:
            raise ValidationError("O dia da semana não pode ser alterado")
        _validate_detail_times(detail)

        self._schedules.update_detail(
            detail_id=int(detail_id),
            start_time=detail.start_time,
            end_time=detail.end_time,
            break_start=detail.break_start,
            break_end=detail.break_end,
            is_work_day=detail.is_work_day,
        )
        return self._schedules.get_detail(int(detail_id))

    def delete_detail(self, detail_id: int) -> None:
        if not self._schedules.delete_detail(int(detail_id)):
            raise NotFoundError("Configuração do dia não encontrada")

    def list_details(self, schedule_id: int) -> Sequence[WorkScheduleDetail]:
        self.get_schedule(schedule_id)
        return self._schedules.list_details(int(schedule_id))

    @staticmethod
    def _optional_minutes(value, field_name: str) -> Optional[int]:
        if value is None or value == "":
            return None
        try:
            minutes = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field_name} inválido")
        if minutes < 0:
            raise ValidationError(f"{field_name} não pode ser negativo")
        return minutes


class EmployeeScheduleService:
    """Time-bounded schedule assignments; at most one is active per user."""

    def __init__(
        self,
        assignments: EmployeeScheduleRepository,
        schedules: WorkScheduleRepository,
        tx: TransactionManager,
    ):
        self._assignments = assignments
        self._schedules = schedules
        self._tx = tx

    def assign_schedule(
        self,
        *,
        user_id: int,
        schedule_id: int,
        start_date: date,
        end_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        if end_date is not None and end_date < start_date:
            raise ValidationError("Data final deve ser maior ou igual à data inicial")
        if not self._schedules.get_by_id(int(schedule_id)):
            raise NotFoundError(SCHEDULE_NOT_FOUND)

        with self._tx.transaction():
            existing = self._assignments.list_for_user(int(user_id), for_update=True)
            to_close: list[EmployeeSchedule] = []
            for a in existing:
                if a.start_date >= start_date:
                    if end_date is None or a.start_date <= end_date:
                        raise InvalidStateError(
                            f"Já existe uma escala iniciando em {a.start_date.isoformat()} para este funcionário"
                        )
                    continue
                if a.end_date is None or a.end_date >= start_date:
                    to_close.append(a)

            closing_date = start_date - timedelta(days=1)
            for a in to_close:
                self._assignments.set_end_date(assignment_id=a.assignment_id, end_date=closing_date)
                logger.info(
                    "Closed assignment %s of user %s at %s", a.assignment_id, user_id, closing_date.isoformat()
                )

            assignment_id = self._assignments.create(
                user_id=int(user_id),
                schedule_id=int(schedule_id),
                start_date=start_date,
                end_date=end_date,
                notes=(notes or "").strip() or None,
            )

        logger.info("User %s assigned to schedule %s from %s", user_id, schedule_id, start_date.isoformat())
        return assignment_id

    def end_assignment(self, *, assignment_id: int, end_date: date) -> EmployeeSchedule:
        assignment = self._assignments.get_by_id(int(assignment_id))
        if not assignment:
            raise NotFoundError("Escala do funcionário não encontrada")
        if end_date < assignment.start_date:
            raise ValidationError("Data final deve ser maior ou igual à data inicial")
        if assignment.end_date is not None and assignment.end_date < end_date:
            raise InvalidStateError("Escala já encerrada")

        self._assignments.set_end_date(assignment_id=assignment.assignment_id, end_date=end_date)
        return self._assignments.get_by_id(assignment.assignment_id)

    def get_current_assignment(self, user_id: int, *, today: Optional[date] = None) -> Optional[EmployeeSchedule]:
        return self._assignments.find_active_on(user_id=int(user_id), day=today or today_local())

    def list_assignments(self, user_id: int) -> Sequence[EmployeeSchedule]:
        return self._assignments.list_for_user(int(user_id))
