from __future__ import annotations

from datetime import time

from flask import Flask, request

from ..common.datetime_utils import coerce_date
from ..common.validators import parse_time, require_enum, require_positive_int
from ..common.web import admin_required, current_user_id, json_body, ok
from ..container import Container
from ..core.enums import Weekday
from ..core.exceptions import NotFoundError, ValidationError
from .service import NewScheduleDetail


def _detail_from(data: dict) -> NewScheduleDetail:
    is_work_day = bool(data.get("is_work_day", True))
    start = parse_time(data.get("start_time"), "Horário de entrada")
    end = parse_time(data.get("end_time"), "Horário de saída")
    if is_work_day and (start is None or end is None):
        raise ValidationError("Informe horário de entrada e saída")

    return NewScheduleDetail(
        weekday=require_enum(Weekday, data.get("weekday"), "Dia da semana"),
        start_time=start or time(0, 0),
        end_time=end or time(0, 0),
        break_start=parse_time(data.get("break_start"), "Início do intervalo"),
        break_end=parse_time(data.get("break_end"), "Fim do intervalo"),
        is_work_day=is_work_day,
    )


def register(app: Flask, container: Container) -> None:
    schedules = container.work_schedule_service
    assignments = container.employee_schedule_service

    @app.route("/api/admin/work-schedules", methods=["GET"], endpoint="list_work_schedules")
    @admin_required
    def list_work_schedules():
        return ok(schedules.list_schedules())

    @app.route("/api/admin/work-schedules", methods=["POST"], endpoint="create_work_schedule")
    @admin_required
    def create_work_schedule():
        data = json_body()
        schedule_id = schedules.create_schedule(
            name=data.get("name", ""),
            type=data.get("type", "regular"),
            weekly_hours=data.get("weekly_hours"),
            created_by=current_user_id(),
            tolerance_minutes=data.get("tolerance_minutes"),
            break_time=data.get("break_time"),
        )
        return ok(schedules.get_schedule(schedule_id), 201)

    @app.route("/api/admin/work-schedules/<int:schedule_id>", methods=["GET"], endpoint="get_work_schedule")
    @admin_required
    def get_work_schedule(schedule_id: int):
        return ok(schedules.get_schedule(schedule_id), details=schedules.list_details(schedule_id))

    @app.route("/api/admin/work-schedules/<int:schedule_id>", methods=["PUT"], endpoint="update_work_schedule")
    @admin_required
    def update_work_schedule(schedule_id: int):
        data = json_body()
        updated = schedules.update_schedule(
            schedule_id=schedule_id,
            name=data.get("name", ""),
            type=data.get("type", "regular"),
            weekly_hours=data.get("weekly_hours"),
            tolerance_minutes=data.get("tolerance_minutes"),
            break_time=data.get("break_time"),
        )
        return ok(updated)

    @app.route("/api/admin/work-schedules/<int:schedule_id>", methods=["DELETE"], endpoint="delete_work_schedule")
    @admin_required
    def delete_work_schedule(schedule_id: int):
        schedules.delete_schedule(schedule_id)
        return ok(message="Jornada excluída")

    @app.route("/api/admin/work-schedules/<int:schedule_id>/details", methods=["POST"], endpoint="add_schedule_detail")
    @admin_required
    def add_schedule_detail(schedule_id: int):
        detail_id = schedules.add_detail(schedule_id=schedule_id, detail=_detail_from(json_body()))
        created = next((d for d in schedules.list_details(schedule_id) if d.detail_id == detail_id), None)
        return ok(created, 201)

    @app.route("/api/admin/schedule-details/<int:detail_id>", methods=["PUT"], endpoint="update_schedule_detail")
    @admin_required
    def update_schedule_detail(detail_id: int):
        return ok(schedules.update_detail(detail_id=detail_id, detail=_detail_from(json_body())))

    @app.route("/api/admin/schedule-details/<int:detail_id>", methods=["DELETE"], endpoint="delete_schedule_detail")
    @admin_required
    def delete_schedule_detail(detail_id: int):
        schedules.delete_detail(detail_id)
        return ok(message="Configuração excluída")

    @app.route("/api/admin/employee-schedules", methods=["POST"], endpoint="assign_schedule")
    @admin_required
    def assign_schedule():
        data = json_body()
        end_date = data.get("end_date")
        assignment_id = assignments.assign_schedule(
            user_id=require_positive_int(data.get("user_id"), "Funcionário"),
            schedule_id=require_positive_int(data.get("schedule_id"), "Jornada"),
            start_date=coerce_date(data.get("start_date") or ""),
            end_date=coerce_date(end_date) if end_date else None,
            notes=data.get("notes"),
        )
        return ok({"assignment_id": assignment_id}, 201)

    @app.route("/api/admin/employee-schedules/<int:user_id>", methods=["GET"], endpoint="list_employee_schedules")
    @admin_required
    def list_employee_schedules(user_id: int):
        current = assignments.get_current_assignment(user_id)
        return ok(assignments.list_assignments(user_id), current=current)

    @app.route(
        "/api/admin/employee-schedules/assignments/<int:assignment_id>/end",
        methods=["POST"],
        endpoint="end_employee_schedule",
    )
    @admin_required
    def end_employee_schedule(assignment_id: int):
        data = json_body()
        return ok(assignments.end_assignment(assignment_id=assignment_id, end_date=coerce_date(data.get("end_date") or "")))

    @app.route("/api/admin/schedule-for-date/<int:user_id>", methods=["GET"], endpoint="schedule_for_date")
    @admin_required
    def schedule_for_date(user_id: int):
        day = coerce_date(request.args.get("date") or "")
        resolved = container.schedule_resolver.get_employee_work_schedule_for_date(user_id, day)
        if resolved.schedule is None:
            raise NotFoundError("Funcionário sem jornada nesta data")
        return ok({"schedule": resolved.schedule, "detail": resolved.detail, "is_working_day": resolved.is_working_day})
