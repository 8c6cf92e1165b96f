from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import today_local
from ..common.validators import require_positive_int
from ..common.web import admin_required, current_user_id, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    time_bank = container.time_bank_service
    processor = container.time_bank_processor

    def _overview(user_id: int) -> dict:
        return {
            "summary": time_bank.get_user_summary(user_id),
            "entries": time_bank.list_user_entries(user_id),
        }

    @app.route("/api/time-bank/me", methods=["GET"], endpoint="my_time_bank")
    @login_required
    def my_time_bank():
        return ok(_overview(current_user_id()))

    @app.route("/api/admin/time-bank/<int:user_id>", methods=["GET"], endpoint="user_time_bank")
    @admin_required
    def user_time_bank(user_id: int):
        return ok(_overview(user_id))

    @app.route("/api/admin/time-bank", methods=["POST"], endpoint="adjust_time_bank")
    @admin_required
    def adjust_time_bank():
        data = json_body()
        entry = time_bank.add_manual_adjustment(
            user_id=require_positive_int(data.get("user_id"), "Funcionário"),
            hours=data.get("hours"),
            description=data.get("description") or "",
            created_by=current_user_id(),
            entry_date=data.get("date") or None,
            expiration_date=data.get("expiration_date") or None,
        )
        return ok(entry, 201)

    @app.route("/api/admin/time-bank/<int:user_id>/compensate", methods=["POST"], endpoint="compensate_time_bank")
    @admin_required
    def compensate_time_bank(user_id: int):
        data = json_body()
        compensated = time_bank.compensate_time_bank_hours(
            user_id,
            data.get("compensation_date") or today_local(),
            require_positive_int(data.get("minutes"), "Minutos"),
            data.get("description") or "",
            current_user_id(),
        )
        return ok(
            {"compensated": compensated, "balance_minutes": time_bank.get_user_time_bank_balance(user_id)}
        )

    @app.route("/api/admin/time-records/<int:record_id>/process", methods=["POST"], endpoint="process_time_record")
    @admin_required
    def process_time_record(record_id: int):
        credited = processor.process_time_record_for_time_bank(record_id, current_user_id())
        return ok({"credited": credited})

    @app.route("/api/admin/time-bank/process-pending", methods=["POST"], endpoint="process_pending_records")
    @admin_required
    def process_pending_records():
        data = json_body()
        user_id = data.get("user_id")
        result = processor.process_pending_records(
            current_user_id(),
            user_id=require_positive_int(user_id, "Funcionário") if user_id else None,
            start=data.get("start") or None,
            end=data.get("end") or None,
        )
        return ok(result)
