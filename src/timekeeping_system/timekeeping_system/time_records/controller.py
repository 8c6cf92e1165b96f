from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import coerce_date, parse_iso_datetime
from ..common.validators import require_enum, require_positive_int
from ..common.web import admin_required, client_ip, current_user_id, json_body, login_required, ok, query_int
from ..container import Container
from ..core.enums import RecordType
from .model import TimeRecordFilter


def _filter_from_args(*, user_id=None) -> TimeRecordFilter:
    args = request.args
    record_type = args.get("type")
    start = args.get("start")
    end = args.get("end")
    return TimeRecordFilter(
        user_id=user_id,
        type=require_enum(RecordType, record_type, "Tipo de registro") if record_type else None,
        start_date=coerce_date(start) if start else None,
        end_date=coerce_date(end) if end else None,
        only_unprocessed=args.get("unprocessed") in ("1", "true"),
    )


def register(app: Flask, container: Container) -> None:
    records = container.time_record_service

    @app.route("/api/time-records", methods=["POST"], endpoint="clock")
    @login_required
    def clock():
        data = request.get_json(silent=True) or {}
        record = records.register_clock(
            current_user_id(),
            type=data.get("type") or None,
            ip_address=client_ip() or "",
            latitude=str(data.get("latitude") or ""),
            longitude=str(data.get("longitude") or ""),
            photo=data.get("photo"),
        )
        return ok(record, 201)

    @app.route("/api/time-records/status", methods=["GET"], endpoint="clock_status")
    @login_required
    def clock_status():
        return ok({"status": records.get_user_status(current_user_id())})

    @app.route("/api/time-records/me", methods=["GET"], endpoint="my_time_records")
    @login_required
    def my_time_records():
        return ok(records.list_records(_filter_from_args(user_id=current_user_id())))

    @app.route("/api/admin/time-records", methods=["GET"], endpoint="list_time_records")
    @admin_required
    def list_time_records():
        return ok(records.list_records(_filter_from_args(user_id=query_int("user_id"))))

    @app.route("/api/admin/time-records", methods=["POST"], endpoint="create_manual_record")
    @admin_required
    def create_manual_record():
        data = json_body()
        record = records.create_manual_record(
            admin_id=current_user_id(),
            user_id=require_positive_int(data.get("user_id"), "Funcionário"),
            timestamp=parse_iso_datetime(data.get("timestamp") or ""),
            type=data.get("type"),
            justification=data.get("justification") or "",
        )
        return ok(record, 201)

    @app.route("/api/admin/time-records/<int:record_id>", methods=["GET"], endpoint="get_time_record")
    @admin_required
    def get_time_record(record_id: int):
        return ok(records.get_record(record_id))

    @app.route("/api/admin/time-records/<int:record_id>", methods=["PUT"], endpoint="update_time_record")
    @admin_required
    def update_time_record(record_id: int):
        data = json_body()
        updated = records.update_record(
            record_id=record_id,
            timestamp=parse_iso_datetime(data.get("timestamp") or ""),
            type=data.get("type"),
            justification=data.get("justification") or "",
        )
        return ok(updated)

    @app.route("/api/admin/time-records/<int:record_id>", methods=["DELETE"], endpoint="delete_time_record")
    @admin_required
    def delete_time_record(record_id: int):
        records.delete_record(record_id)
        return ok(message="Registro excluído")
