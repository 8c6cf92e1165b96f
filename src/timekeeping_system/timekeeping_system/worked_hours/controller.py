from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_user_id, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    worked_hours = container.worked_hours_service

    def _report(user_id: int):
        start = request.args.get("start") or ""
        end = request.args.get("end") or start
        summary = worked_hours.calculate_worked_hours(user_id, start, end)
        if request.args.get("daily") in ("1", "true"):
            return ok(summary.as_dict(), days=worked_hours.calculate_daily_breakdown(user_id, start, end))
        return ok(summary.as_dict())

    @app.route("/api/worked-hours/me", methods=["GET"], endpoint="my_worked_hours")
    @login_required
    def my_worked_hours():
        return _report(current_user_id())

    @app.route("/api/admin/worked-hours/<int:user_id>", methods=["GET"], endpoint="user_worked_hours")
    @admin_required
    def user_worked_hours(user_id: int):
        return _report(user_id)
