from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_user_id, is_admin, json_body, login_required, ok, query_int
from ..container import Container
from ..core.exceptions import AuthorizationError
from .service import NewAbsenceRequest


def _payload(data: dict) -> NewAbsenceRequest:
    return NewAbsenceRequest(
        start_date=data.get("start_date") or "",
        end_date=data.get("end_date") or "",
        type=data.get("type"),
        reason=data.get("reason") or "",
    )


def register(app: Flask, container: Container) -> None:
    absences = container.absence_request_service

    def _owned(request_id: int):
        req = absences.get_absence_request(request_id)
        if req.user_id != current_user_id() and not is_admin():
            raise AuthorizationError("Solicitação pertence a outro funcionário")
        return req

    @app.route("/api/absence-requests", methods=["POST"], endpoint="create_absence_request")
    @login_required
    def create_absence_request():
        created = absences.create_absence_request(user_id=current_user_id(), data=_payload(json_body()))
        return ok(created, 201)

    @app.route("/api/absence-requests/me", methods=["GET"], endpoint="my_absence_requests")
    @login_required
    def my_absence_requests():
        return ok(absences.list_absence_requests(user_id=current_user_id(), status=request.args.get("status")))

    @app.route("/api/absence-requests/<int:request_id>", methods=["GET"], endpoint="get_absence_request")
    @login_required
    def get_absence_request(request_id: int):
        return ok(_owned(request_id))

    @app.route("/api/absence-requests/<int:request_id>", methods=["PUT"], endpoint="update_absence_request")
    @login_required
    def update_absence_request(request_id: int):
        _owned(request_id)
        return ok(absences.update_absence_request(request_id=request_id, data=_payload(json_body())))

    @app.route("/api/absence-requests/<int:request_id>", methods=["DELETE"], endpoint="delete_absence_request")
    @login_required
    def delete_absence_request(request_id: int):
        _owned(request_id)
        absences.delete_absence_request(request_id)
        return ok(message="Solicitação excluída")

    @app.route("/api/admin/absence-requests", methods=["GET"], endpoint="list_absence_requests")
    @admin_required
    def list_absence_requests():
        return ok(
            absences.list_absence_requests(
                status=request.args.get("status"),
                user_id=query_int("user_id"),
            )
        )

    @app.route("/api/admin/absence-requests/<int:request_id>/approve", methods=["POST"], endpoint="approve_absence")
    @admin_required
    def approve_absence(request_id: int):
        data = request.get_json(silent=True) or {}
        return ok(absences.approve_absence_request(request_id, current_user_id(), data.get("notes")))

    @app.route("/api/admin/absence-requests/<int:request_id>/reject", methods=["POST"], endpoint="reject_absence")
    @admin_required
    def reject_absence(request_id: int):
        data = request.get_json(silent=True) or {}
        return ok(absences.reject_absence_request(request_id, current_user_id(), data.get("notes")))
