from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, ok, query_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/audit-logs", methods=["GET"], endpoint="audit_logs")
    @admin_required
    def audit_logs():
        logs = container.audit_service.get_audit_logs(
            request.args.get("entity_type") or "",
            query_int("entity_id"),
        )
        return ok(logs)
