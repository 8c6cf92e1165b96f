from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditLog
from .repository import AuditLogRepository


def _dump(values: Optional[dict[str, Any]]) -> Optional[str]:
    return json.dumps(values, ensure_ascii=False) if values is not None else None


def _load(value) -> Optional[dict[str, Any]]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return dict(value)


class MySQLAuditLogRepository(AuditLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        entity_type: str,
        entity_id: int,
        action: AuditAction,
        user_id: int,
        old_values: Optional[dict[str, Any]],
        new_values: Optional[dict[str, Any]],
        ip_address: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(entity_type, entity_id, action, old_values, new_values, user_id, ip_address)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entity_type,
                    int(entity_id),
                    action.value,
                    _dump(old_values),
                    _dump(new_values),
                    int(user_id),
                    ip_address,
                ),
            )
            return int(cur.lastrowid)

    def list_for_entity(self, *, entity_type: str, entity_id: Optional[int] = None, limit: int = 200) -> Sequence[AuditLog]:
        clauses = ["entity_type=%s"]
        params: list[object] = [entity_type]
        if entity_id is not None:
            clauses.append("entity_id=%s")
            params.append(int(entity_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT log_id, entity_type, entity_id, action, old_values, new_values,
                       user_id, ip_address, created_at
                FROM audit_logs
                WHERE {" AND ".join(clauses)}
                ORDER BY created_at DESC, log_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [
                AuditLog(
                    log_id=int(r["log_id"]),
                    entity_type=r["entity_type"],
                    entity_id=int(r["entity_id"]),
                    action=AuditAction(r["action"]),
                    user_id=int(r["user_id"]),
                    old_values=_load(r.get("old_values")),
                    new_values=_load(r.get("new_values")),
                    ip_address=r.get("ip_address"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
