from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import AuditAction
from .model import AuditLog
from .repository import AuditLogRepository


def _json_safe(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def snapshot(entity: Any) -> Optional[dict[str, Any]]:
    """JSON-ready dict of a dataclass entity (None stays None)."""
    if entity is None:
        return None
    return {k: _json_safe(v) for k, v in dataclasses.asdict(entity).items()}


class AuditService:
    def __init__(self, logs: AuditLogRepository):
        self._logs = logs

    def record(
        self,
        *,
        entity_type: str,
        entity_id: int,
        action: AuditAction,
        user_id: int,
        before: Any = None,
        after: Any = None,
        ip_address: Optional[str] = None,
    ) -> int:
        return self._logs.create(
            entity_type=entity_type,
            entity_id=int(entity_id),
            action=action,
            user_id=int(user_id),
            old_values=snapshot(before),
            new_values=snapshot(after),
            ip_address=ip_address,
        )

    def get_audit_logs(
        self,
        entity_type: str,
        entity_id: Optional[int] = None,
        *,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AuditLog]:
        return self._logs.list_for_entity(
            entity_type=require_non_empty(entity_type, "Tipo de entidade"),
            entity_id=int(entity_id) if entity_id is not None else None,
            limit=int(limit),
        )
