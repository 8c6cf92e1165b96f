from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import AuditAction
from .model import AuditLog


class AuditLogRepository(Protocol):
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
        raise NotImplementedError

    def list_for_entity(self, *, entity_type: str, entity_id: Optional[int] = None, limit: int = 200) -> Sequence[AuditLog]:
        """Newest first."""

        raise NotImplementedError
