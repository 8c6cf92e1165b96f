from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditLog:
    """Before/after snapshot of one mutation of an audited entity."""

    log_id: int
    entity_type: str
    entity_id: int
    action: AuditAction
    user_id: int
    old_values: Optional[dict[str, Any]] = None
    new_values: Optional[dict[str, Any]] = None
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None
