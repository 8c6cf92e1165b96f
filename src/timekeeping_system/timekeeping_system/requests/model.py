from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceType, RequestStatus


@dataclass(frozen=True)
class AbsenceRequest:
    request_id: int
    user_id: int
    start_date: date
    end_date: date
    type: AbsenceType
    reason: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    review_date: Optional[datetime] = None
    review_notes: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
