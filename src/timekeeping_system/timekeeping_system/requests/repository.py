from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AbsenceType, RequestStatus
from .model import AbsenceRequest


class AbsenceRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        type: AbsenceType,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int, *, for_update: bool = False) -> Optional[AbsenceRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[AbsenceRequest]:
        """Newest first."""

        raise NotImplementedError

    def update_pending(
        self,
        *,
        request_id: int,
        start_date: date,
        end_date: date,
        type: AbsenceType,
        reason: str,
    ) -> bool:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        review_date: datetime,
        review_notes: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``; False when it was not pending."""

        raise NotImplementedError

    def delete_pending(self, request_id: int) -> bool:
        raise NotImplementedError
