from __future__ import annotations

from typing import ContextManager, Protocol


class TransactionManager(Protocol):
    """Anything that can open a unit of work (``DatabaseConnection`` in production)."""

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError
