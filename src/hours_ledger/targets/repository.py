from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import TargetHours


class TargetHoursRepository(Protocol):
    def get(self, *, worker_id: int, period: str) -> Optional[TargetHours]:
        raise NotImplementedError

    def list_for_period(self, period: str) -> Sequence[TargetHours]:
        raise NotImplementedError

    def upsert(self, *, worker_id: int, period: str, target_hours: Decimal, created_by: int) -> int:
        """Create or update the target unique on (worker_id, period).

        Returns target_id.
        """

        raise NotImplementedError
