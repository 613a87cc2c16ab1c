from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class TargetHours:
    target_id: int
    worker_id: int
    period: str
    target_hours: Decimal
    created_by: int
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class WorkerTarget:
    """Read-model: a staff member's target for a period (stored or default)."""

    worker_id: int
    name: str
    supervisor_id: Optional[int]
    supervisor_name: Optional[str]
    period: str
    target_hours: Decimal
    is_default: bool
