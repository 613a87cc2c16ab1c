from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import ComparisonStatus
from ..worktime.model import AttendanceRecord


@dataclass(frozen=True)
class RecordComparison:
    """Read-model: the two ledgers' records for one (worker, day)."""

    worker_id: int
    work_date: date
    self_record: Optional[AttendanceRecord]
    supervisor_record: Optional[AttendanceRecord]
    status: ComparisonStatus
    difference: Optional[Decimal] = None
    agreement: Optional[bool] = None
