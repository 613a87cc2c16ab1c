from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..core.enums import RecordSource, RecordStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: hours one ledger reports for one worker on one day.

    ``agreement`` caches the comparison with the other ledger's record for the
    same day: True/False once computed, None while unknown (only one side
    exists, or the cache has not been refreshed since the last write).
    """

    record_id: int
    worker_id: int
    work_date: date
    hours_worked: Decimal
    source: RecordSource
    status: RecordStatus
    submitted_by: int
    location: Optional[str] = None
    description: Optional[str] = None
    rejected_by: Optional[int] = None
    rejection_reason: Optional[str] = None
    agreement: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def date_text(self) -> str:
        return format_iso_date(self.work_date)


@dataclass(frozen=True)
class NewAttendanceRecord:
    """Insert payload; the store assigns record_id and timestamps."""

    worker_id: int
    work_date: date
    hours_worked: Decimal
    source: RecordSource
    status: RecordStatus
    submitted_by: int
    location: Optional[str] = None
    description: Optional[str] = None
