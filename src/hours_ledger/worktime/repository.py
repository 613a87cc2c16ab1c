from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import RecordSource, RecordStatus
from .model import AttendanceRecord, NewAttendanceRecord

# Columns a caller may change through WorkTimeRepository.update.
UPDATABLE_FIELDS = frozenset(
    {
        "hours_worked",
        "location",
        "description",
        "status",
        "rejected_by",
        "rejection_reason",
        "agreement",
    }
)


@dataclass(frozen=True)
class RecordFilter:
    """Query predicate: every field set is ANDed, ``None`` means "any".

    Equality: worker_id, work_date, source. Range: start_date/end_date
    (inclusive). Membership: worker_ids, statuses.
    """

    worker_id: Optional[int] = None
    worker_ids: Optional[tuple[int, ...]] = None
    work_date: Optional[date] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    source: Optional[RecordSource] = None
    statuses: Optional[tuple[RecordStatus, ...]] = None

    def matches(self, record: AttendanceRecord) -> bool:
        if self.worker_id is not None and record.worker_id != self.worker_id:
            return False
        if self.worker_ids is not None and record.worker_id not in self.worker_ids:
            return False
        if self.work_date is not None and record.work_date != self.work_date:
            return False
        if self.start_date is not None and record.work_date < self.start_date:
            return False
        if self.end_date is not None and record.work_date > self.end_date:
            return False
        if self.source is not None and record.source != self.source:
            return False
        if self.statuses is not None and record.status not in self.statuses:
            return False
        return True


class WorkTimeRepository(Protocol):
    """Record store for attendance records.

    Implementations must enforce uniqueness of (worker_id, work_date, source)
    and report a violation as DuplicateRecordError, distinct from
    PersistenceError.
    """

    def create(self, record: NewAttendanceRecord) -> int:
        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def update(self, record_id: int, changes: Mapping[str, Any]) -> AttendanceRecord:
        """Apply ``changes`` (keys from UPDATABLE_FIELDS) and return the row.

        Raises NotFoundError when the record does not exist.
        """

        raise NotImplementedError

    def query(self, flt: RecordFilter) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def set_agreement(self, record_ids: Iterable[int], agreement: Optional[bool]) -> None:
        raise NotImplementedError
