"""Same-day comparison of the self and supervisor ledgers.

Neither ledger is ground truth. A disagreement is reported for a human
reviewer and never resolved here.

The ``agreement`` column is a cached join result. It is written by
``refresh_agreement`` after each submission or correction, so it lags a
just-inserted counterpart until that refresh lands (or indefinitely when the
refresh write fails). Readers therefore trust a cached True/False but
recompute from the raw hours whenever the cache reads None.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Union

from ..common.datetime_utils import parse_iso_date
from ..core.enums import ComparisonStatus, RecordSource
from ..core.exceptions import ValidationError
from ..logging_config import get_logger
from ..worktime.model import AttendanceRecord
from ..worktime.repository import RecordFilter, WorkTimeRepository
from .model import RecordComparison

logger = get_logger(__name__)


def agreement_of(
    self_record: Optional[AttendanceRecord],
    supervisor_record: Optional[AttendanceRecord],
) -> Optional[bool]:
    """Pure agreement flag: None unless both sides exist."""
    if self_record is None or supervisor_record is None:
        return None
    return self_record.hours_worked == supervisor_record.hours_worked


def cached_agreement(self_record: AttendanceRecord, supervisor_record: AttendanceRecord) -> Optional[bool]:
    """The day's cached flag, or None when unknown.

    Both rows are written together; if they disagree (a refresh landed on one
    row only) the cache counts as unknown.
    """
    if self_record.agreement is None or self_record.agreement != supervisor_record.agreement:
        return None
    return self_record.agreement


def split_sides(records: Iterable[AttendanceRecord]) -> tuple[Optional[AttendanceRecord], Optional[AttendanceRecord]]:
    self_record = None
    supervisor_record = None
    for r in records:
        if r.source == RecordSource.SELF:
            self_record = r
        elif r.source == RecordSource.SUPERVISOR:
            supervisor_record = r
    return self_record, supervisor_record


def build_comparison(
    worker_id: int,
    work_date: date,
    self_record: Optional[AttendanceRecord],
    supervisor_record: Optional[AttendanceRecord],
) -> RecordComparison:
    if self_record is None or supervisor_record is None:
        return RecordComparison(
            worker_id=worker_id,
            work_date=work_date,
            self_record=self_record,
            supervisor_record=supervisor_record,
            status=ComparisonStatus.PENDING,
            agreement=None,
        )

    cached = cached_agreement(self_record, supervisor_record)
    agreement = cached if cached is not None else agreement_of(self_record, supervisor_record)

    if agreement:
        return RecordComparison(
            worker_id=worker_id,
            work_date=work_date,
            self_record=self_record,
            supervisor_record=supervisor_record,
            status=ComparisonStatus.MATCHED,
            difference=None,
            agreement=True,
        )

    return RecordComparison(
        worker_id=worker_id,
        work_date=work_date,
        self_record=self_record,
        supervisor_record=supervisor_record,
        status=ComparisonStatus.MISMATCHED,
        difference=abs(self_record.hours_worked - supervisor_record.hours_worked),
        agreement=False,
    )


class ReconciliationService:
    def __init__(self, records: WorkTimeRepository):
        self._records = records

    def compare(self, worker_id: int, work_date: Union[str, date]) -> RecordComparison:
        d = parse_iso_date(work_date)
        rows = self._records.query(RecordFilter(worker_id=int(worker_id), work_date=d))
        self_record, supervisor_record = split_sides(rows)
        return build_comparison(int(worker_id), d, self_record, supervisor_record)

    def find_mismatches(self, start: Union[str, date], end: Union[str, date]) -> list[RecordComparison]:
        start_d = parse_iso_date(start)
        end_d = parse_iso_date(end)
        if end_d < start_d:
            raise ValidationError("End date must be on or after start date")

        groups: dict[tuple[int, date], list[AttendanceRecord]] = defaultdict(list)
        for r in self._records.query(RecordFilter(start_date=start_d, end_date=end_d)):
            groups[(r.worker_id, r.work_date)].append(r)

        mismatches: list[RecordComparison] = []
        for (worker_id, work_date), rows in sorted(groups.items(), key=lambda kv: (kv[0][1], kv[0][0])):
            self_record, supervisor_record = split_sides(rows)
            if self_record is None or supervisor_record is None:
                continue
            comparison = build_comparison(worker_id, work_date, self_record, supervisor_record)
            if comparison.status == ComparisonStatus.MISMATCHED:
                mismatches.append(comparison)

        logger.debug("find_mismatches %s..%s: %d groups, %d mismatched", start_d, end_d, len(groups), len(mismatches))
        return mismatches

    def refresh_agreement(self, worker_id: int, work_date: date) -> Optional[bool]:
        """Recompute the cached flag for one day and write it to both rows."""
        rows = self._records.query(RecordFilter(worker_id=int(worker_id), work_date=work_date))
        self_record, supervisor_record = split_sides(rows)
        agreement = agreement_of(self_record, supervisor_record)
        ids = [r.record_id for r in (self_record, supervisor_record) if r is not None]
        self._records.set_agreement(ids, agreement)
        return agreement
