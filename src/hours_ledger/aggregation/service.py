"""Period totals over approved hours.

Completion metrics (bonus, target progress) count one ledger only, the
approved ``self`` records by default. Summing both ledgers would count a day
twice whenever a supervisor also reported it. Self/supervisor disagreement
is a separate signal (see reconciliation) and is never added into totals.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ..common.datetime_utils import month_bounds, parse_iso_date
from ..core.enums import RecordSource, RecordStatus
from ..core.exceptions import ValidationError
from ..reconciliation.service import agreement_of, split_sides
from ..worktime.model import AttendanceRecord
from ..worktime.repository import RecordFilter, WorkTimeRepository

_COUNTED_STATUSES = (RecordStatus.PENDING, RecordStatus.APPROVED)


@dataclass(frozen=True)
class DailyHours:
    """Read-model: one day of a worker's month, both ledgers side by side."""

    work_date: date
    self_hours: Optional[Decimal]
    supervisor_hours: Optional[Decimal]
    counted_hours: Decimal
    mismatched: bool


def _sum_hours(records) -> Decimal:
    return sum((r.hours_worked for r in records), Decimal("0"))


class HoursAggregationService:
    def __init__(
        self,
        records: WorkTimeRepository,
        *,
        completion_source: Union[str, RecordSource] = RecordSource.SELF,
    ):
        self._records = records
        self._completion_source = RecordSource(completion_source)

    @property
    def completion_source(self) -> RecordSource:
        return self._completion_source

    def total_hours(
        self,
        worker_id: int,
        start: Union[str, date],
        end: Union[str, date],
        source: Optional[Union[str, RecordSource]] = None,
    ) -> Decimal:
        """Non-rejected hours in [start, end].

        Without ``source`` both ledgers are summed, which double-counts days
        reported by both; pass a source for per-worker totals.
        """
        start_d = parse_iso_date(start)
        end_d = parse_iso_date(end)
        if end_d < start_d:
            raise ValidationError("End date must be on or after start date")

        rows = self._records.query(
            RecordFilter(
                worker_id=int(worker_id),
                start_date=start_d,
                end_date=end_d,
                source=RecordSource(source) if source is not None else None,
                statuses=_COUNTED_STATUSES,
            )
        )
        return _sum_hours(rows)

    def completed_hours(self, worker_id: int, period: str) -> Decimal:
        """Approved hours of the completion ledger within the month ``period``."""
        start, end = month_bounds(period)
        rows = self._records.query(
            RecordFilter(
                worker_id=int(worker_id),
                start_date=start,
                end_date=end,
                source=self._completion_source,
                statuses=(RecordStatus.APPROVED,),
            )
        )
        return _sum_hours(rows)

    def daily_breakdown(self, worker_id: int, period: str) -> list[DailyHours]:
        start, end = month_bounds(period)
        rows = self._records.query(
            RecordFilter(
                worker_id=int(worker_id),
                start_date=start,
                end_date=end,
                statuses=(RecordStatus.APPROVED,),
            )
        )

        by_day: dict[date, list[AttendanceRecord]] = {}
        for r in rows:
            by_day.setdefault(r.work_date, []).append(r)

        out: list[DailyHours] = []
        for day in sorted(by_day):
            self_record, supervisor_record = split_sides(by_day[day])
            counted = self_record if self._completion_source == RecordSource.SELF else supervisor_record
            out.append(
                DailyHours(
                    work_date=day,
                    self_hours=self_record.hours_worked if self_record else None,
                    supervisor_hours=supervisor_record.hours_worked if supervisor_record else None,
                    counted_hours=counted.hours_worked if counted else Decimal("0"),
                    mismatched=agreement_of(self_record, supervisor_record) is False,
                )
            )
        return out
