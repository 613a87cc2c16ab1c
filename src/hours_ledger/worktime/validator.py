from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Union

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.validators import Number, parse_hours_worked
from ..core.enums import RecordSource
from ..core.exceptions import AuthorizationError, DuplicateRecordError, ValidationError
from ..profiles.repository import ProfileRepository
from .repository import RecordFilter, WorkTimeRepository


@dataclass(frozen=True)
class ValidatedSubmission:
    worker_id: int
    work_date: date
    hours_worked: Decimal
    source: RecordSource


def parse_source(value: Union[str, RecordSource]) -> RecordSource:
    try:
        return RecordSource(value)
    except ValueError:
        raise ValidationError(f"Unknown record source: {value!r}")


class SubmissionValidator:
    """Checks run before any write of a new attendance record.

    Only reads: the duplicate lookup and the supervisor relationship, which is
    fetched from the profile store on every call.
    """

    def __init__(
        self,
        records: WorkTimeRepository,
        profiles: ProfileRepository,
        *,
        clock: Callable[[], date] = today_local,
    ):
        self._records = records
        self._profiles = profiles
        self._clock = clock

    def check_date(self, work_date: Union[str, date]) -> date:
        d = parse_iso_date(work_date)
        if d > self._clock():
            raise ValidationError("Cannot create records for future dates")
        return d

    def check_duplicate(self, *, worker_id: int, work_date: date, source: RecordSource) -> None:
        existing = self._records.query(RecordFilter(worker_id=worker_id, work_date=work_date, source=source))
        if existing:
            raise DuplicateRecordError(
                f"A {source.value} record already exists for worker {worker_id} on {work_date.isoformat()}"
            )

    def check_authorized(self, *, worker_id: int, source: RecordSource, actor_id: int) -> None:
        if source == RecordSource.SELF:
            if int(actor_id) != int(worker_id):
                raise AuthorizationError("Workers can only submit self records for themselves")
            return

        worker = self._profiles.get_by_id(int(worker_id))
        if not worker or worker.supervisor_id is None or int(worker.supervisor_id) != int(actor_id):
            raise AuthorizationError("Not authorized to create records for this worker")

    def validate(
        self,
        *,
        worker_id: int,
        work_date: Union[str, date],
        hours: Number,
        source: Union[str, RecordSource],
        actor_id: int,
    ) -> ValidatedSubmission:
        src = parse_source(source)
        d = self.check_date(work_date)
        hours_worked = parse_hours_worked(hours)
        self.check_duplicate(worker_id=int(worker_id), work_date=d, source=src)
        self.check_authorized(worker_id=int(worker_id), source=src, actor_id=int(actor_id))
        return ValidatedSubmission(worker_id=int(worker_id), work_date=d, hours_worked=hours_worked, source=src)
