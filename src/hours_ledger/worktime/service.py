from __future__ import annotations

from datetime import date
from typing import Optional, Sequence, Union

from ..common.datetime_utils import parse_iso_date
from ..common.validators import Number, optional_text, parse_hours_worked, require_non_empty
from ..core.enums import RecordSource, RecordStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, PersistenceError, ValidationError
from ..logging_config import get_logger
from ..profiles.repository import ProfileRepository
from ..reconciliation.service import ReconciliationService
from .approval import INITIAL_STATUS, ensure_correctable, ensure_transition
from .model import AttendanceRecord, NewAttendanceRecord
from .repository import RecordFilter, WorkTimeRepository
from .validator import SubmissionValidator

logger = get_logger(__name__)

_REVIEWER_ROLES = frozenset({Role.MANAGER, Role.ADMIN})


class WorkTimeService:
    """Use cases: submit, correct, approve and reject attendance records."""

    def __init__(
        self,
        records: WorkTimeRepository,
        profiles: ProfileRepository,
        *,
        validator: Optional[SubmissionValidator] = None,
        reconciliation: Optional[ReconciliationService] = None,
    ):
        self._records = records
        self._profiles = profiles
        self._validator = validator or SubmissionValidator(records, profiles)
        self._reconciliation = reconciliation or ReconciliationService(records)

    def submit(
        self,
        *,
        actor_id: int,
        worker_id: int,
        work_date: Union[str, date],
        hours: Number,
        source: Union[str, RecordSource],
        location: Optional[str] = None,
        description: Optional[str] = None,
    ) -> AttendanceRecord:
        checked = self._validator.validate(
            worker_id=worker_id,
            work_date=work_date,
            hours=hours,
            source=source,
            actor_id=actor_id,
        )

        # A concurrent submission for the same day and source loses on the
        # store's unique key and surfaces DuplicateRecordError from here.
        record_id = self._records.create(
            NewAttendanceRecord(
                worker_id=checked.worker_id,
                work_date=checked.work_date,
                hours_worked=checked.hours_worked,
                source=checked.source,
                status=INITIAL_STATUS,
                submitted_by=int(actor_id),
                location=optional_text(location),
                description=optional_text(description),
            )
        )
        logger.info(
            "work time %s submitted: worker=%s date=%s source=%s hours=%s by=%s",
            record_id,
            checked.worker_id,
            checked.work_date,
            checked.source.value,
            checked.hours_worked,
            actor_id,
        )

        self._refresh_agreement(checked.worker_id, checked.work_date)
        return self._get(record_id)

    def submit_self(
        self,
        *,
        actor_id: int,
        work_date: Union[str, date],
        hours: Number,
        location: Optional[str] = None,
        description: Optional[str] = None,
    ) -> AttendanceRecord:
        return self.submit(
            actor_id=actor_id,
            worker_id=actor_id,
            work_date=work_date,
            hours=hours,
            source=RecordSource.SELF,
            location=location,
            description=description,
        )

    def submit_for_worker(
        self,
        *,
        supervisor_id: int,
        worker_id: int,
        work_date: Union[str, date],
        hours: Number,
        location: Optional[str] = None,
        description: Optional[str] = None,
    ) -> AttendanceRecord:
        return self.submit(
            actor_id=supervisor_id,
            worker_id=worker_id,
            work_date=work_date,
            hours=hours,
            source=RecordSource.SUPERVISOR,
            location=location,
            description=description,
        )

    def correct(
        self,
        *,
        actor_id: int,
        record_id: int,
        hours: Number,
        location: Optional[str] = None,
        description: Optional[str] = None,
    ) -> AttendanceRecord:
        """In-place correction of an approved record by its submitter.

        Source, worker and date never change.
        """
        record = self._get(record_id)
        ensure_correctable(record.status)
        if int(actor_id) != record.submitted_by:
            raise AuthorizationError("Only the submitter can correct this record")

        hours_worked = parse_hours_worked(hours)
        updated = self._records.update(
            record.record_id,
            {
                "hours_worked": hours_worked,
                "location": optional_text(location),
                "description": optional_text(description),
                "agreement": None,
            },
        )
        logger.info("work time %s corrected: hours %s -> %s by=%s", record.record_id, record.hours_worked, hours_worked, actor_id)

        self._refresh_agreement(updated.worker_id, updated.work_date)
        return self._get(record.record_id)

    def approve(self, *, actor_id: int, record_id: int) -> AttendanceRecord:
        record = self._get(record_id)
        ensure_transition(record.status, RecordStatus.APPROVED)
        self._ensure_reviewer(actor_id=actor_id, record=record)

        updated = self._records.update(record.record_id, {"status": RecordStatus.APPROVED})
        logger.info("work time %s approved by=%s", record.record_id, actor_id)
        return updated

    def reject(self, *, actor_id: int, record_id: int, reason: str) -> AttendanceRecord:
        record = self._get(record_id)
        ensure_transition(record.status, RecordStatus.REJECTED)
        reason = require_non_empty(reason, "Rejection reason")
        self._ensure_reviewer(actor_id=actor_id, record=record)

        updated = self._records.update(
            record.record_id,
            {
                "status": RecordStatus.REJECTED,
                "rejected_by": int(actor_id),
                "rejection_reason": reason,
            },
        )
        logger.info("work time %s rejected by=%s: %s", record.record_id, actor_id, reason)
        return updated

    def get_record(self, record_id: int) -> AttendanceRecord:
        return self._get(record_id)

    def list_for_worker(self, worker_id: int) -> Sequence[AttendanceRecord]:
        rows = self._records.query(RecordFilter(worker_id=int(worker_id)))
        return sorted(rows, key=lambda r: (r.work_date, r.source.value), reverse=True)

    def list_in_range(
        self,
        worker_id: int,
        start: Union[str, date],
        end: Union[str, date],
    ) -> Sequence[AttendanceRecord]:
        start_d = parse_iso_date(start)
        end_d = parse_iso_date(end)
        if end_d < start_d:
            raise ValidationError("End date must be on or after start date")
        rows = self._records.query(RecordFilter(worker_id=int(worker_id), start_date=start_d, end_date=end_d))
        return sorted(rows, key=lambda r: (r.work_date, r.source.value))

    def list_for_supervisor(self, supervisor_id: int) -> Sequence[AttendanceRecord]:
        """Records of the active staff currently assigned to ``supervisor_id``."""
        staff = self._profiles.list_staff_for_supervisor(int(supervisor_id))
        if not staff:
            return []
        rows = self._records.query(RecordFilter(worker_ids=tuple(p.profile_id for p in staff)))
        return sorted(rows, key=lambda r: (r.work_date, r.worker_id), reverse=True)

    def _get(self, record_id: int) -> AttendanceRecord:
        record = self._records.get_by_id(int(record_id))
        if not record:
            raise NotFoundError(f"Work time record {record_id} not found")
        return record

    def _ensure_reviewer(self, *, actor_id: int, record: AttendanceRecord) -> None:
        actor = self._profiles.get_by_id(int(actor_id))
        if not actor or not actor.is_active:
            raise AuthorizationError("Unknown or inactive reviewer")
        if actor.role in _REVIEWER_ROLES:
            return

        worker = self._profiles.get_by_id(record.worker_id)
        if worker and worker.supervisor_id is not None and int(worker.supervisor_id) == actor.profile_id:
            return
        raise AuthorizationError("Not authorized to review records for this worker")

    def _refresh_agreement(self, worker_id: int, work_date: date) -> None:
        try:
            self._reconciliation.refresh_agreement(worker_id, work_date)
        except PersistenceError as e:
            # The row is stored; its agreement stays unknown and readers recompute.
            logger.warning("agreement refresh failed for worker=%s date=%s: %s", worker_id, work_date, e)
