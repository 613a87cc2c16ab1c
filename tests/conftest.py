from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

import pytest

from hours_ledger.aggregation.service import HoursAggregationService
from hours_ledger.bonus.model import BonusFormula, FormulaTerms
from hours_ledger.bonus.service import BonusService
from hours_ledger.core.enums import RecordSource, RecordStatus, Role
from hours_ledger.core.exceptions import DuplicateRecordError, NotFoundError, PersistenceError
from hours_ledger.profiles.model import Profile
from hours_ledger.reconciliation.service import ReconciliationService
from hours_ledger.targets.model import TargetHours
from hours_ledger.targets.service import TargetHoursService
from hours_ledger.worktime.model import AttendanceRecord, NewAttendanceRecord
from hours_ledger.worktime.repository import UPDATABLE_FIELDS, RecordFilter
from hours_ledger.worktime.service import WorkTimeService
from hours_ledger.worktime.validator import SubmissionValidator

TODAY = date(2024, 3, 15)

WORKER_U = 1
WORKER_V = 2
WORKER_W = 3
SUPERVISOR_S = 10
SUPERVISOR_T = 11
MANAGER_M = 20


class InMemoryWorkTime:
    """Record store fake enforcing the (worker, date, source) unique key."""

    def __init__(self):
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0
        self.fail_set_agreement = False
        self.agreement_writes = 0

    def create(self, record: NewAttendanceRecord) -> int:
        for r in self._rows.values():
            if (r.worker_id, r.work_date, r.source) == (record.worker_id, record.work_date, record.source):
                raise DuplicateRecordError("insert work time: record already exists")
        self._id += 1
        self._rows[self._id] = AttendanceRecord(
            record_id=self._id,
            worker_id=record.worker_id,
            work_date=record.work_date,
            hours_worked=record.hours_worked,
            source=record.source,
            status=record.status,
            submitted_by=record.submitted_by,
            location=record.location,
            description=record.description,
            created_at=datetime(2024, 3, 15, 9, 0),
            updated_at=datetime(2024, 3, 15, 9, 0),
        )
        return self._id

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        return self._rows.get(int(record_id))

    def update(self, record_id: int, changes) -> AttendanceRecord:
        assert set(changes) <= UPDATABLE_FIELDS
        row = self._rows.get(int(record_id))
        if not row:
            raise NotFoundError(f"Work time record {record_id} not found")
        self._rows[row.record_id] = replace(row, **changes)
        return self._rows[row.record_id]

    def query(self, flt: RecordFilter):
        rows = [r for r in self._rows.values() if flt.matches(r)]
        return sorted(rows, key=lambda r: (r.work_date, r.worker_id, r.source.value))

    def set_agreement(self, record_ids: Iterable[int], agreement: Optional[bool]) -> None:
        if self.fail_set_agreement:
            raise PersistenceError("refresh agreement", "connection lost")
        self.agreement_writes += 1
        for rid in record_ids:
            self._rows[rid] = replace(self._rows[rid], agreement=agreement)

    # Test helper: seed a row directly, bypassing validation.
    def seed(
        self,
        *,
        worker_id: int,
        work_date: date,
        hours: str,
        source: RecordSource,
        status: RecordStatus = RecordStatus.APPROVED,
        agreement: Optional[bool] = None,
        submitted_by: Optional[int] = None,
    ) -> AttendanceRecord:
        rid = self.create(
            NewAttendanceRecord(
                worker_id=worker_id,
                work_date=work_date,
                hours_worked=Decimal(hours),
                source=source,
                status=status,
                submitted_by=submitted_by if submitted_by is not None else worker_id,
            )
        )
        self._rows[rid] = replace(self._rows[rid], agreement=agreement)
        return self._rows[rid]


class InMemoryProfiles:
    def __init__(self, profiles: Iterable[Profile]):
        self._by_id = {p.profile_id: p for p in profiles}
        self.reads = 0

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        self.reads += 1
        return self._by_id.get(int(profile_id))

    def list_by_ids(self, profile_ids):
        return [self._by_id[i] for i in profile_ids if i in self._by_id]

    def list_active_staff(self):
        return [p for p in self._by_id.values() if p.role == Role.STAFF and p.is_active]

    def list_staff_for_supervisor(self, supervisor_id: int):
        return [p for p in self._by_id.values() if p.supervisor_id == supervisor_id and p.is_active]

    def reassign(self, profile_id: int, supervisor_id: Optional[int]) -> None:
        self._by_id[profile_id] = replace(self._by_id[profile_id], supervisor_id=supervisor_id)


class InMemoryBonuses:
    def __init__(self):
        self._rows: dict[int, BonusFormula] = {}
        self._id = 0
        self.fail_for: set[int] = set()

    def get_latest_for_worker(self, worker_id: int) -> Optional[BonusFormula]:
        rows = [f for f in self._rows.values() if f.worker_id == worker_id]
        return max(rows, key=lambda f: f.formula_id) if rows else None

    def create(self, *, worker_id: int, terms: FormulaTerms, created_by: int) -> int:
        if worker_id in self.fail_for:
            raise PersistenceError("insert bonus formula", "deadlock")
        self._id += 1
        self._rows[self._id] = BonusFormula(
            formula_id=self._id,
            worker_id=worker_id,
            amount_per_hour=terms.amount_per_hour,
            hours_threshold=terms.hours_threshold,
            created_by=created_by,
        )
        return self._id

    def update(self, *, formula_id: int, terms: FormulaTerms, updated_by: int) -> bool:
        row = self._rows.get(formula_id)
        if not row:
            return False
        if row.worker_id in self.fail_for:
            raise PersistenceError("update bonus formula", "deadlock")
        self._rows[formula_id] = replace(
            row,
            amount_per_hour=terms.amount_per_hour,
            hours_threshold=terms.hours_threshold,
            updated_by=updated_by,
        )
        return True

    def count(self) -> int:
        return len(self._rows)


class InMemoryTargets:
    def __init__(self):
        self._rows: dict[tuple[int, str], TargetHours] = {}
        self._id = 0
        self.fail_for: set[int] = set()

    def get(self, *, worker_id: int, period: str) -> Optional[TargetHours]:
        return self._rows.get((worker_id, period))

    def list_for_period(self, period: str):
        return [t for (_, p), t in self._rows.items() if p == period]

    def upsert(self, *, worker_id: int, period: str, target_hours: Decimal, created_by: int) -> int:
        if worker_id in self.fail_for:
            raise PersistenceError("upsert target hours", "lock wait timeout")
        existing = self._rows.get((worker_id, period))
        if existing:
            self._rows[(worker_id, period)] = replace(existing, target_hours=target_hours, created_by=created_by)
            return existing.target_id
        self._id += 1
        self._rows[(worker_id, period)] = TargetHours(
            target_id=self._id,
            worker_id=worker_id,
            period=period,
            target_hours=target_hours,
            created_by=created_by,
        )
        return self._id


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def profiles() -> InMemoryProfiles:
    return InMemoryProfiles(
        [
            Profile(profile_id=WORKER_U, name="Uma", role=Role.STAFF, supervisor_id=SUPERVISOR_S),
            Profile(profile_id=WORKER_V, name="Vic", role=Role.STAFF, supervisor_id=SUPERVISOR_S),
            Profile(profile_id=WORKER_W, name="Wes", role=Role.STAFF, supervisor_id=SUPERVISOR_T),
            Profile(profile_id=SUPERVISOR_S, name="Sam", role=Role.SUPERVISOR, manager_id=MANAGER_M),
            Profile(profile_id=SUPERVISOR_T, name="Tia", role=Role.SUPERVISOR, manager_id=MANAGER_M),
            Profile(profile_id=MANAGER_M, name="Max", role=Role.MANAGER),
        ]
    )


@pytest.fixture
def records() -> InMemoryWorkTime:
    return InMemoryWorkTime()


@pytest.fixture
def worktime(records, profiles) -> WorkTimeService:
    validator = SubmissionValidator(records, profiles, clock=lambda: TODAY)
    return WorkTimeService(records, profiles, validator=validator)


@pytest.fixture
def reconciliation(records) -> ReconciliationService:
    return ReconciliationService(records)


@pytest.fixture
def aggregation(records) -> HoursAggregationService:
    return HoursAggregationService(records)


@pytest.fixture
def bonuses() -> InMemoryBonuses:
    return InMemoryBonuses()


@pytest.fixture
def bonus_service(bonuses, profiles, aggregation) -> BonusService:
    return BonusService(bonuses, profiles, aggregation)


@pytest.fixture
def targets() -> InMemoryTargets:
    return InMemoryTargets()


@pytest.fixture
def target_service(targets, profiles, aggregation) -> TargetHoursService:
    return TargetHoursService(targets, profiles, aggregation)
