from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hours_ledger.core.enums import RecordSource, RecordStatus
from hours_ledger.core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from hours_ledger.worktime.approval import INITIAL_STATUS, can_correct, can_transition, ensure_transition


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (RecordStatus.PENDING, RecordStatus.APPROVED, True),
        (RecordStatus.PENDING, RecordStatus.REJECTED, True),
        (RecordStatus.APPROVED, RecordStatus.REJECTED, True),
        (RecordStatus.APPROVED, RecordStatus.PENDING, False),
        (RecordStatus.APPROVED, RecordStatus.APPROVED, False),
        (RecordStatus.REJECTED, RecordStatus.APPROVED, False),
        (RecordStatus.REJECTED, RecordStatus.PENDING, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_rejected_is_terminal():
    with pytest.raises(InvalidTransitionError):
        ensure_transition(RecordStatus.REJECTED, RecordStatus.APPROVED)


def test_new_records_start_approved_and_only_approved_are_correctable():
    assert INITIAL_STATUS == RecordStatus.APPROVED
    assert can_correct(RecordStatus.APPROVED)
    assert not can_correct(RecordStatus.PENDING)
    assert not can_correct(RecordStatus.REJECTED)


def test_invalid_transition_is_a_validation_error():
    assert issubclass(InvalidTransitionError, ValidationError)


def test_supervisor_rejects_team_record(worktime, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8)

    rejected = worktime.reject(actor_id=10, record_id=rec.record_id, reason="Not on site")

    assert rejected.status == RecordStatus.REJECTED
    assert rejected.rejected_by == 10
    assert rejected.rejection_reason == "Not on site"


def test_rejecting_twice_fails(worktime, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8)
    worktime.reject(actor_id=10, record_id=rec.record_id, reason="Wrong day")

    with pytest.raises(InvalidTransitionError):
        worktime.reject(actor_id=10, record_id=rec.record_id, reason="Again")


def test_rejection_requires_reason(worktime, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8)

    with pytest.raises(ValidationError):
        worktime.reject(actor_id=10, record_id=rec.record_id, reason="   ")


def test_other_supervisor_cannot_reject(worktime, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8)

    with pytest.raises(AuthorizationError):
        worktime.reject(actor_id=11, record_id=rec.record_id, reason="Not my team")


def test_worker_cannot_reject_own_record(worktime, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8)

    with pytest.raises(AuthorizationError):
        worktime.reject(actor_id=1, record_id=rec.record_id, reason="Oops")


def test_manager_can_reject_any_record(worktime, today):
    rec = worktime.submit_self(actor_id=3, work_date=today, hours=8)

    rejected = worktime.reject(actor_id=20, record_id=rec.record_id, reason="Audit")

    assert rejected.status == RecordStatus.REJECTED


def test_pending_record_can_be_approved(worktime, records):
    seeded = records.seed(
        worker_id=1, work_date=date(2024, 3, 1), hours="8", source=RecordSource.SELF, status=RecordStatus.PENDING
    )

    approved = worktime.approve(actor_id=10, record_id=seeded.record_id)

    assert approved.status == RecordStatus.APPROVED


def test_approving_approved_record_fails(worktime, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8)

    with pytest.raises(InvalidTransitionError):
        worktime.approve(actor_id=10, record_id=rec.record_id)


def test_review_of_missing_record_is_not_found(worktime):
    with pytest.raises(NotFoundError):
        worktime.approve(actor_id=10, record_id=404)


def test_submitter_corrects_approved_record(worktime, records, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8, location="Site A")

    fixed = worktime.correct(actor_id=1, record_id=rec.record_id, hours="7.25", location="Site B")

    assert fixed.record_id == rec.record_id
    assert fixed.hours_worked == Decimal("7.25")
    assert fixed.location == "Site B"
    assert fixed.source == RecordSource.SELF
    assert fixed.work_date == today


def test_correction_recomputes_agreement(worktime, records, reconciliation, today):
    own = worktime.submit_self(actor_id=1, work_date=today, hours=8)
    sup = worktime.submit_for_worker(supervisor_id=10, worker_id=1, work_date=today, hours=8)
    assert records.get_by_id(own.record_id).agreement is True

    worktime.correct(actor_id=10, record_id=sup.record_id, hours=6)

    assert records.get_by_id(own.record_id).agreement is False
    assert records.get_by_id(sup.record_id).agreement is False
    assert reconciliation.compare(1, today).difference == Decimal("2.00")


def test_only_submitter_can_correct(worktime, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8)

    with pytest.raises(AuthorizationError):
        worktime.correct(actor_id=10, record_id=rec.record_id, hours=7)


def test_rejected_record_cannot_be_corrected(worktime, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8)
    worktime.reject(actor_id=10, record_id=rec.record_id, reason="Duplicate shift")

    with pytest.raises(InvalidTransitionError):
        worktime.correct(actor_id=1, record_id=rec.record_id, hours=7)


def test_correction_validates_hours(worktime, today):
    rec = worktime.submit_self(actor_id=1, work_date=today, hours=8)

    with pytest.raises(ValidationError):
        worktime.correct(actor_id=1, record_id=rec.record_id, hours=30)


def test_correcting_missing_record_is_not_found(worktime):
    with pytest.raises(NotFoundError):
        worktime.correct(actor_id=1, record_id=999, hours=7)
