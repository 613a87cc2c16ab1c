"""Record lifecycle: a closed two-outcome workflow.

    pending  -> approved | rejected
    approved -> rejected
    rejected    (terminal)

Validated submissions start as approved; there is no creation-time review
gate. Corrections are only allowed while a record is approved.
"""

from __future__ import annotations

from ..core.enums import RecordStatus
from ..core.exceptions import InvalidTransitionError

INITIAL_STATUS = RecordStatus.APPROVED

_TRANSITIONS: dict[RecordStatus, frozenset[RecordStatus]] = {
    RecordStatus.PENDING: frozenset({RecordStatus.APPROVED, RecordStatus.REJECTED}),
    RecordStatus.APPROVED: frozenset({RecordStatus.REJECTED}),
    RecordStatus.REJECTED: frozenset(),
}


def can_transition(current: RecordStatus, target: RecordStatus) -> bool:
    return target in _TRANSITIONS[current]


def ensure_transition(current: RecordStatus, target: RecordStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(f"Cannot move a {current.value} record to {target.value}")


def can_correct(status: RecordStatus) -> bool:
    return status == RecordStatus.APPROVED


def ensure_correctable(status: RecordStatus) -> None:
    if not can_correct(status):
        raise InvalidTransitionError(f"Only approved records can be corrected (record is {status.value})")
