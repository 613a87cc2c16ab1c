from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of a profile, used for authorization checks."""

    STAFF = "staff"
    SUPERVISOR = "supervisor"
    MANAGER = "manager"
    ADMIN = "admin"


class RecordSource(str, Enum):
    """Which ledger an attendance record belongs to."""

    SELF = "self"
    SUPERVISOR = "supervisor"


class RecordStatus(str, Enum):
    """Lifecycle state of an attendance record (see worktime.approval)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ComparisonStatus(str, Enum):
    """Outcome of comparing the self and supervisor records of one day."""

    MATCHED = "matched"
    MISMATCHED = "mismatched"
    PENDING = "pending"
