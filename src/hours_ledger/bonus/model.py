from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class FormulaTerms:
    """Rate and threshold as entered; applied to one worker or in bulk."""

    amount_per_hour: Decimal
    hours_threshold: Decimal


@dataclass(frozen=True)
class BonusFormula:
    formula_id: int
    worker_id: int
    amount_per_hour: Decimal
    hours_threshold: Decimal
    created_by: int
    created_at: Optional[datetime] = None
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    @property
    def terms(self) -> FormulaTerms:
        return FormulaTerms(amount_per_hour=self.amount_per_hour, hours_threshold=self.hours_threshold)


@dataclass(frozen=True)
class StaffBonusRow:
    """Read-model for the bonus overview."""

    worker_id: int
    name: str
    supervisor_name: Optional[str]
    amount_per_hour: Decimal
    hours_threshold: Decimal
    hours_worked: Decimal
    bonus: Decimal
    progress: int
