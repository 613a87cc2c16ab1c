from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...core.constants import MONEY_PLACES
from ..model import FormulaTerms
from .base import BonusCalculator

ZERO = Decimal("0")


class ThresholdBonusCalculator(BonusCalculator):
    """Standard rule: (completed - threshold) * rate, not below 0.

    No formula, a non-positive rate or a non-positive threshold pays nothing.
    """

    def bonus(self, *, completed_hours: Decimal, terms: Optional[FormulaTerms]) -> Decimal:
        if terms is None or terms.amount_per_hour <= 0 or terms.hours_threshold <= 0:
            return ZERO.quantize(MONEY_PLACES)
        extra = max(ZERO, completed_hours - terms.hours_threshold)
        return (extra * terms.amount_per_hour).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)
