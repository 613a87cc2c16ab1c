from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from ..model import FormulaTerms


class BonusCalculator(ABC):
    """Calculator interface (Strategy Pattern for bonus pay)."""

    @abstractmethod
    def bonus(self, *, completed_hours: Decimal, terms: Optional[FormulaTerms]) -> Decimal:
        raise NotImplementedError
