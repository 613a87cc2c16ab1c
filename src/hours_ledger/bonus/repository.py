from __future__ import annotations

from typing import Optional, Protocol

from .model import BonusFormula, FormulaTerms


class BonusRepository(Protocol):
    def get_latest_for_worker(self, worker_id: int) -> Optional[BonusFormula]:
        raise NotImplementedError

    def create(self, *, worker_id: int, terms: FormulaTerms, created_by: int) -> int:
        raise NotImplementedError

    def update(self, *, formula_id: int, terms: FormulaTerms, updated_by: int) -> bool:
        raise NotImplementedError
