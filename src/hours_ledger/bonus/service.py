from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..aggregation.service import HoursAggregationService
from ..bulk import BulkResult, apply_per_worker
from ..common.math_utils import completion_percent
from ..common.validators import Number, to_decimal
from ..core.exceptions import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..profiles.repository import ProfileRepository
from .calculator.base import BonusCalculator
from .calculator.threshold_calculator import ThresholdBonusCalculator
from .model import BonusFormula, FormulaTerms, StaffBonusRow
from .repository import BonusRepository

logger = get_logger(__name__)


def make_terms(amount_per_hour: Number, hours_threshold: Number) -> FormulaTerms:
    rate = to_decimal(amount_per_hour, "Amount per hour")
    threshold = to_decimal(hours_threshold, "Hours threshold")
    if rate < 0:
        raise ValidationError("Amount per hour cannot be negative")
    if threshold < 0:
        raise ValidationError("Hours threshold cannot be negative")
    return FormulaTerms(amount_per_hour=rate, hours_threshold=threshold)


class BonusService:
    def __init__(
        self,
        bonuses: BonusRepository,
        profiles: ProfileRepository,
        aggregation: HoursAggregationService,
        *,
        calculator: Optional[BonusCalculator] = None,
    ):
        self._bonuses = bonuses
        self._profiles = profiles
        self._aggregation = aggregation
        self._calculator = calculator or ThresholdBonusCalculator()

    def get_formula(self, worker_id: int) -> Optional[BonusFormula]:
        """Latest-created formula for the worker, or None."""
        return self._bonuses.get_latest_for_worker(int(worker_id))

    def set_formula(self, *, worker_id: int, terms: FormulaTerms, actor_id: int) -> BonusFormula:
        """Upsert: overwrite the latest formula, or create the first one."""
        if not self._profiles.get_by_id(int(worker_id)):
            raise NotFoundError(f"Worker {worker_id} not found")

        existing = self._bonuses.get_latest_for_worker(int(worker_id))
        if existing:
            self._bonuses.update(formula_id=existing.formula_id, terms=terms, updated_by=int(actor_id))
        else:
            self._bonuses.create(worker_id=int(worker_id), terms=terms, created_by=int(actor_id))

        saved = self._bonuses.get_latest_for_worker(int(worker_id))
        if not saved:
            raise NotFoundError(f"Bonus formula for worker {worker_id} missing after save")
        logger.info(
            "bonus formula set: worker=%s rate=%s threshold=%s by=%s",
            worker_id,
            terms.amount_per_hour,
            terms.hours_threshold,
            actor_id,
        )
        return saved

    def bulk_apply(self, terms: FormulaTerms, actor_id: int) -> BulkResult:
        """Apply one formula to every active staff member, worker by worker."""
        staff = self._profiles.list_active_staff()
        return apply_per_worker(
            "bulk bonus formula",
            [p.profile_id for p in staff],
            lambda worker_id: self.set_formula(worker_id=worker_id, terms=terms, actor_id=actor_id),
        )

    def calculate_bonus(self, worker_id: int, period: str) -> Decimal:
        formula = self.get_formula(worker_id)
        completed = self._aggregation.completed_hours(worker_id, period)
        return self._calculator.bonus(completed_hours=completed, terms=formula.terms if formula else None)

    def staff_overview(self, period: str, *, supervisor_id: Optional[int] = None) -> list[StaffBonusRow]:
        if supervisor_id is None:
            staff = self._profiles.list_active_staff()
        else:
            staff = self._profiles.list_staff_for_supervisor(int(supervisor_id))

        supervisor_ids = {p.supervisor_id for p in staff if p.supervisor_id is not None}
        supervisors = {p.profile_id: p.name for p in self._profiles.list_by_ids(supervisor_ids)}

        rows: list[StaffBonusRow] = []
        for p in sorted(staff, key=lambda x: x.name):
            formula = self.get_formula(p.profile_id)
            terms = formula.terms if formula else FormulaTerms(Decimal("0"), Decimal("0"))
            completed = self._aggregation.completed_hours(p.profile_id, period)
            rows.append(
                StaffBonusRow(
                    worker_id=p.profile_id,
                    name=p.name,
                    supervisor_name=supervisors.get(p.supervisor_id) if p.supervisor_id is not None else None,
                    amount_per_hour=terms.amount_per_hour,
                    hours_threshold=terms.hours_threshold,
                    hours_worked=completed,
                    bonus=self._calculator.bonus(completed_hours=completed, terms=formula.terms if formula else None),
                    progress=completion_percent(completed, terms.hours_threshold),
                )
            )
        return rows

    def total_bonuses(self, period: str) -> Decimal:
        total = Decimal("0.00")
        for p in self._profiles.list_active_staff():
            total += self.calculate_bonus(p.profile_id, period)
        return total
