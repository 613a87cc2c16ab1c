from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..aggregation.service import HoursAggregationService
from ..bulk import BulkResult, apply_per_worker
from ..common.datetime_utils import normalize_period
from ..common.math_utils import completion_percent
from ..common.validators import Number, require_range
from ..core.constants import DEFAULT_TARGET_HOURS, MAX_TARGET_HOURS, PROGRESS_BELOW, PROGRESS_NEAR, PROGRESS_PROGRESSING
from ..core.exceptions import NotFoundError
from ..logging_config import get_logger
from ..profiles.repository import ProfileRepository
from .model import TargetHours, WorkerTarget
from .repository import TargetHoursRepository

logger = get_logger(__name__)


def progress_band(progress: int) -> str:
    """Dashboard label for a progress percentage."""
    if progress < PROGRESS_BELOW:
        return "below"
    if progress < PROGRESS_PROGRESSING:
        return "progressing"
    if progress < PROGRESS_NEAR:
        return "near"
    return "achieved"


class TargetHoursService:
    def __init__(
        self,
        targets: TargetHoursRepository,
        profiles: ProfileRepository,
        aggregation: HoursAggregationService,
        *,
        default_target: Decimal = DEFAULT_TARGET_HOURS,
    ):
        self._targets = targets
        self._profiles = profiles
        self._aggregation = aggregation
        self._default_target = Decimal(default_target)

    def get_target(self, worker_id: int, period: str) -> Decimal:
        period = normalize_period(period)
        stored = self._targets.get(worker_id=int(worker_id), period=period)
        return stored.target_hours if stored else self._default_target

    def set_target(self, *, worker_id: int, period: str, hours: Number, actor_id: int) -> TargetHours:
        period = normalize_period(period)
        target_hours = require_range(hours, "Target hours", minimum=Decimal("0"), maximum=MAX_TARGET_HOURS)
        if not self._profiles.get_by_id(int(worker_id)):
            raise NotFoundError(f"Worker {worker_id} not found")

        self._targets.upsert(worker_id=int(worker_id), period=period, target_hours=target_hours, created_by=int(actor_id))
        saved = self._targets.get(worker_id=int(worker_id), period=period)
        if not saved:
            raise NotFoundError(f"Target for worker {worker_id} in {period} missing after save")
        logger.info("target set: worker=%s period=%s hours=%s by=%s", worker_id, period, target_hours, actor_id)
        return saved

    def bulk_set_target(self, *, period: str, hours: Number, actor_id: int) -> BulkResult:
        """Same target for every active staff member, each upsert on its own."""
        period = normalize_period(period)
        require_range(hours, "Target hours", minimum=Decimal("0"), maximum=MAX_TARGET_HOURS)
        staff = self._profiles.list_active_staff()
        return apply_per_worker(
            "bulk target hours",
            [p.profile_id for p in staff],
            lambda worker_id: self.set_target(worker_id=worker_id, period=period, hours=hours, actor_id=actor_id),
        )

    def progress(self, worker_id: int, period: str) -> int:
        target = self.get_target(worker_id, period)
        completed = self._aggregation.completed_hours(worker_id, period)
        return completion_percent(completed, target)

    def targets_for_period(self, period: str) -> list[WorkerTarget]:
        period = normalize_period(period)
        staff = self._profiles.list_active_staff()
        if not staff:
            return []

        stored = {t.worker_id: t for t in self._targets.list_for_period(period)}
        supervisor_ids = {p.supervisor_id for p in staff if p.supervisor_id is not None}
        supervisors = {p.profile_id: p.name for p in self._profiles.list_by_ids(supervisor_ids)}

        out: list[WorkerTarget] = []
        for p in staff:
            t = stored.get(p.profile_id)
            out.append(
                WorkerTarget(
                    worker_id=p.profile_id,
                    name=p.name,
                    supervisor_id=p.supervisor_id,
                    supervisor_name=supervisors.get(p.supervisor_id) if p.supervisor_id is not None else None,
                    period=period,
                    target_hours=t.target_hours if t else self._default_target,
                    is_default=t is None,
                )
            )
        return out
