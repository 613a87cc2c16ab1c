from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .core.exceptions import DomainError
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WorkerOutcome:
    worker_id: int
    ok: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class BulkResult:
    """Per-worker report of a bulk operation; never all-or-nothing."""

    outcomes: list[WorkerOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[int]:
        return [o.worker_id for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[WorkerOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def all_ok(self) -> bool:
        return all(o.ok for o in self.outcomes)


def apply_per_worker(operation: str, worker_ids: Iterable[int], apply: Callable[[int], object]) -> BulkResult:
    """Run ``apply`` for each worker as its own unit of work.

    Any failure for one worker is recorded and the loop moves on; earlier
    writes are left in place.
    """
    outcomes: list[WorkerOutcome] = []
    for worker_id in worker_ids:
        try:
            apply(worker_id)
        except DomainError as e:
            logger.warning("%s failed for worker=%s: %s", operation, worker_id, e)
            outcomes.append(WorkerOutcome(worker_id=worker_id, ok=False, error=str(e)))
        except Exception as e:
            logger.exception("%s crashed for worker=%s", operation, worker_id)
            outcomes.append(WorkerOutcome(worker_id=worker_id, ok=False, error=f"{type(e).__name__}: {e}"))
        else:
            outcomes.append(WorkerOutcome(worker_id=worker_id, ok=True))

    result = BulkResult(outcomes=outcomes)
    logger.info("%s: %d succeeded, %d failed", operation, len(result.succeeded), len(result.failed))
    return result
