from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def completion_percent(completed: Decimal, goal: Decimal) -> int:
    """round(completed / goal * 100) clamped to [0, 100]; 0 when goal <= 0."""
    if goal <= 0:
        return 0
    pct = (Decimal(completed) / Decimal(goal) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(0, min(100, int(pct)))
