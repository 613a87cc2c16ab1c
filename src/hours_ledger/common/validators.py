from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from ..core.constants import HOURS_PLACES, MAX_HOURS_PER_DAY
from ..core.exceptions import ValidationError

Number = Union[int, float, str, Decimal]


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def to_decimal(value: Number, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got: {value!r}")
    try:
        # str() first so floats keep their printed value (8.1 -> "8.1").
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number, got: {value!r}")
    if not d.is_finite():
        raise ValidationError(f"{field_name} must be a finite number, got: {value!r}")
    return d


def parse_hours_worked(value: Number) -> Decimal:
    """Hours for one day: 0 < hours <= 24, kept to two decimals.

    The range applies to the value as entered; rounding happens afterwards.
    """
    raw = to_decimal(value, "Hours worked")
    if raw <= 0:
        raise ValidationError(f"Hours worked must be greater than 0, got: {value}")
    if raw > MAX_HOURS_PER_DAY:
        raise ValidationError(f"Hours worked must be less than or equal to 24, got: {value}")

    hours = raw.quantize(HOURS_PLACES, rounding=ROUND_HALF_UP)
    if hours == 0:
        raise ValidationError(f"Hours worked rounds to 0.00 at two decimals, got: {value}")
    return hours


def require_range(value: Number, field_name: str, *, minimum: Decimal, maximum: Decimal) -> Decimal:
    d = to_decimal(value, field_name)
    if d < minimum or d > maximum:
        raise ValidationError(f"{field_name} must be between {minimum} and {maximum}, got: {value}")
    return d
