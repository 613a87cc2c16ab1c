from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Union

from ..core.constants import DATE_FORMAT, PERIOD_FORMAT
from ..core.exceptions import ValidationError

_PERIOD_RE = re.compile(r"\d{4}-\d{2}")


def parse_iso_date(value: Union[str, date]) -> date:
    """Parse YYYY-MM-DD string into date.

    Accepts an existing ``date`` as-is (but not a ``datetime``: the ledger
    works on calendar days only).
    """
    if isinstance(value, datetime):
        raise ValidationError(f"Date must not carry a time component, got: {value!r}")
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime((value or "").strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Date must be in YYYY-MM-DD format, got: {value!r}")


def format_iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def today_local() -> date:
    """Current local calendar day.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()


def parse_period(value: str) -> tuple[int, int]:
    """Parse a YYYY-MM period into (year, month).

    Only the zero-padded form is accepted, since the text is also a store key.
    """
    if not isinstance(value, str) or not _PERIOD_RE.fullmatch(value):
        raise ValidationError(f"Period must be in YYYY-MM format, got: {value!r}")
    try:
        parsed = datetime.strptime(value, PERIOD_FORMAT)
    except ValueError:
        raise ValidationError(f"Period must be in YYYY-MM format, got: {value!r}")
    return parsed.year, parsed.month


def normalize_period(value: str) -> str:
    """Validated period in its canonical YYYY-MM text."""
    year, month = parse_period(value)
    return f"{year:04d}-{month:02d}"


def format_period(value: date) -> str:
    return value.strftime(PERIOD_FORMAT)


def month_bounds(period: str) -> tuple[date, date]:
    """First and last calendar day of the month named by ``period``."""
    year, month = parse_period(period)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
