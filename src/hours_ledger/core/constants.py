"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

MAX_HOURS_PER_DAY = Decimal("24")
HOURS_PLACES = Decimal("0.01")
MONEY_PLACES = Decimal("0.01")

DEFAULT_TARGET_HOURS = Decimal("200")
MAX_TARGET_HOURS = Decimal("500")

DATE_FORMAT = "%Y-%m-%d"
PERIOD_FORMAT = "%Y-%m"

# Progress bands shown on dashboards (upper bounds, exclusive).
PROGRESS_BELOW = 30
PROGRESS_PROGRESSING = 80
PROGRESS_NEAR = 100
