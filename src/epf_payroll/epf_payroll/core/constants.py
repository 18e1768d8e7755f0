"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

EPF_DEDUCTION_NAME = "EPF 8%"
EPF_RATE = Decimal("0.08")
DEFAULT_ETF_RATE = Decimal("0.03")
DEFAULT_OT_MULTIPLIER = Decimal("1.5")
DEFAULT_DIVIDE_BY = 240
ALLOWED_DIVIDE_BY = (240, 200)

CSV_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"
PERIOD_FORMAT = "%Y-%m"
# Punches earlier than this day of the month before the period are suspicious.
PRIOR_MONTH_CUTOFF_DAY = 15
DEFAULT_MAX_SHIFT_SPAN_HOURS = 20

DEFAULT_PROBABILITIES = {
    "workOnOff": 1,
    "workOnHoliday": 1,
    "absent": 5,
    "late": 2,
    "ot": 75,
}

WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
DEFAULT_WORKING_DAYS = {
    "mon": "full",
    "tue": "full",
    "wed": "full",
    "thu": "full",
    "fri": "full",
    "sat": "half",
    "sun": "off",
}

DEFAULT_SHIFT = {"start": "08:00", "end": "17:00", "break": 1}

CBSL_REFERENCE_URL = "https://www.cbsl.lk/EPFCRef/"
