"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_POLICY_ID = "default"
DEFAULT_POLICY_NAME = "Default Policy"
DEFAULT_CONCERN_THRESHOLD = 80
DEFAULT_LATE_TOLERANCE_MINUTES = 15
DEFAULT_MAX_ABSENCES = 20

MAX_LATE_TOLERANCE_MINUTES = 180
MAX_ABSENCES_LIMIT = 365
MIN_WAGE_YEAR = 2020

RATE_QUANTUM = Decimal("0.01")
MONEY_QUANTUM = Decimal("0.01")

NOTES_SEPARATOR = " | "
