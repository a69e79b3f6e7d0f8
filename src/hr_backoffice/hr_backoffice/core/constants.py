"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7
MIN_PAYROLL_YEAR = 2000
APPRAISAL_LOOKAHEAD_DAYS = 30

HOURS_QUANTUM = Decimal("0.01")
MONEY_QUANTUM = Decimal("0.01")
# Upper bound (exclusive) for DECIMAL(12, 2) money columns.
MAX_AMOUNT = Decimal("10000000000")
