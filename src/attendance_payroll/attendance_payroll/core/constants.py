"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_STANDARD_DAILY_HOURS = Decimal("8")
DEFAULT_STANDARD_MONTHLY_HOURS = Decimal("160")
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_HALF_DAY_HOURS = Decimal("4")
DEFAULT_SHIFT_START = "09:00"
DEFAULT_SHIFT_END = "17:00"

# Monday=0 ... Friday=4 (datetime.weekday())
DEFAULT_WORKING_WEEKDAYS = frozenset({0, 1, 2, 3, 4})
WEEKEND_WEEKDAYS = frozenset({5, 6})

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 500

# MySQL ER_DUP_ENTRY
MYSQL_DUPLICATE_KEY_ERRNO = 1062
