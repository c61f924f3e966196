"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_RECENT_LIMIT = 10
MIN_PASSWORD_LENGTH = 6
MAX_HOURS_PER_DAY = 24
WEEK_LENGTH_DAYS = 7

FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"

DUPLICATE_HOURS_MESSAGE = "Hours already submitted for this date. Please edit or delete existing entry."
TRADE_IN_USE_MESSAGE = "Cannot delete trade that is assigned to crews. Please reassign or remove crews first."
NO_CREW_MESSAGE = "User not assigned to a crew"
