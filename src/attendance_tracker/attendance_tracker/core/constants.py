"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

NOTES_MAX_LENGTH = 500
STUDENT_HISTORY_LIMIT = 50

GOOD_BAND_PERCENTAGE = 75
FAIR_BAND_PERCENTAGE = 50

DEFAULT_TOKEN_TTL_HOURS = 24 * 7
DEFAULT_STORE_TIMEOUT_SECONDS = 5
SLOW_REQUEST_MS = 5000

MIN_PASSWORD_LENGTH = 6
