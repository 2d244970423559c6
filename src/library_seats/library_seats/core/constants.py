"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_EXPIRING_SOON_DAYS = 30
RENEWAL_DEFAULT_MONTHS = 1
