"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_NOTICE_HOURS = 24

# Tier boundaries (inclusive upper bounds) for TARDY / LEFT_EARLY.
TIER_LOW_MINUTES = 15
TIER_HIGH_MINUTES = 30

# Not read from the policy table: TARDY, LEFT_EARLY and NO_CALL_NO_SHOW always expire after 30 days.
FIXED_EXPIRATION_DAYS = 30
NON_EXPIRING_YEARS = 1
