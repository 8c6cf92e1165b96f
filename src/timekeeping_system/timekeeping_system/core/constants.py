"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

OVERTIME_EXPIRATION_DAYS = 180
TIME_BANK_EXPIRY_WARNING_DAYS = 30
BUSINESS_DAYS_PER_WEEK = 5
DEFAULT_LIST_LIMIT = 200

REMAINDER_DESCRIPTION_PREFIX = "Saldo restante após compensação: "
PROCESS_BATCH_LIMIT = 1000
