"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_COOKIE_NAME = "laundryops_session"
SESSION_MAX_AGE_SECONDS = 60 * 60 * 24

ORDERS_PAGE_SIZE = 10
FEEDBACK_PAGE_SIZE = 10
OUTLETS_PAGE_SIZE = 12
STAFF_PAGE_SIZE = 15

TREND_DAYS = 7
RECENT_ORDERS_LIMIT = 5
MIN_PASSWORD_LENGTH = 6

EXPRESS_PRIORITY = "express"
EMPTY_DISPLAY = "—"
