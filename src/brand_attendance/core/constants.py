"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_BRAND = "Default"
DEFAULT_APP_TITLE = "Multi-User Attendance"

JWT_ALGORITHM = "HS256"
DEFAULT_TOKEN_HOURS = 24
AUTH_COOKIE_NAME = "auth_token"

MIN_SENIORITY_RANK = 1
MAX_SENIORITY_RANK = 5

DEFAULT_AUDIT_LIMIT = 100
DEFAULT_USER_AUDIT_LIMIT = 50

HOURS_PER_DAY = 8
DEFAULT_WEEKLY_HOURS = 40
DEFAULT_FULL_TIME_HOURS_THRESHOLD = 1560

DEFAULT_WARNING_THRESHOLD = 8
DEFAULT_CRITICAL_THRESHOLD = 0

RETENTION_DAILY = 7
RETENTION_WEEKLY = 4
RETENTION_MONTHLY = 12
