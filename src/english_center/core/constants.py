"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_POOL_SIZE = 10
DEFAULT_CONNECTION_TIMEOUT = 10
# seconds between attempts to borrow from an exhausted pool
POOL_RETRY_INTERVAL = 0.01
DEFAULT_DB_PORT = 3306

SCORE_MIN = 0
SCORE_MAX = 10

# (label, minimum total score), highest band first
DEFAULT_GRADE_BANDS = (
    ("Expert", 8.5),
    ("Very Good", 7.5),
    ("Good", 6.5),
    ("Competent", 5.5),
    ("Modest", 4.5),
    ("Limited", 3.5),
    ("Extremely Limited", 0.0),
)

SENSITIVE_BODY_FIELDS = ("password", "token", "accessToken", "refreshToken")
