"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_TOKEN_TTL_MINUTES = 60
DEFAULT_SUMMARY_TIMEOUT_SECONDS = 30
DEFAULT_SUMMARY_MODEL = "gpt-4o-mini"
SUMMARY_TEMPERATURE = 0.4
TOKEN_COOKIE_NAME = "token"
MIN_PASSWORD_LENGTH = 6
