# Posting slots, minutes of day in UTC before the timezone shift
DEFAULT_POSTING_TIMES = [560, 850, 1140]

# Seconds a token is assumed valid when the provider gives no expiry
DEFAULT_EXPIRES_IN = 999999999

# Tokens expiring within this window are picked up by the refresh job
REFRESH_WINDOW_DAYS = 1

INTERNAL_ID_LENGTH = 10
UPLOAD_NAME_LENGTH = 32
