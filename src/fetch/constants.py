"""HTTP constants for the feed fetch layer."""

# Public mirror of the candidate feed (CSV, 15 columns)
DEFAULT_FEED_URL = (
    "https://raw.githubusercontent.com/mahdigholamipak/vpn-list-mirror/"
    "refs/heads/main/server_list.csv"
)

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 600

# Default per-phase timeout (connect/read/write/pool)
DEFAULT_TIMEOUT_SECONDS = 30.0

# The full feed is a few MB; anything far larger is not a feed
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 32 * 1024 * 1024

# Chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 8192

# Maximum retry delay cap for rate limiting (seconds)
MAX_RETRY_AFTER_SECONDS = 60
