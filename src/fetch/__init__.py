"""HTTP fetch layer for the candidate feed.

Provides a single-GET feed fetcher with:
- Bounded connect/read/write timeouts
- Optional retry policy with exponential backoff
- Maximum response size enforcement
- URL and header redaction for logging
- Metrics collection for observability
"""

from src.fetch.client import FeedFetcher
from src.fetch.config import FetchConfig, TimeoutConfig
from src.fetch.metrics import FetchMetrics
from src.fetch.models import (
    FetchError,
    FetchErrorClass,
    FetchResult,
    ResponseSizeExceededError,
    RetryPolicy,
)
from src.fetch.redact import redact_headers, redact_url


__all__ = [
    "FeedFetcher",
    "FetchConfig",
    "FetchError",
    "FetchErrorClass",
    "FetchMetrics",
    "FetchResult",
    "ResponseSizeExceededError",
    "RetryPolicy",
    "TimeoutConfig",
    "redact_headers",
    "redact_url",
]
