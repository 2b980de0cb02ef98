"""Metrics collection for the feed fetch layer."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar

from src.fetch.models import FetchErrorClass


@dataclass
class FetchMetrics:
    """Thread-safe counters for feed fetches.

    A fetch is one ``FeedFetcher.fetch()`` call; it may make several HTTP
    attempts when retries are enabled. Fetches run on pipeline worker
    threads, so every mutation takes the instance lock.

    Attributes:
        fetches_total: Completed fetch calls.
        failed_fetches: Failed fetch calls keyed by error class.
        attempts_total: HTTP responses received, retries included.
        attempts_by_status: HTTP responses keyed by status code.
        retries_total: Retries scheduled after a failed attempt.
        feed_bytes_total: Body bytes received across attempts.
        last_duration_ms: Wall time of the most recent fetch.
    """

    fetches_total: int = 0
    failed_fetches: dict[str, int] = field(default_factory=dict)
    attempts_total: int = 0
    attempts_by_status: dict[int, int] = field(default_factory=dict)
    retries_total: int = 0
    feed_bytes_total: int = 0
    last_duration_ms: float = 0.0

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["FetchMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def record_attempt(self, status_code: int, body_bytes: int) -> None:
        """Record one HTTP response.

        Args:
            status_code: HTTP status code.
            body_bytes: Number of body bytes read.
        """
        with self._lock:
            self.attempts_total += 1
            self.attempts_by_status[status_code] = (
                self.attempts_by_status.get(status_code, 0) + 1
            )
            self.feed_bytes_total += body_bytes

    def record_retry(self) -> None:
        """Record a scheduled retry."""
        with self._lock:
            self.retries_total += 1

    def record_fetch(
        self, duration_ms: float, error_class: FetchErrorClass | None = None
    ) -> None:
        """Record a finished fetch call.

        Args:
            duration_ms: Wall time including retries.
            error_class: Classification of the failure, None on success.
        """
        with self._lock:
            self.fetches_total += 1
            self.last_duration_ms = duration_ms
            if error_class is not None:
                key = error_class.value
                self.failed_fetches[key] = self.failed_fetches.get(key, 0) + 1

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary."""
        with self._lock:
            return {
                "fetches_total": self.fetches_total,
                "failed_fetches": dict(self.failed_fetches),
                "attempts_total": self.attempts_total,
                "attempts_by_status": {
                    str(code): count for code, count in self.attempts_by_status.items()
                },
                "retries_total": self.retries_total,
                "feed_bytes_total": self.feed_bytes_total,
                "last_duration_ms": self.last_duration_ms,
            }
