"""Caller-side holder for the most recent discovery result."""

from dataclasses import dataclass, field
from threading import Lock

import structlog

from src.pipeline.models import CycleResult


logger = structlog.get_logger()


@dataclass
class LatestResult:
    """Keeps the newest CycleResult when cycles overlap.

    Callers number their cycles (e.g. with ``next_sequence()`` at submit
    time) and publish results as they arrive; a result from an older cycle
    never replaces a newer one. Readers get the published reference, which
    is immutable.
    """

    keep_on_failure: bool = True
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)
    _sequence: int = 0
    _published_sequence: int = -1
    _current: CycleResult | None = None

    def next_sequence(self) -> int:
        """Reserve the sequence number for a cycle about to start."""
        with self._lock:
            sequence = self._sequence
            self._sequence += 1
            return sequence

    def publish(self, sequence: int, result: CycleResult) -> bool:
        """Offer a finished cycle's result.

        Args:
            sequence: Number reserved when the cycle started.
            result: The cycle's outcome.

        Returns:
            True if the result became current.
        """
        with self._lock:
            if sequence <= self._published_sequence:
                logger.debug(
                    "stale_result_dropped",
                    component="pipeline",
                    sequence=sequence,
                    current_sequence=self._published_sequence,
                )
                return False
            if (
                self.keep_on_failure
                and not result.succeeded
                and self._current is not None
            ):
                # Newer failure: remember we saw it, keep serving the old ranking
                self._published_sequence = sequence
                return False
            self._published_sequence = sequence
            self._current = result
            return True

    @property
    def current(self) -> CycleResult | None:
        """The most recently published result, if any."""
        return self._current
