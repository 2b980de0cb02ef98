"""Metrics collection for the ranker module."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar

from src.ranker.models import FilterStats


@dataclass
class RankerMetrics:
    """Metrics for ranking passes.

    Attributes:
        passes_total: Number of ranking passes run.
        records_in_total: Records given to the ranker across passes.
        ranked_total: Records that ended up ranked.
        excluded_region_total: Records dropped for the excluded region.
        unreachable_total: Records dropped for a non-positive latency.
        empty_passes_total: Passes where nothing was eligible.
        last_scores: Composite scores of the most recent pass.
        last_duration_ms: Duration of the most recent pass.
    """

    passes_total: int = 0
    records_in_total: int = 0
    ranked_total: int = 0
    excluded_region_total: int = 0
    unreachable_total: int = 0
    empty_passes_total: int = 0
    last_scores: list[float] = field(default_factory=list)
    last_duration_ms: float = 0.0

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["RankerMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()

    @classmethod
    def get_instance(cls) -> "RankerMetrics":
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

    def record_pass(
        self,
        records_in: int,
        filter_stats: FilterStats,
        scores: list[float],
        duration_ms: float,
    ) -> None:
        """Record one filter -> score -> rank pass.

        Args:
            records_in: Number of parsed records given to the ranker.
            filter_stats: What the eligibility filter removed.
            scores: Composite scores of the ranked output.
            duration_ms: Wall time of the pass.
        """
        with self._lock:
            self.passes_total += 1
            self.records_in_total += records_in
            self.ranked_total += len(scores)
            self.excluded_region_total += filter_stats.excluded_region
            self.unreachable_total += filter_stats.unreachable
            if not scores:
                self.empty_passes_total += 1
            self.last_scores = list(scores)
            self.last_duration_ms = duration_ms

    def get_score_percentiles(self) -> dict[str, float]:
        """Calculate p50/p90/p99 of the most recent pass's scores."""
        with self._lock:
            sorted_scores = sorted(self.last_scores)

        if not sorted_scores:
            return {"p50": 0.0, "p90": 0.0, "p99": 0.0}

        n = len(sorted_scores)

        def percentile(p: float) -> float:
            idx = int(p * n / 100)
            return sorted_scores[min(idx, n - 1)]

        return {
            "p50": percentile(50),
            "p90": percentile(90),
            "p99": percentile(99),
        }

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary."""
        percentiles = self.get_score_percentiles()
        with self._lock:
            return {
                "passes_total": self.passes_total,
                "records_in_total": self.records_in_total,
                "ranked_total": self.ranked_total,
                "excluded_region_total": self.excluded_region_total,
                "unreachable_total": self.unreachable_total,
                "empty_passes_total": self.empty_passes_total,
                "last_duration_ms": self.last_duration_ms,
                "score_percentiles": percentiles,
            }
