"""Scoring engine for candidate ranking."""

from collections.abc import Sequence

import structlog

from src.feed.models import CandidateRecord
from src.ranker.constants import DEGENERATE_NORMALIZED_VALUE
from src.ranker.models import ScoredCandidate, ScoringWeights


logger = structlog.get_logger()


def effective_capacity(record: CandidateRecord) -> float:
    """Compute throughput / (load + 1).

    The ``+ 1`` accounts for the caller's own session and keeps the
    denominator positive.
    """
    return record.throughput / (record.load + 1)


def min_max_normalize(value: float, minimum: float, maximum: float) -> float:
    """Rescale ``value`` into [0, 1] using the batch minimum and maximum.

    Args:
        value: Value to rescale.
        minimum: Batch minimum.
        maximum: Batch maximum.

    Returns:
        Normalized value, or 1.0 when the batch has no spread.
    """
    value_range = maximum - minimum
    if value_range <= 0:
        return DEGENERATE_NORMALIZED_VALUE
    return (value - minimum) / value_range


class CandidateScorer:
    """Computes batch-relative composite scores for candidates.

    Scoring formula:
        composite = capacity_weight * normalized_capacity
                  + latency_weight * normalized_latency

    Where:
        - normalized_capacity: min-max of throughput / (load + 1), higher is better
        - normalized_latency: 1 - min-max of latency, lower latency is better

    Normalization uses the current batch only, so scores are comparable
    within a batch and never across batches.
    """

    def __init__(self, weights: ScoringWeights | None = None) -> None:
        """Initialize the scorer.

        Args:
            weights: Composite score weights.
        """
        self._weights = weights or ScoringWeights()
        self._log = logger.bind(component="ranker", subcomponent="scorer")

    @property
    def weights(self) -> ScoringWeights:
        """Get the composite score weights."""
        return self._weights

    def score(self, records: Sequence[CandidateRecord]) -> list[ScoredCandidate]:
        """Score a batch of records.

        Records with a non-positive latency are dropped before normalization.

        Args:
            records: Filtered batch.

        Returns:
            ScoredCandidates in input order.
        """
        batch = [r for r in records if r.latency > 0]
        if not batch:
            return []

        capacities = [effective_capacity(r) for r in batch]
        latencies = [float(r.latency) for r in batch]

        min_capacity, max_capacity = min(capacities), max(capacities)
        min_latency, max_latency = min(latencies), max(latencies)

        scored = []
        for record, capacity, latency in zip(batch, capacities, latencies, strict=True):
            normalized_capacity = min_max_normalize(capacity, min_capacity, max_capacity)
            normalized_latency = (
                1.0 - min_max_normalize(latency, min_latency, max_latency)
                if max_latency > min_latency
                else DEGENERATE_NORMALIZED_VALUE
            )
            composite_score = (
                self._weights.capacity * normalized_capacity
                + self._weights.latency * normalized_latency
            )
            scored.append(
                ScoredCandidate(
                    record=record,
                    effective_capacity=capacity,
                    normalized_capacity=normalized_capacity,
                    normalized_latency=normalized_latency,
                    composite_score=composite_score,
                )
            )

        self._log.debug(
            "scoring_complete",
            candidates_scored=len(scored),
            min_score=min(s.composite_score for s in scored),
            max_score=max(s.composite_score for s in scored),
        )

        return scored


def score_candidates(
    records: Sequence[CandidateRecord],
    weights: ScoringWeights | None = None,
) -> list[ScoredCandidate]:
    """Score a batch of records (pure function).

    Args:
        records: Filtered batch.
        weights: Composite score weights.

    Returns:
        ScoredCandidates in input order.
    """
    return CandidateScorer(weights).score(records)
