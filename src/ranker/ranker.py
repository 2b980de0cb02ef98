"""Candidate ranker and the immutable ranked snapshot."""

import time
from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from src.feed.constants import DEFAULT_EXCLUDED_REGION_CODE
from src.feed.models import CandidateRecord
from src.ranker.constants import DEFAULT_TOP_K, DISPLAY_SCORE_SCALE
from src.ranker.filter import EligibilityFilter
from src.ranker.metrics import RankerMetrics
from src.ranker.models import FilterStats, ScoredCandidate, ScoringWeights
from src.ranker.scorer import CandidateScorer


logger = structlog.get_logger()


@dataclass(frozen=True)
class RankedCandidates:
    """Immutable result of one ranking pass.

    Attributes:
        scored: Scored candidates, best first.
        batch: The filtered batch the scores were computed from.
        weights: Weights used for the composite score.
        filter_stats: What the eligibility filter removed.
    """

    scored: tuple[ScoredCandidate, ...] = ()
    batch: tuple[CandidateRecord, ...] = ()
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    filter_stats: FilterStats = field(default_factory=FilterStats)

    def __len__(self) -> int:
        return len(self.scored)

    @property
    def records(self) -> list[CandidateRecord]:
        """Ranked records, best first."""
        return [s.record for s in self.scored]

    @property
    def is_empty(self) -> bool:
        """Check whether no candidate survived filtering."""
        return not self.scored

    def top_k(self, n: int = DEFAULT_TOP_K) -> list[CandidateRecord]:
        """Return the first ``n`` ranked records.

        Args:
            n: Number of records wanted; clamped to [0, len(self)].

        Returns:
            Up to ``n`` records, best first.
        """
        return [s.record for s in self.scored[: max(n, 0)]]

    def best(self) -> CandidateRecord | None:
        """Return the highest ranked record, or None if the batch is empty."""
        if not self.scored:
            return None
        return self.scored[0].record

    def percentile_score(self, candidate: CandidateRecord) -> int:
        """Express a candidate's composite score as an integer 0-100.

        Scores are recomputed from the filtered batch rather than read from
        ``scored`` and matched by host identifier.

        Args:
            candidate: Record to look up.

        Returns:
            Display score, 0 when the host is not part of the batch.
        """
        for scored in CandidateScorer(self.weights).score(self.batch):
            if scored.host_identifier == candidate.host_identifier:
                return int(scored.composite_score * DISPLAY_SCORE_SCALE)
        return 0


def rank_candidates(
    scored: Sequence[ScoredCandidate],
    batch: Sequence[CandidateRecord] | None = None,
    weights: ScoringWeights | None = None,
    filter_stats: FilterStats | None = None,
) -> RankedCandidates:
    """Order scored candidates by composite score, best first (pure function).

    The sort is stable, so equal scores keep their input order.

    Args:
        scored: Scored candidates.
        batch: Filtered batch the scores came from; derived from ``scored``
            when omitted.
        weights: Weights used for scoring.
        filter_stats: Statistics from the eligibility filter.

    Returns:
        Immutable ranked snapshot.
    """
    ordered = sorted(scored, key=lambda s: s.composite_score, reverse=True)
    return RankedCandidates(
        scored=tuple(ordered),
        batch=tuple(batch) if batch is not None else tuple(s.record for s in scored),
        weights=weights or ScoringWeights(),
        filter_stats=filter_stats or FilterStats(),
    )


class CandidateRanker:
    """Runs filter -> score -> rank over a parsed batch.

    Stateless apart from its configuration; every call produces a new
    RankedCandidates snapshot.
    """

    def __init__(
        self,
        excluded_region_code: str = DEFAULT_EXCLUDED_REGION_CODE,
        weights: ScoringWeights | None = None,
        metrics: RankerMetrics | None = None,
    ) -> None:
        """Initialize the ranker.

        Args:
            excluded_region_code: Region code that is never eligible.
            weights: Composite score weights.
            metrics: Optional metrics instance.
        """
        self._filter = EligibilityFilter(excluded_region_code)
        self._scorer = CandidateScorer(weights)
        self._metrics = metrics or RankerMetrics.get_instance()
        self._log = logger.bind(component="ranker")

    def rank(self, records: Sequence[CandidateRecord]) -> RankedCandidates:
        """Filter, score and order a batch of parsed records.

        Args:
            records: Parsed records in any order.

        Returns:
            Immutable ranked snapshot; empty when nothing is eligible.
        """
        start = time.perf_counter()

        batch, filter_stats = self._filter.apply(records)
        scored = self._scorer.score(batch)
        ranked = rank_candidates(
            scored,
            batch=batch,
            weights=self._scorer.weights,
            filter_stats=filter_stats,
        )

        duration_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_pass(
            records_in=len(records),
            filter_stats=filter_stats,
            scores=[s.composite_score for s in ranked.scored],
            duration_ms=duration_ms,
        )

        self._log.info(
            "ranking_complete",
            records_in=len(records),
            excluded_region=filter_stats.excluded_region,
            unreachable=filter_stats.unreachable,
            ranked=len(ranked),
            top=[
                {
                    "host": s.host_identifier,
                    "score": round(s.composite_score, 3),
                    "effective_mbps": round(s.effective_capacity / 1_000_000, 1),
                    "latency_ms": s.record.latency,
                }
                for s in ranked.scored[:DEFAULT_TOP_K]
            ],
        )

        return ranked


def rank_records(
    records: Sequence[CandidateRecord],
    excluded_region_code: str = DEFAULT_EXCLUDED_REGION_CODE,
    weights: ScoringWeights | None = None,
) -> RankedCandidates:
    """Filter, score and rank records (pure convenience function).

    Args:
        records: Parsed records.
        excluded_region_code: Region code that is never eligible.
        weights: Composite score weights.

    Returns:
        Immutable ranked snapshot.
    """
    return CandidateRanker(
        excluded_region_code=excluded_region_code,
        weights=weights,
        metrics=RankerMetrics(),
    ).rank(records)
