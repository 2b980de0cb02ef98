"""Candidate ranker.

Filters parsed candidates, scores them by batch-relative capacity and
latency, and produces deterministic, immutable ranked snapshots.
"""

from src.ranker.constants import CAPACITY_WEIGHT, LATENCY_WEIGHT
from src.ranker.filter import EligibilityFilter, filter_candidates, filter_reachable
from src.ranker.metrics import RankerMetrics
from src.ranker.models import FilterStats, ScoredCandidate, ScoringWeights
from src.ranker.ranker import (
    CandidateRanker,
    RankedCandidates,
    rank_candidates,
    rank_records,
)
from src.ranker.scorer import CandidateScorer, effective_capacity, score_candidates


__all__ = [
    "CAPACITY_WEIGHT",
    "LATENCY_WEIGHT",
    "CandidateRanker",
    "CandidateScorer",
    "EligibilityFilter",
    "FilterStats",
    "RankedCandidates",
    "RankerMetrics",
    "ScoredCandidate",
    "ScoringWeights",
    "effective_capacity",
    "filter_candidates",
    "filter_reachable",
    "rank_candidates",
    "rank_records",
    "score_candidates",
]
