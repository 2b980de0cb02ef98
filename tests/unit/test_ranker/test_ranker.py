"""Unit tests for the candidate ranker."""

from collections.abc import Iterator

import pytest

from src.feed.parser import parse_feed
from src.ranker.metrics import RankerMetrics
from src.ranker.models import FilterStats
from src.ranker.ranker import (
    CandidateRanker,
    RankedCandidates,
    rank_candidates,
    rank_records,
)
from src.ranker.scorer import score_candidates
from tests.helpers.feeds import SAMPLE_FEED, make_record


@pytest.fixture(autouse=True)
def reset_metrics() -> Iterator[None]:
    """Reset the metrics singleton around each test."""
    RankerMetrics.reset()
    yield
    RankerMetrics.reset()


class TestRankCandidates:
    """Tests for the pure ordering step."""

    def test_orders_by_score_descending(self) -> None:
        """Higher composite scores come first."""
        records = [
            make_record(host="slow", latency=150, throughput=100),
            make_record(host="big", latency=150, throughput=300),
            make_record(host="fast", latency=50, throughput=300),
        ]

        ranked = rank_candidates(score_candidates(records))

        assert [r.host_identifier for r in ranked.records] == ["fast", "big", "slow"]

    def test_ties_keep_input_order(self) -> None:
        """Equal scores keep the order of the parsed batch."""
        records = [make_record(host=h) for h in ("first", "second", "third")]

        ranked = rank_candidates(score_candidates(records))

        assert [r.host_identifier for r in ranked.records] == [
            "first",
            "second",
            "third",
        ]

    def test_batch_defaults_to_scored_records(self) -> None:
        """Without an explicit batch, the scored records are used."""
        scored = score_candidates([make_record(host="a")])

        ranked = rank_candidates(scored)

        assert [r.host_identifier for r in ranked.batch] == ["a"]
        assert ranked.filter_stats == FilterStats()


class TestRankedCandidates:
    """Tests for the ranked snapshot."""

    @pytest.fixture
    def ranked(self) -> RankedCandidates:
        """Rank the shared sample feed."""
        return rank_records(parse_feed(SAMPLE_FEED))

    def test_sample_feed_order(self, ranked: RankedCandidates) -> None:
        """Excluded and unreachable hosts are gone; the rest are ordered."""
        assert [r.host_identifier for r in ranked.records] == [
            "beta.opengw.net",
            "alpha.opengw.net",
            "gamma.opengw.net",
        ]

    def test_filter_stats(self, ranked: RankedCandidates) -> None:
        """The snapshot carries what the filter removed."""
        assert ranked.filter_stats.records_in == 5
        assert ranked.filter_stats.excluded_region == 1
        assert ranked.filter_stats.unreachable == 1

    def test_len(self, ranked: RankedCandidates) -> None:
        """Length is the number of ranked candidates."""
        assert len(ranked) == 3
        assert ranked.is_empty is False

    @pytest.mark.parametrize(("n", "expected"), [(0, 0), (1, 1), (2, 2), (3, 3), (10, 3)])
    def test_top_k_clamps(self, ranked: RankedCandidates, n: int, expected: int) -> None:
        """top_k never returns more than the batch holds."""
        assert len(ranked.top_k(n)) == expected

    def test_top_k_negative(self, ranked: RankedCandidates) -> None:
        """A negative count yields nothing."""
        assert ranked.top_k(-1) == []

    def test_top_k_is_prefix(self, ranked: RankedCandidates) -> None:
        """top_k returns the head of the ranking."""
        assert ranked.top_k(2) == ranked.records[:2]

    def test_best(self, ranked: RankedCandidates) -> None:
        """best() is the first ranked record."""
        best = ranked.best()

        assert best is not None
        assert best.host_identifier == "beta.opengw.net"

    def test_percentile_scores(self, ranked: RankedCandidates) -> None:
        """Display scores are the composite scaled to 0-100 and truncated."""
        scores = {r.host_identifier: ranked.percentile_score(r) for r in ranked.records}

        assert scores == {
            "beta.opengw.net": 60,
            "alpha.opengw.net": 40,
            "gamma.opengw.net": 26,
        }

    def test_percentile_score_unknown_host(self, ranked: RankedCandidates) -> None:
        """Hosts outside the batch score 0."""
        assert ranked.percentile_score(make_record(host="nobody.opengw.net")) == 0

    def test_percentile_score_filtered_host(self, ranked: RankedCandidates) -> None:
        """A host removed by the filter scores 0."""
        excluded = make_record(host="delta.opengw.net", region_code="IR", latency=10)

        assert ranked.percentile_score(excluded) == 0


class TestEmptyRanking:
    """Tests for rankings with nothing eligible."""

    def test_empty_input(self) -> None:
        """An empty batch ranks to an empty snapshot."""
        ranked = rank_records([])

        assert ranked.is_empty is True
        assert ranked.best() is None
        assert ranked.top_k(3) == []

    def test_all_filtered(self) -> None:
        """A batch with only ineligible records is empty, not an error."""
        records = [
            make_record(host="a", region_code="IR"),
            make_record(host="b", latency=-1),
        ]

        ranked = rank_records(records)

        assert ranked.is_empty is True
        assert ranked.best() is None


class TestCandidateRanker:
    """Tests for the ranker with metrics."""

    def test_records_metrics(self) -> None:
        """Each pass updates the injected metrics."""
        metrics = RankerMetrics()
        ranker = CandidateRanker(metrics=metrics)

        ranker.rank(parse_feed(SAMPLE_FEED))
        ranker.rank([])

        assert metrics.passes_total == 2
        assert metrics.records_in_total == 5
        assert metrics.ranked_total == 3
        assert metrics.excluded_region_total == 1
        assert metrics.unreachable_total == 1
        assert metrics.empty_passes_total == 1

    def test_uses_singleton_by_default(self) -> None:
        """Without injected metrics, the shared instance is updated."""
        CandidateRanker().rank([make_record()])

        assert RankerMetrics.get_instance().passes_total == 1

    def test_each_pass_is_independent(self) -> None:
        """Ranking a new batch never reuses the previous batch."""
        ranker = CandidateRanker(metrics=RankerMetrics())

        first = ranker.rank([make_record(host="a")])
        second = ranker.rank([make_record(host="b")])

        assert [r.host_identifier for r in first.records] == ["a"]
        assert [r.host_identifier for r in second.records] == ["b"]

    def test_custom_region(self) -> None:
        """The excluded region is configurable per ranker."""
        ranker = CandidateRanker(excluded_region_code="JP", metrics=RankerMetrics())

        ranked = ranker.rank(parse_feed(SAMPLE_FEED))

        assert "alpha.opengw.net" not in [r.host_identifier for r in ranked.records]
        assert "delta.opengw.net" in [r.host_identifier for r in ranked.records]
