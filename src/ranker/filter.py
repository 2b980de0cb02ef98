"""Eligibility filter applied before scoring."""

from collections.abc import Iterable

import structlog

from src.feed.constants import DEFAULT_EXCLUDED_REGION_CODE
from src.feed.models import CandidateRecord
from src.ranker.models import FilterStats


logger = structlog.get_logger()


def is_excluded_region(record: CandidateRecord, excluded_region_code: str) -> bool:
    """Check a record's region code against the excluded code, ignoring case."""
    if not excluded_region_code:
        return False
    return record.region_code.casefold() == excluded_region_code.casefold()


def filter_reachable(records: Iterable[CandidateRecord]) -> list[CandidateRecord]:
    """Keep only records with a positive latency measurement."""
    return [r for r in records if r.latency > 0]


def filter_candidates(
    records: Iterable[CandidateRecord],
    excluded_region_code: str = DEFAULT_EXCLUDED_REGION_CODE,
) -> list[CandidateRecord]:
    """Remove excluded-region and unreachable records (pure function).

    Order is preserved and the function is idempotent.

    Args:
        records: Parsed records.
        excluded_region_code: Region code that is never eligible.

    Returns:
        Eligible records.
    """
    return EligibilityFilter(excluded_region_code).apply(records)[0]


class EligibilityFilter:
    """Applies the two hard exclusion rules.

    A record passes only if its region code is not the excluded one and its
    latency is strictly positive.
    """

    def __init__(
        self, excluded_region_code: str = DEFAULT_EXCLUDED_REGION_CODE
    ) -> None:
        """Initialize the filter.

        Args:
            excluded_region_code: Region code that is never eligible.
        """
        self._excluded_region_code = excluded_region_code.strip()
        self._log = logger.bind(component="ranker", subcomponent="filter")

    def apply(
        self, records: Iterable[CandidateRecord]
    ) -> tuple[list[CandidateRecord], FilterStats]:
        """Filter records.

        Args:
            records: Parsed records.

        Returns:
            Tuple of (eligible records, filter statistics).
        """
        kept: list[CandidateRecord] = []
        records_in = 0
        excluded_region = 0
        unreachable = 0

        for record in records:
            records_in += 1
            if is_excluded_region(record, self._excluded_region_code):
                excluded_region += 1
            elif record.latency <= 0:
                unreachable += 1
            else:
                kept.append(record)

        stats = FilterStats(
            records_in=records_in,
            records_out=len(kept),
            excluded_region=excluded_region,
            unreachable=unreachable,
        )

        self._log.debug(
            "filter_complete",
            records_in=stats.records_in,
            records_out=stats.records_out,
            excluded_region=stats.excluded_region,
            unreachable=stats.unreachable,
        )

        return kept, stats
