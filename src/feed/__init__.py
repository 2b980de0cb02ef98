"""Candidate feed parsing.

Turns the flat CSV-like feed into CandidateRecords, skipping metadata and
header lines and isolating failures to the offending line.
"""

from src.feed.models import CandidateRecord, LatencyStatus, ParseResult
from src.feed.parser import (
    FeedLineError,
    FeedParser,
    fix_host_suffix,
    parse_feed,
    parse_int,
)


__all__ = [
    "CandidateRecord",
    "FeedLineError",
    "FeedParser",
    "LatencyStatus",
    "ParseResult",
    "fix_host_suffix",
    "parse_feed",
    "parse_int",
]
