"""Data models for discovery cycles."""

from dataclasses import dataclass, field
from enum import Enum

from src.feed.models import CandidateRecord
from src.fetch.models import FetchError
from src.ranker.ranker import RankedCandidates


class CycleStatus(str, Enum):
    """Outcome of a completed discovery cycle.

    - RANKED: At least one candidate was ranked
    - EMPTY: The feed was fetched but no candidate was eligible
    - FETCH_FAILED: The feed could not be fetched (or the cycle crashed)
    """

    RANKED = "RANKED"
    EMPTY = "EMPTY"
    FETCH_FAILED = "FETCH_FAILED"


@dataclass(frozen=True)
class CycleResult:
    """Immutable outcome of one fetch-and-rank cycle.

    Attributes:
        cycle_id: Identifier bound to this cycle's logs.
        status: How the cycle ended.
        ranked: Ranked snapshot (empty unless status is RANKED).
        records_parsed: Valid records produced by the parser.
        lines_rejected: Data lines the parser rejected.
        error: Fetch error when status is FETCH_FAILED.
        duration_ms: Wall time of the cycle.
    """

    cycle_id: str
    status: CycleStatus
    ranked: RankedCandidates = field(default_factory=RankedCandidates)
    records_parsed: int = 0
    lines_rejected: int = 0
    error: FetchError | None = None
    duration_ms: float = 0.0

    @property
    def records(self) -> list[CandidateRecord]:
        """Ranked records, best first."""
        return self.ranked.records

    @property
    def succeeded(self) -> bool:
        """Check whether the feed was fetched and processed."""
        return self.status != CycleStatus.FETCH_FAILED
