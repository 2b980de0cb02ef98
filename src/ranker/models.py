"""Data models for the candidate ranker."""

import math
from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.feed.models import CandidateRecord
from src.ranker.constants import CAPACITY_WEIGHT, LATENCY_WEIGHT


class ScoringWeights(BaseModel):
    """Weights combining the two normalized metrics.

    The weights must sum to 1 so composite scores stay within [0, 1].
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    capacity: Annotated[float, Field(ge=0.0, le=1.0)] = CAPACITY_WEIGHT
    latency: Annotated[float, Field(ge=0.0, le=1.0)] = LATENCY_WEIGHT

    @model_validator(mode="after")
    def validate_sum(self) -> "ScoringWeights":
        """Ensure the weights sum to one."""
        if not math.isclose(self.capacity + self.latency, 1.0, abs_tol=1e-9):
            msg = (
                f"Scoring weights must sum to 1.0, got "
                f"{self.capacity} + {self.latency}"
            )
            raise ValueError(msg)
        return self


@dataclass(frozen=True)
class ScoredCandidate:
    """A CandidateRecord with its batch-relative score.

    Attributes:
        record: The scored record.
        effective_capacity: Throughput divided by (load + 1).
        normalized_capacity: Min-max normalized capacity in [0, 1].
        normalized_latency: Inverted min-max normalized latency in [0, 1].
        composite_score: Weighted combination in [0, 1].
    """

    record: CandidateRecord
    effective_capacity: float
    normalized_capacity: float
    normalized_latency: float
    composite_score: float

    @property
    def host_identifier(self) -> str:
        """Host identifier of the underlying record."""
        return self.record.host_identifier

    def to_dict(self) -> dict[str, float | str]:
        """Convert to dictionary for serialization."""
        return {
            "host_identifier": self.record.host_identifier,
            "effective_capacity": self.effective_capacity,
            "normalized_capacity": self.normalized_capacity,
            "normalized_latency": self.normalized_latency,
            "composite_score": self.composite_score,
        }


@dataclass(frozen=True)
class FilterStats:
    """Counts of records removed by the eligibility filter.

    Attributes:
        records_in: Records given to the filter.
        records_out: Records that passed.
        excluded_region: Records dropped for the excluded region code.
        unreachable: Records dropped for a non-positive latency.
    """

    records_in: int = 0
    records_out: int = 0
    excluded_region: int = 0
    unreachable: int = 0
