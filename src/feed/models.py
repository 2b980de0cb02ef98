"""Data models for parsed feed records."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class LatencyStatus(str, Enum):
    """What a record's latency value actually means.

    - MEASURED: A positive round-trip time in milliseconds
    - UNREACHABLE: The feed reported a negative sentinel (timed out)
    - UNKNOWN: The field was missing, blank, non-numeric or zero
    """

    MEASURED = "MEASURED"
    UNREACHABLE = "UNREACHABLE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_latency(cls, latency: int) -> "LatencyStatus":
        """Classify an integer latency value."""
        if latency > 0:
            return cls.MEASURED
        if latency < 0:
            return cls.UNREACHABLE
        return cls.UNKNOWN


class CandidateRecord(BaseModel):
    """One discoverable endpoint described by a feed line.

    Attributes:
        host_identifier: Host name carrying the canonical suffix.
        address: Network address of the endpoint.
        region_name: Long region (country) name.
        region_code: Two-letter region code, used for exclusion.
        throughput: Raw capacity metric in bits per second.
        load: Number of concurrent sessions on the endpoint.
        latency: Round-trip time in ms; values <= 0 are never ranked.
        latency_status: Meaning of ``latency``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host_identifier: Annotated[str, Field(min_length=1)]
    address: Annotated[str, Field(min_length=1)]
    region_name: str = ""
    region_code: str = ""
    throughput: Annotated[int, Field(ge=0)] = 0
    load: Annotated[int, Field(ge=0)] = 0
    latency: int = 0
    latency_status: LatencyStatus = LatencyStatus.UNKNOWN

    @property
    def is_reachable(self) -> bool:
        """Check whether the record has a usable latency measurement."""
        return self.latency > 0

    @property
    def effective_capacity(self) -> float:
        """Throughput per session, counting the caller's own session."""
        return self.throughput / (self.load + 1)


class ParseResult(BaseModel):
    """Records parsed from one feed body plus line accounting.

    Attributes:
        records: Valid records in source order.
        lines_total: Non-blank lines seen.
        lines_skipped: Header and metadata lines.
        lines_rejected: Data lines that failed validation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    records: list[CandidateRecord] = Field(default_factory=list)
    lines_total: Annotated[int, Field(ge=0)] = 0
    lines_skipped: Annotated[int, Field(ge=0)] = 0
    lines_rejected: Annotated[int, Field(ge=0)] = 0
