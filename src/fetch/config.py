"""Configuration models for the feed fetch layer."""

from typing import Annotated

import httpx
from pydantic import BaseModel, ConfigDict, Field

from src.fetch.constants import (
    DEFAULT_FEED_URL,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_TIMEOUT_SECONDS,
)
from src.fetch.models import RetryPolicy


TimeoutSeconds = Annotated[float, Field(ge=0.1, le=300.0)]


class TimeoutConfig(BaseModel):
    """Per-phase timeouts for a feed request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    connect_seconds: TimeoutSeconds = DEFAULT_TIMEOUT_SECONDS
    read_seconds: TimeoutSeconds = DEFAULT_TIMEOUT_SECONDS
    write_seconds: TimeoutSeconds = DEFAULT_TIMEOUT_SECONDS
    pool_seconds: TimeoutSeconds = DEFAULT_TIMEOUT_SECONDS

    def to_httpx(self) -> httpx.Timeout:
        """Convert to an httpx timeout object."""
        return httpx.Timeout(
            connect=self.connect_seconds,
            read=self.read_seconds,
            write=self.write_seconds,
            pool=self.pool_seconds,
        )


class FetchConfig(BaseModel):
    """Configuration for fetching the candidate feed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    feed_url: Annotated[str, Field(min_length=1)] = DEFAULT_FEED_URL
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        "endpoint-ranker/1.0"
    )
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    max_response_size_bytes: Annotated[int, Field(ge=1024, le=100 * 1024 * 1024)] = (
        DEFAULT_MAX_RESPONSE_SIZE_BYTES
    )
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra headers sent with the feed request"
    )
