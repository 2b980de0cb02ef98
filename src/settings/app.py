"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.feed.constants import DEFAULT_EXCLUDED_REGION_CODE, HOST_SUFFIX
from src.fetch.config import FetchConfig, TimeoutConfig
from src.fetch.constants import DEFAULT_FEED_URL, DEFAULT_MAX_RESPONSE_SIZE_BYTES
from src.fetch.models import RetryPolicy
from src.update.config import DEFAULT_RELEASES_API_URL, UpdateConfig


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Every field can be overridden with an ``ENDPOINT_RANKER_``-prefixed
    environment variable or a ``.env`` file entry.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENDPOINT_RANKER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    feed_url: Annotated[str, Field(min_length=1)] = DEFAULT_FEED_URL
    excluded_region_code: str = DEFAULT_EXCLUDED_REGION_CODE
    host_suffix: Annotated[str, Field(min_length=1)] = HOST_SUFFIX
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        "endpoint-ranker/1.0"
    )
    timeout_seconds: Annotated[float, Field(ge=1.0, le=300.0)] = 30.0
    feed_max_retries: Annotated[int, Field(ge=0, le=10)] = 0
    max_response_size_bytes: Annotated[
        int, Field(ge=1024, le=100 * 1024 * 1024)
    ] = DEFAULT_MAX_RESPONSE_SIZE_BYTES
    releases_api_url: Annotated[str, Field(min_length=1)] = DEFAULT_RELEASES_API_URL
    artifact_suffix: Annotated[str, Field(min_length=1)] = ".apk"
    history_path: Path | None = None

    def fetch_config(self) -> FetchConfig:
        """Build the fetch layer configuration from these settings."""
        return FetchConfig(
            feed_url=self.feed_url,
            user_agent=self.user_agent,
            timeouts=TimeoutConfig(
                connect_seconds=self.timeout_seconds,
                read_seconds=self.timeout_seconds,
                write_seconds=self.timeout_seconds,
                pool_seconds=self.timeout_seconds,
            ),
            max_response_size_bytes=self.max_response_size_bytes,
            retry_policy=RetryPolicy(max_retries=self.feed_max_retries),
        )

    def update_config(self) -> UpdateConfig:
        """Build the update-check configuration from these settings."""
        return UpdateConfig(
            releases_api_url=self.releases_api_url,
            artifact_suffix=self.artifact_suffix,
            user_agent=self.user_agent,
        )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
