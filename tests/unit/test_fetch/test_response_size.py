"""Unit tests for fetch configuration and result models."""

import httpx
import pytest

from src.fetch.config import FetchConfig, TimeoutConfig
from src.fetch.constants import DEFAULT_MAX_RESPONSE_SIZE_BYTES
from src.fetch.models import FetchError, FetchErrorClass, FetchResult


class TestFetchConfig:
    """Tests for FetchConfig defaults and validation."""

    def test_default_max_size(self) -> None:
        """Default limit comes from the constants module."""
        assert FetchConfig().max_response_size_bytes == DEFAULT_MAX_RESPONSE_SIZE_BYTES

    def test_min_max_size_validation(self) -> None:
        """Limits below 1 KB are rejected."""
        assert FetchConfig(max_response_size_bytes=1024).max_response_size_bytes == 1024

        with pytest.raises(ValueError):
            FetchConfig(max_response_size_bytes=100)

    def test_unknown_fields_rejected(self) -> None:
        """Typos in configuration fail loudly."""
        with pytest.raises(ValueError):
            FetchConfig(feed_ur="https://example.com/feed.csv")  # type: ignore[call-arg]

    def test_default_timeouts_are_thirty_seconds(self) -> None:
        """Every phase defaults to a 30 second bound."""
        timeout = FetchConfig().timeouts.to_httpx()

        assert isinstance(timeout, httpx.Timeout)
        assert timeout.connect == 30.0
        assert timeout.read == 30.0
        assert timeout.write == 30.0
        assert timeout.pool == 30.0

    def test_custom_timeouts(self) -> None:
        """Per-phase timeouts are passed through."""
        timeouts = TimeoutConfig(connect_seconds=2.0, read_seconds=5.0)
        timeout = timeouts.to_httpx()

        assert timeout.connect == 2.0
        assert timeout.read == 5.0


class TestFetchResult:
    """Tests for FetchResult helpers."""

    def test_success(self) -> None:
        """A 2xx result without error is a success."""
        result = FetchResult(
            status_code=200, body_bytes=b"a,b"
        )

        assert result.is_success is True
        assert result.body_size == 3
        assert result.text == "a,b"

    def test_failure_has_no_body(self) -> None:
        """failure() builds an empty result carrying the error status."""
        error = FetchError(
            error_class=FetchErrorClass.HTTP_5XX,
            message="Server error (503)",
            status_code=503,
        )
        result = FetchResult.failure(error)

        assert result.is_success is False
        assert result.status_code == 503
        assert result.body_bytes == b""
        assert result.error == error

    def test_failure_without_status(self) -> None:
        """Transport failures have status code 0."""
        error = FetchError(
            error_class=FetchErrorClass.CONNECTION_ERROR, message="refused"
        )

        assert FetchResult.failure(error).status_code == 0

    def test_text_replaces_invalid_utf8(self) -> None:
        """Undecodable bytes do not raise."""
        result = FetchResult(
            status_code=200, body_bytes=b"ok\xff"
        )

        assert result.text.startswith("ok")
