"""HTTP client for the candidate feed with retries and failure isolation."""

import time
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from io import BytesIO

import httpx
import structlog

from src.fetch.config import FetchConfig
from src.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    MAX_RETRY_AFTER_SECONDS,
)
from src.fetch.metrics import FetchMetrics
from src.fetch.models import (
    FetchError,
    FetchErrorClass,
    FetchResult,
    ResponseSizeExceededError,
)
from src.fetch.redact import redact_headers, redact_url


logger = structlog.get_logger()


class FeedFetcher:
    """Fetches the raw candidate feed.

    One logical GET per call, with:
    - Bounded connect/read/write/pool timeouts
    - Optional retry policy with exponential backoff
    - Maximum response size enforcement
    - Blank-body detection

    ``fetch`` never raises; every failure is reported through
    ``FetchResult.error``.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        metrics: FetchMetrics | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            config: Fetch configuration.
            metrics: Optional metrics instance.
            transport: Optional httpx transport (used to stub the network).
        """
        self._config = config or FetchConfig()
        self._metrics = metrics or FetchMetrics.get_instance()
        self._transport = transport
        self._log = logger.bind(component="fetch")

    @property
    def config(self) -> FetchConfig:
        """Get the fetch configuration."""
        return self._config

    def fetch(self) -> FetchResult:
        """Fetch the configured feed URL.

        Returns:
            FetchResult with the body, or with a typed error.
        """
        url = self._config.feed_url
        start_time_ns = time.perf_counter_ns()
        log = self._log.bind(url=redact_url(url))

        headers = self._build_headers()
        result = self._execute_with_retry(url=url, headers=headers, log=log)

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_fetch(
            duration_ms, result.error.error_class if result.error else None
        )

        log.info(
            "fetch_complete",
            status_code=result.status_code,
            bytes=result.body_size,
            duration_ms=round(duration_ms, 2),
            error_class=result.error.error_class.value if result.error else None,
        )

        return result

    def _build_headers(self) -> dict[str, str]:
        """Build request headers."""
        headers: dict[str, str] = {
            "User-Agent": self._config.user_agent,
            "Accept": "text/csv, text/plain, */*",
            "Accept-Encoding": "gzip, deflate",
        }
        headers.update(self._config.headers)
        return headers

    def _execute_with_retry(
        self,
        url: str,
        headers: dict[str, str],
        log: structlog.stdlib.BoundLogger,
    ) -> FetchResult:
        """Execute the request, retrying per the configured policy.

        Args:
            url: URL to fetch.
            headers: Request headers.
            log: Bound logger.

        Returns:
            The last FetchResult obtained.
        """
        policy = self._config.retry_policy
        attempt = 0

        while True:
            result = self._execute_single(url=url, headers=headers, log=log)

            if result.error is None or not policy.should_retry(result.error, attempt):
                return result

            delay_seconds = policy.get_delay_ms(attempt) / 1000.0
            if (
                result.error.error_class == FetchErrorClass.RATE_LIMITED
                and result.error.retry_after
            ):
                delay_seconds = min(result.error.retry_after, MAX_RETRY_AFTER_SECONDS)

            attempt += 1
            self._metrics.record_retry()
            log.debug(
                "retry_attempt",
                attempt=attempt,
                delay_seconds=round(delay_seconds, 3),
                max_retries=policy.max_retries,
                error_class=result.error.error_class.value,
            )
            time.sleep(delay_seconds)

    def _execute_single(
        self,
        url: str,
        headers: dict[str, str],
        log: structlog.stdlib.BoundLogger,
    ) -> FetchResult:
        """Execute a single HTTP request.

        Args:
            url: URL to fetch.
            headers: Request headers.
            log: Bound logger.

        Returns:
            FetchResult from the request.
        """
        log.debug("fetch_attempt", headers=redact_headers(headers))

        try:
            with (
                httpx.Client(
                    timeout=self._config.timeouts.to_httpx(),
                    follow_redirects=True,
                    transport=self._transport,
                ) as client,
                client.stream("GET", url, headers=headers) as response,
            ):
                body = self._read_body_with_limit(response)
                self._metrics.record_attempt(response.status_code, len(body))

                http_error = self._classify_http_error(
                    response.status_code, response.headers
                )
                if http_error is None and not body.strip():
                    http_error = FetchError(
                        error_class=FetchErrorClass.EMPTY_BODY,
                        message="Feed response body is empty",
                        status_code=response.status_code,
                    )

                return FetchResult(
                    status_code=response.status_code,
                    body_bytes=b"" if http_error else body,
                    error=http_error,
                )

        except ResponseSizeExceededError as e:
            return FetchResult.failure(
                FetchError(
                    error_class=FetchErrorClass.RESPONSE_SIZE_EXCEEDED,
                    message=str(e),
                ),
            )

        except httpx.TimeoutException as e:
            return FetchResult.failure(
                FetchError(
                    error_class=FetchErrorClass.NETWORK_TIMEOUT,
                    message=f"Request timed out: {e}",
                ),
            )

        except (httpx.ConnectError, httpx.NetworkError) as e:
            return FetchResult.failure(
                FetchError(
                    error_class=FetchErrorClass.CONNECTION_ERROR,
                    message=f"Connection failed: {e}",
                ),
            )

        except Exception as e:  # noqa: BLE001
            return FetchResult.failure(
                FetchError(
                    error_class=FetchErrorClass.UNKNOWN,
                    message=f"Unexpected error: {e}",
                ),
            )

    def _read_body_with_limit(self, response: httpx.Response) -> bytes:
        """Read response body with size limit.

        Args:
            response: Streaming HTTP response.

        Returns:
            Response body bytes.

        Raises:
            ResponseSizeExceededError: If the size limit is exceeded.
        """
        max_size = self._config.max_response_size_bytes

        content_length = response.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > max_size:
            msg = f"Response size {content_length} exceeds limit {max_size}"
            raise ResponseSizeExceededError(msg)

        buffer = BytesIO()
        total_read = 0
        for chunk in response.iter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
            total_read += len(chunk)
            if total_read > max_size:
                msg = (
                    f"Response size exceeded limit of {max_size} bytes "
                    f"(read {total_read} bytes)"
                )
                raise ResponseSizeExceededError(msg)
            buffer.write(chunk)

        return buffer.getvalue()

    def _classify_http_error(
        self,
        status_code: int,
        headers: httpx.Headers,
    ) -> FetchError | None:
        """Classify HTTP status code as error.

        Args:
            status_code: HTTP status code.
            headers: Response headers.

        Returns:
            FetchError if status indicates error, None otherwise.
        """
        if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            return None

        if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
            return FetchError(
                error_class=FetchErrorClass.RATE_LIMITED,
                message="Rate limited (429 Too Many Requests)",
                status_code=status_code,
                retry_after=self._parse_retry_after(headers.get("retry-after")),
            )

        if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
            return FetchError(
                error_class=FetchErrorClass.HTTP_4XX,
                message=f"Client error ({status_code})",
                status_code=status_code,
            )

        if HTTP_STATUS_SERVER_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
            return FetchError(
                error_class=FetchErrorClass.HTTP_5XX,
                message=f"Server error ({status_code})",
                status_code=status_code,
            )

        # 1xx/3xx that survived redirect following
        return FetchError(
            error_class=FetchErrorClass.UNKNOWN,
            message=f"Unexpected status ({status_code})",
            status_code=status_code,
        )

    def _parse_retry_after(self, value: str | None) -> int | None:
        """Parse Retry-After header value.

        Args:
            value: Header value (seconds or HTTP date).

        Returns:
            Seconds to wait, or None if not parseable.
        """
        if not value:
            return None

        try:
            return int(value)
        except ValueError:
            pass

        try:
            dt = parsedate_to_datetime(value)
            delta = dt - datetime.now(UTC)
            return max(0, int(delta.total_seconds()))
        except (ValueError, TypeError):
            pass

        return None
