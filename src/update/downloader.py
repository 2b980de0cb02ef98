"""Streams a release artifact to disk with progress reporting."""

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

import httpx
import structlog

from src.fetch.constants import DEFAULT_CHUNK_SIZE, HTTP_STATUS_OK_MAX, HTTP_STATUS_OK_MIN
from src.update.config import UpdateConfig


logger = structlog.get_logger()

ProgressCallback = Callable[[int], None]
CompleteCallback = Callable[[bool, str | None], None]


class UpdateDownloader:
    """Downloads an artifact to a destination path.

    Progress (0-100) is reported only when the server sends a content
    length, and only when the integer percentage changes. ``on_complete``
    is called exactly once with ``(success, error_message)``.
    """

    def __init__(
        self,
        config: UpdateConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the downloader.

        Args:
            config: Update configuration.
            transport: Optional httpx transport (used to stub the network).
        """
        self._config = config or UpdateConfig()
        self._transport = transport
        self._log = logger.bind(component="update", subcomponent="downloader")

    def download(
        self,
        url: str,
        destination: Path,
        on_progress: ProgressCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> bool:
        """Download ``url`` to ``destination``.

        The file is written next to the destination and renamed into place,
        so a failed download never leaves a partial artifact behind.

        Args:
            url: Artifact URL.
            destination: Final file path.
            on_progress: Called with the percentage downloaded.
            on_complete: Called once when the download ends.

        Returns:
            True if the artifact was written.
        """
        error = self._download_to(url, destination, on_progress)
        success = error is None

        if success:
            self._log.info("download_complete", destination=str(destination))
        else:
            self._log.warning("download_failed", error=error)

        if on_complete is not None:
            on_complete(success, error)
        return success

    def submit(
        self,
        url: str,
        destination: Path,
        executor: ThreadPoolExecutor,
        on_progress: ProgressCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> "Future[bool]":
        """Run ``download`` on an executor and return its future."""
        return executor.submit(self.download, url, destination, on_progress, on_complete)

    def _download_to(
        self,
        url: str,
        destination: Path,
        on_progress: ProgressCallback | None,
    ) -> str | None:
        """Stream the body to disk.

        Returns:
            None on success, otherwise an error message.
        """
        partial = destination.with_name(destination.name + ".part")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with (
                httpx.Client(
                    timeout=httpx.Timeout(
                        self._config.read_timeout_seconds,
                        connect=self._config.connect_timeout_seconds,
                    ),
                    follow_redirects=True,
                    transport=self._transport,
                ) as client,
                client.stream(
                    "GET", url, headers={"User-Agent": self._config.user_agent}
                ) as response,
            ):
                if not HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
                    return f"Download failed: HTTP {response.status_code}"

                content_length = response.headers.get("content-length")
                total = int(content_length) if content_length and content_length.isdigit() else 0
                self._write_body(response, partial, total, on_progress)

            partial.replace(destination)
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            return f"Download error: {e}"
        except Exception as e:  # noqa: BLE001
            return f"Unexpected download error: {e}"
        finally:
            partial.unlink(missing_ok=True)

        return None

    def _write_body(
        self,
        response: httpx.Response,
        partial: Path,
        total: int,
        on_progress: ProgressCallback | None,
    ) -> None:
        """Write the streamed body, reporting percentage changes."""
        received = 0
        last_percent = -1
        with partial.open("wb") as output:
            for chunk in response.iter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
                output.write(chunk)
                received += len(chunk)
                if total <= 0 or on_progress is None:
                    continue
                percent = min(received * 100 // total, 100)
                if percent != last_percent:
                    last_percent = percent
                    on_progress(percent)
