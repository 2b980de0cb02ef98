"""Checks a release metadata endpoint for a newer version."""

import httpx
import structlog

from src.fetch.constants import HTTP_STATUS_OK_MAX, HTTP_STATUS_OK_MIN
from src.update.config import UpdateConfig
from src.update.models import UpdateCheckResult
from src.update.version import is_newer_version


logger = structlog.get_logger()


class UpdateChecker:
    """Queries a GitHub-style "latest release" endpoint.

    ``check`` never raises; failures come back as an UpdateCheckResult with
    ``error`` set.
    """

    def __init__(
        self,
        config: UpdateConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            config: Update configuration.
            transport: Optional httpx transport (used to stub the network).
        """
        self._config = config or UpdateConfig()
        self._transport = transport
        self._log = logger.bind(component="update", subcomponent="checker")

    def check(self, current_version: str) -> UpdateCheckResult:
        """Compare ``current_version`` with the latest published release.

        Args:
            current_version: Version of the running installation.

        Returns:
            The comparison result.
        """
        try:
            with httpx.Client(
                timeout=httpx.Timeout(
                    self._config.read_timeout_seconds,
                    connect=self._config.connect_timeout_seconds,
                ),
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = client.get(
                    self._config.releases_api_url,
                    headers={
                        "Accept": "application/vnd.github.v3+json",
                        "User-Agent": self._config.user_agent,
                    },
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._log.warning("update_check_failed", error=str(e))
            return UpdateCheckResult.failed(current_version, f"Request failed: {e}")

        if not HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
            self._log.warning("update_check_failed", status_code=response.status_code)
            return UpdateCheckResult.failed(current_version, f"HTTP {response.status_code}")

        try:
            release = response.json()
        except ValueError as e:
            self._log.warning("update_check_failed", error=str(e))
            return UpdateCheckResult.failed(current_version, "Invalid release metadata")

        if not isinstance(release, dict):
            return UpdateCheckResult.failed(current_version, "Invalid release metadata")

        result = self._build_result(release, current_version)
        self._log.info(
            "update_check_complete",
            current_version=current_version,
            latest_version=result.latest_version,
            update_available=result.update_available,
        )
        return result

    def _build_result(
        self, release: dict[str, object], current_version: str
    ) -> UpdateCheckResult:
        """Turn release JSON into an UpdateCheckResult."""
        latest_version = str(release.get("tag_name") or "").strip().removeprefix("v")
        if not latest_version:
            return UpdateCheckResult.failed(current_version, "Release has no tag")

        download_url: str | None = None
        artifact_size = 0
        assets = release.get("assets")
        for asset in assets if isinstance(assets, list) else []:
            if not isinstance(asset, dict):
                continue
            if str(asset.get("name", "")).endswith(self._config.artifact_suffix):
                raw_url = asset.get("browser_download_url")
                download_url = str(raw_url) if raw_url else None
                size = asset.get("size")
                artifact_size = size if isinstance(size, int) and size > 0 else 0
                break

        return UpdateCheckResult(
            update_available=is_newer_version(latest_version, current_version),
            latest_version=latest_version,
            current_version=current_version,
            download_url=download_url,
            release_notes=str(release.get("body") or ""),
            release_date=str(release.get("published_at") or ""),
            artifact_size=artifact_size,
        )
