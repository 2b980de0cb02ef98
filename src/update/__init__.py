"""Release update check and artifact download."""

from src.update.checker import UpdateChecker
from src.update.config import DEFAULT_RELEASES_API_URL, UpdateConfig
from src.update.downloader import UpdateDownloader
from src.update.models import UpdateCheckResult
from src.update.version import compare_versions, is_newer_version, parse_version


__all__ = [
    "DEFAULT_RELEASES_API_URL",
    "UpdateCheckResult",
    "UpdateChecker",
    "UpdateConfig",
    "UpdateDownloader",
    "compare_versions",
    "is_newer_version",
    "parse_version",
]
