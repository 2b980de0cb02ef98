"""Data models for update checks."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class UpdateCheckResult(BaseModel):
    """Result of comparing the running version with the latest release.

    Attributes:
        update_available: Whether the latest release is newer.
        latest_version: Latest release version, without a ``v`` prefix.
        current_version: Version that was checked.
        download_url: URL of the release artifact, if one was attached.
        release_notes: Release body text.
        release_date: Publication timestamp as given by the API.
        artifact_size: Artifact size in bytes (0 when unknown).
        error: Human-readable error when the check failed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    update_available: bool = False
    latest_version: str | None = None
    current_version: Annotated[str, Field(min_length=1)]
    download_url: str | None = None
    release_notes: str | None = None
    release_date: str | None = None
    artifact_size: Annotated[int, Field(ge=0)] = 0
    error: str | None = None

    @classmethod
    def failed(cls, current_version: str, message: str) -> "UpdateCheckResult":
        """Result for a check that could not complete."""
        return cls(current_version=current_version, error=message)
