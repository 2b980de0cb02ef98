"""Configuration for the update check."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_RELEASES_API_URL = (
    "https://api.github.com/repos/mahdigholamipak/My-Smart-VPN/releases/latest"
)


class UpdateConfig(BaseModel):
    """Where to look for releases and which asset to download."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    releases_api_url: Annotated[str, Field(min_length=1)] = DEFAULT_RELEASES_API_URL
    artifact_suffix: Annotated[str, Field(min_length=1)] = ".apk"
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        "endpoint-ranker/1.0"
    )
    connect_timeout_seconds: Annotated[float, Field(ge=0.1, le=300.0)] = 30.0
    read_timeout_seconds: Annotated[float, Field(ge=0.1, le=300.0)] = 60.0
