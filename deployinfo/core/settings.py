from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
)


class VersionSettings(BaseSettings):
    """The only settings read while serving requests."""

    # Override for the deployed version; empty string counts as unset
    VERSION: str | None = None
    VERSION_FILE: Path = Path("VERSION")

    model_config = _ENV_CONFIG


class Settings(VersionSettings):
    HOST: str = "0.0.0.0"
    PORT: int = Field(8080, ge=0, le=65535)

    SHUTDOWN_GRACE_SECONDS: float = Field(30.0, ge=0)
    KEEP_ALIVE_SECONDS: int = Field(60, ge=1)

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = _ENV_CONFIG


def get_version_settings() -> VersionSettings:
    # Not cached: the version override must be re-read on every request.
    # Startup-only settings are left out so a bad PORT etc. can't break /info.
    return VersionSettings()
