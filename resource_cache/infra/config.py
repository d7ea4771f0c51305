"""Configuration loading for resource-cache."""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__


class Settings(BaseSettings):
    """Service settings, read from ``RESOURCE_CACHE_*`` variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="RESOURCE_CACHE_",
        env_file=".env",
        extra="ignore",
    )

    key_prefix: str = Field(
        "/apisix",
        description="Prefix under which every resource directory lives in the backing store",
    )
    load_timeout_seconds: float = Field(
        5.0,
        gt=0.0,
        description="Upper bound for the initial list round-trip of each store",
    )
    watch_history_revisions: int = Field(
        10_000,
        ge=1,
        description="Revisions of change history the in-process backing store keeps for resuming watches",
    )
    reinit_sweeper_enabled: bool = Field(
        True,
        description="Periodically reinitialize stores whose watch stream broke",
    )
    reinit_interval_seconds: float = Field(
        10.0,
        ge=0.01,
        description="Interval between reinit sweeps",
    )
    http_host: str = Field(
        "0.0.0.0",
        description="Bind host for the HTTP server",
        validation_alias=AliasChoices("HOST", "RESOURCE_CACHE_HOST"),
    )
    http_port: int = Field(
        9000,
        ge=1,
        le=65535,
        description="Bind port for the HTTP server",
        validation_alias=AliasChoices("PORT", "RESOURCE_CACHE_PORT"),
    )
    log_level: str = Field("INFO", description="Application log level")
    version: str = Field(__version__, description="Reported by the version endpoint")
    commit_hash: str = Field("unknown", description="Reported by the version endpoint")

    @field_validator("key_prefix")
    @classmethod
    def _strip_trailing_separator(cls, value: str) -> str:
        value = value.rstrip("/")
        if not value:
            raise ValueError("key_prefix must not be empty")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
