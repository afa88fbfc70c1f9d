"""Library Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - timezone is validated against the zoneinfo database at load time

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - JUGGLE_ prefix: the library shares the host application's environment
    - Defaults provided for every setting: importing the library needs no environment
"""

from datetime import tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JUGGLE_", env_file=".env", case_sensitive=False,
    )

    # Pipeline
    juggling_enabled: bool = True
    strict_schema: bool = False

    # Temporal
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        """Fail at load time rather than on the first temporal coercion."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{v}'") from e
        return v

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def tzinfo(self) -> tzinfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    return Settings()
