"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting readable from a SHAKER_* environment variable or .env file
    - get_settings() is cached (lru_cache) — single instance per process
    - api is always a valid host:port pair once loaded

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env support
    - CLI flags are applied as init kwargs, which outrank env and .env values
    - The import file keeps its historical env name SHAKER_IMPORT
"""

from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHAKER_", env_file=".env", case_sensitive=False,
        extra="ignore",
    )

    # Database
    db: Path = Path("shaker.db")
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # API
    api: str = "127.0.0.1:9001"
    token: SecretStr | None = None

    # Legacy import (runs instead of the API when set)
    legacy_import: Path | None = Field(
        None, validation_alias=AliasChoices("SHAKER_IMPORT", "legacy_import"),
    )

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("api")
    @classmethod
    def validate_api_address(cls, v: str) -> str:
        """Require host:port with a port in 1..65535."""
        host, sep, port = v.rpartition(":")
        if not sep or not host:
            raise ValueError("api must be in host:port form")
        if not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"invalid port in api address: {port!r}")
        return v

    @field_validator("token", mode="before")
    @classmethod
    def empty_token_is_none(cls, v):
        if isinstance(v, str) and v == "":
            return None
        return v

    @property
    def database_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.db}"

    @property
    def api_host(self) -> str:
        return self.api.rpartition(":")[0].strip("[]")

    @property
    def api_port(self) -> int:
        return int(self.api.rpartition(":")[2])


@lru_cache
def get_settings() -> Settings:
    return Settings()
