"""Settings model for the snapshot REST service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = Path(__file__).parent / "data" / "db.json"

_VALID_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class SnapshotRestSettings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    data_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SNAPSHOT_REST_DATA_URL", "DATA_URL", "data_url"),
    )
    db_path: Path = DEFAULT_DB_PATH
    fallback_db_path: Path = Path("db.json")
    fetch_timeout: float = Field(default=15.0, gt=0)

    api_prefix: str = "/api"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)

    model_config = SettingsConfigDict(
        env_prefix="SNAPSHOT_REST_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("data_url", mode="before")
    @classmethod
    def _blank_url_is_unset(cls, data_url: Optional[str]) -> Optional[str]:
        if data_url is None:
            return None
        data_url = str(data_url).strip()
        return data_url or None

    @field_validator("api_prefix")
    @classmethod
    def _normalize_prefix(cls, api_prefix: str) -> str:
        normalized = "/" + api_prefix.strip().strip("/")
        if normalized == "/":
            raise ValueError("api_prefix must name a path segment, e.g. '/api'.")
        return normalized

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, log_level: str) -> str:
        normalized = str(log_level).upper()
        if normalized not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level {log_level!r}. Expected one of {sorted(_VALID_LOG_LEVELS)}."
            )
        return normalized

    @property
    def candidate_paths(self) -> List[Path]:
        """Local snapshot files in the order they are tried."""
        return [self.db_path, self.fallback_db_path]


@lru_cache(maxsize=1)
def get_settings() -> SnapshotRestSettings:
    """Returns a cached settings object built from the environment."""

    return SnapshotRestSettings()
