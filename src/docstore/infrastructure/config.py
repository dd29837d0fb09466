"""Configuration management for the document store."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


JOURNAL_SUFFIX = ".swp"


class CollectionConfig(BaseModel):
    """Collection configuration."""

    name: str = Field(min_length=1, description="Collection name, unique within a store")


class JournalConfig(BaseModel):
    """Journal configuration."""

    sync_mode: Literal["fsync", "flush", "none"] = Field(
        default="flush", description="How each appended record is pushed to disk"
    )


class StoreConfig(BaseModel):
    """Store configuration."""

    name: str = Field(default="store", min_length=1, description="Store name")
    filename: Path | None = Field(
        default=None, description="Snapshot file path; the journal lives beside it"
    )
    journal: JournalConfig = Field(default_factory=JournalConfig)

    @property
    def journal_path(self) -> Path | None:
        """Return the journal path (`<filename>.swp`), or None when unpersisted."""
        if self.filename is None:
            return None
        return self.filename.with_name(self.filename.name + JOURNAL_SUFFIX)


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="docstore", description="Service name for tracing")


class Settings(BaseSettings):
    """Process-level settings, read from ``DOCSTORE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSTORE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    store: StoreConfig = Field(default_factory=StoreConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the snapshot file's parent directory exists."""
        if self.store.filename is not None:
            self.store.filename.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    settings = Settings()
    settings.ensure_directories()
    return settings
