"""Central configuration for the Vector CLI."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from vector_common.constants import (
    APP_NAME,
    CONFIG_FILE,
    CREDENTIALS_FILE,
    DEFAULT_API_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
)
from vector_common.models.settings import FileSettings


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


class VectorConfig(BaseSettings):
    """Environment-driven configuration resolved once at startup.

    ``VECTOR_CONFIG_DIR``, ``VECTOR_API_KEY``, ``VECTOR_API_URL``,
    ``VECTOR_TIMEOUT`` and ``VECTOR_MAX_RETRIES`` map onto the fields below.
    Values left unset here fall back to ``config.json`` and then to the
    built-in defaults.
    """

    model_config = SettingsConfigDict(env_prefix="VECTOR_", extra="ignore")

    config_dir: Path = Field(default_factory=_default_config_dir)
    api_key: str | None = None
    api_url: str | None = None
    timeout: float | None = Field(default=None, gt=0)
    max_retries: int | None = Field(default=None, ge=0)

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILE

    @property
    def credentials_file(self) -> Path:
        return self.config_dir / CREDENTIALS_FILE

    def load_settings(self) -> FileSettings:
        """Parse ``config.json``; a missing file yields empty settings."""
        if not self.config_file.exists():
            return FileSettings()
        return FileSettings.model_validate_json(self.config_file.read_text())

    def resolve_api_url(self, settings: FileSettings, override: str | None = None) -> str:
        url = override or self.api_url or settings.api_url or DEFAULT_API_URL
        return url.rstrip("/")

    def resolve_timeout(self, settings: FileSettings) -> float:
        if self.timeout is not None:
            return self.timeout
        if settings.timeout is not None:
            return settings.timeout
        return DEFAULT_TIMEOUT

    def resolve_max_retries(self, settings: FileSettings) -> int:
        if self.max_retries is not None:
            return self.max_retries
        if settings.max_retries is not None:
            return settings.max_retries
        return DEFAULT_MAX_RETRIES
