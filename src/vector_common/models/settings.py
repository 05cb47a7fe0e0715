"""Optional settings file model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FileSettings(BaseModel):
    """Contents of ``config.json``. Every key is optional."""

    model_config = ConfigDict(extra="ignore")

    api_url: str | None = None
    timeout: float | None = Field(default=None, gt=0)
    max_retries: int | None = Field(default=None, ge=0)
