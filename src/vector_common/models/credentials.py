"""On-disk credential model."""

from __future__ import annotations

from pydantic import BaseModel


class Credentials(BaseModel):
    """Contents of ``credentials.json``."""

    api_key: str | None = None

    def to_json(self) -> str:
        return self.model_dump_json(indent=2, exclude_none=True)
