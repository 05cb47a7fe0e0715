"""Shared Pydantic models."""

from vector_common.models.credentials import Credentials
from vector_common.models.settings import FileSettings

__all__ = ["Credentials", "FileSettings"]
