"""Vector Common: shared constants, settings and models for the Vector CLI."""

from vector_common.config import VectorConfig
from vector_common.constants import (
    API_PREFIX,
    APP_NAME,
    DEFAULT_API_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    EXIT_AUTH_ERROR,
    EXIT_GENERAL_ERROR,
    EXIT_NETWORK_ERROR,
    EXIT_NOT_FOUND,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from vector_common.models.credentials import Credentials
from vector_common.models.settings import FileSettings

__all__ = [
    "API_PREFIX",
    "APP_NAME",
    "Credentials",
    "DEFAULT_API_URL",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "EXIT_AUTH_ERROR",
    "EXIT_GENERAL_ERROR",
    "EXIT_NETWORK_ERROR",
    "EXIT_NOT_FOUND",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "FileSettings",
    "VectorConfig",
]
