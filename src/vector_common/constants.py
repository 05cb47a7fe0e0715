"""Shared constants for the Vector CLI."""

APP_NAME = "vector"

# API
DEFAULT_API_URL = "https://api.builtfast.com"
API_PREFIX = "/api/v1/vector"

# Config directory layout (overridable via VectorConfig / env vars)
CONFIG_FILE = "config.json"
CREDENTIALS_FILE = "credentials.json"
CONFIG_DIR_MODE = 0o700
CREDENTIALS_FILE_MODE = 0o600

# Transport
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
BACKOFF_MULTIPLIER = 0.5
BACKOFF_MAX = 8.0

# Process exit codes (external contract for scripts)
EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_AUTH_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_NOT_FOUND = 4
EXIT_NETWORK_ERROR = 5
EXIT_INTERRUPTED = 130
