"""API token storage: ``--token`` flag > ``VECTOR_API_KEY`` > credentials file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from vector_cli.errors import AuthError, ConfigError
from vector_common.constants import CONFIG_DIR_MODE, CREDENTIALS_FILE_MODE
from vector_common.models import Credentials

log = logging.getLogger(__name__)

_UNREAD = object()


class CredentialStore:
    """Resolves and persists the bearer token for one invocation.

    The credential file is read at most once; the token itself is never
    logged.
    """

    def __init__(
        self,
        path: Path,
        *,
        flag_token: str | None = None,
        env_token: str | None = None,
    ):
        self.path = path
        self.flag_token = flag_token or None
        self.env_token = env_token or None
        self._file_token: object = _UNREAD

    @property
    def source(self) -> str | None:
        """Where the current token comes from: ``flag``, ``env``, ``file`` or ``None``."""
        if self.flag_token:
            return "flag"
        if self.env_token:
            return "env"
        if self._read_file():
            return "file"
        return None

    def current_token(self) -> str | None:
        return self.flag_token or self.env_token or self._read_file()

    def resolve(self) -> str:
        token = self.current_token()
        if not token:
            raise AuthError()
        return token

    def persist(self, token: str) -> None:
        """Write the token with owner-only permissions, creating the directory."""
        try:
            self.path.parent.mkdir(mode=CONFIG_DIR_MODE, parents=True, exist_ok=True)
            os.chmod(self.path.parent, CONFIG_DIR_MODE)
            payload = Credentials(api_key=token).to_json() + "\n"
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CREDENTIALS_FILE_MODE)
            with os.fdopen(fd, "w") as fh:
                fh.write(payload)
            os.chmod(self.path, CREDENTIALS_FILE_MODE)
        except OSError as exc:
            raise ConfigError(f"Cannot write {self.path}: {exc.strerror or exc}") from exc
        self._file_token = token
        log.debug("Stored API token in %s", self.path)

    def clear(self) -> bool:
        """Remove the stored token; ``False`` when there was nothing stored."""
        if not self._read_file():
            return False
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise ConfigError(f"Cannot remove {self.path}: {exc.strerror or exc}") from exc
        self._file_token = None
        log.debug("Removed %s", self.path)
        return True

    def _read_file(self) -> str | None:
        if self._file_token is _UNREAD:
            self._file_token = self._load()
        return self._file_token  # type: ignore[return-value]

    def _load(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            return Credentials.model_validate_json(self.path.read_text()).api_key or None
        except OSError as exc:
            raise ConfigError(f"Cannot read {self.path}: {exc.strerror or exc}") from exc
        except PydanticValidationError as exc:
            reason = exc.errors()[0]["msg"]
            raise ConfigError(f"Invalid credentials file {self.path}: {reason}") from exc
