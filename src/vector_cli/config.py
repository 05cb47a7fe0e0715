"""Per-invocation context: settings, credentials, transport and output mode.

Everything is resolved once in :func:`build_context` and passed down
explicitly; nothing here is cached at module level.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console

from vector_cli.credentials import CredentialStore
from vector_cli.errors import ConfigError
from vector_cli.services.output_mode import OutputMode
from vector_cli.services.transport import Transport
from vector_common import VectorConfig


@dataclass
class GlobalOptions:
    """Options accepted on every command, extracted before parsing."""

    json: bool | None = None
    token: str | None = None
    api_url: str | None = None
    verbose: bool = False
    compact: bool = False


@dataclass
class AppContext:
    config: VectorConfig
    credentials: CredentialStore
    transport: Transport
    output_mode: OutputMode
    api_url: str
    pretty: bool = True
    console: Console = field(default_factory=Console)
    err_console: Console = field(default_factory=lambda: Console(stderr=True))

    def close(self) -> None:
        self.transport.close()


def load_config() -> VectorConfig:
    try:
        return VectorConfig()
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        name = "VECTOR_" + "_".join(str(part) for part in error["loc"]).upper()
        raise ConfigError(f"Invalid {name}: {error['msg']}") from exc


def build_context(
    options: GlobalOptions,
    mode: OutputMode,
    *,
    config: VectorConfig | None = None,
    transport: Transport | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> AppContext:
    """Resolve settings, credentials and transport for one invocation."""
    config = config or load_config()
    try:
        settings = config.load_settings()
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        raise ConfigError(f"Invalid {config.config_file}: {error['msg']}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {config.config_file}: {exc.strerror or exc}") from exc

    api_url = _check_api_url(config.resolve_api_url(settings, options.api_url))
    credentials = CredentialStore(
        config.credentials_file,
        flag_token=options.token,
        env_token=config.api_key,
    )
    if transport is None:
        transport = Transport(
            timeout=config.resolve_timeout(settings),
            max_retries=config.resolve_max_retries(settings),
        )
    return AppContext(
        config=config,
        credentials=credentials,
        transport=transport,
        output_mode=mode,
        api_url=api_url,
        pretty=not options.compact,
        console=console or Console(),
        err_console=err_console or Console(stderr=True),
    )


def _check_api_url(url: str) -> str:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ConfigError(f"Invalid API URL '{url}': {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigError(f"Invalid API URL '{url}': expected http:// or https:// with a host")
    return url
