"""Shared test fixtures."""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from rich.console import Console

from vector_cli.cli import build_root
from vector_cli.commands import build_registry
from vector_cli.config import AppContext, GlobalOptions, build_context
from vector_cli.registry import EndpointRegistry
from vector_cli.services import dispatcher
from vector_cli.services.output_mode import OutputMode
from vector_cli.services.transport import Transport
from vector_common import VectorConfig

ENV_VARS = (
    "VECTOR_CONFIG_DIR",
    "VECTOR_API_KEY",
    "VECTOR_API_URL",
    "VECTOR_TIMEOUT",
    "VECTOR_MAX_RETRIES",
    "XDG_CONFIG_HOME",
)

BASE = "https://api.builtfast.com/api/v1/vector"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def tmp_config(tmp_path: Path) -> VectorConfig:
    """Return a VectorConfig pointing at a temp config directory."""
    return VectorConfig(config_dir=tmp_path / "vector")


def make_console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None, force_terminal=False)


def output(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


class MockApi:
    """Canned responses behind an ``httpx.MockTransport``; records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._queue: list[Callable[[httpx.Request], httpx.Response]] = []

    def respond(
        self,
        status: int = 200,
        json: Any = None,
        *,
        content: bytes = b"",
        times: int = 1,
    ) -> "MockApi":
        def handler(request: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status, json=json)
            return httpx.Response(status, content=content)

        self._queue.extend([handler] * times)
        return self

    def fail(self, exc_type: type[httpx.HTTPError], times: int = 1) -> "MockApi":
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc_type("simulated failure", request=request)

        self._queue.extend([handler] * times)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if not self._queue:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        return self._queue.pop(0)(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def api() -> MockApi:
    return MockApi()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def make_transport(api: MockApi, sleeps: list[float]) -> Callable[..., Transport]:
    def factory(max_retries: int = 3, timeout: float = 5.0) -> Transport:
        return Transport(
            timeout=timeout,
            max_retries=max_retries,
            http_transport=api.transport,
            sleep=sleeps.append,
        )

    return factory


@pytest.fixture
def make_context(tmp_config: VectorConfig, make_transport) -> Callable[..., AppContext]:
    """AppContext with a fixed output mode, mock transport and in-memory consoles."""

    def factory(
        mode: OutputMode = OutputMode.TABLE,
        *,
        token: str | None = "test-token",
        compact: bool = False,
        max_retries: int = 3,
    ) -> AppContext:
        return build_context(
            GlobalOptions(token=token, compact=compact),
            mode,
            config=tmp_config,
            transport=make_transport(max_retries=max_retries),
            console=make_console(),
            err_console=make_console(),
        )

    return factory


@dataclass
class CliResult:
    exit_code: int
    stdout: str
    stderr: str


@pytest.fixture(scope="session")
def registry() -> EndpointRegistry:
    return build_registry()


@pytest.fixture
def run_cli(tmp_config: VectorConfig, make_transport, registry: EndpointRegistry):
    """Invoke the full dispatcher with argv; stdout is a pipe unless ``terminal``."""

    def invoke(*argv: str, terminal: bool = False, max_retries: int = 3) -> CliResult:
        out, err = make_console(), make_console()

        def context_factory(options: GlobalOptions, mode: OutputMode) -> AppContext:
            return build_context(
                options,
                mode,
                config=tmp_config,
                transport=make_transport(max_retries=max_retries),
                console=out,
                err_console=err,
            )

        code = dispatcher.run(
            list(argv),
            root=build_root(registry),
            registry=registry,
            context_factory=context_factory,
            stdout_is_terminal=terminal,
            console=out,
            err_console=err,
        )
        return CliResult(code, output(out), output(err))

    return invoke
