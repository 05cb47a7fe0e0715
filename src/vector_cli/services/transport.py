"""HTTP execution with a bounded timeout and retry/backoff policy.

Connection failures, timeouts and 5xx responses are retried with exponential
backoff. 4xx responses are returned as-is on the first attempt. When the
retry budget runs out on a 5xx, the last response is returned so the
classifier sees the real status and error body.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from vector_cli.errors import ConfigError, ResponseFormatError, TransportError
from vector_cli.services.request_builder import OutgoingRequest
from vector_common.constants import (
    BACKOFF_MAX,
    BACKOFF_MULTIPLIER,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
)

log = logging.getLogger(__name__)

RETRYABLE = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


@dataclass
class ApiResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except ValueError as exc:
            raise ResponseFormatError(f"Invalid JSON in response: {exc}") from exc


class _ServerError(Exception):
    """Internal signal that a 5xx response should be retried."""

    def __init__(self, response: ApiResponse):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    wait = state.next_action.sleep if state.next_action else 0.0
    log.info("Attempt %d failed (%s); retrying in %.1fs", state.attempt_number, exc, wait)


class Transport:
    """Sends :class:`OutgoingRequest` objects through an ``httpx.Client``."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        *,
        http_transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.timeout = timeout
        self.max_retries = max_retries
        self._sleep = sleep
        self._client = httpx.Client(timeout=timeout, transport=http_transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def execute(self, request: OutgoingRequest) -> ApiResponse:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=BACKOFF_MULTIPLIER, max=BACKOFF_MAX),
            retry=retry_if_exception_type((*RETRYABLE, _ServerError)),
            before_sleep=_log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        try:
            return retrying(self._attempt, request)
        except _ServerError as exc:
            status = exc.response.status_code
            log.warning("%s %s failed with HTTP %d", request.method, request.url, status)
            return exc.response
        except httpx.InvalidURL as exc:
            raise ConfigError(f"Invalid request URL '{request.url}': {exc}") from exc
        except httpx.TimeoutException as exc:
            log.warning("%s %s timed out", request.method, request.url)
            message = f"Network error: request timed out after {self.timeout:g}s"
            raise TransportError(message, cause=exc) from exc
        except httpx.HTTPError as exc:
            log.warning("%s %s failed: %s", request.method, request.url, exc)
            raise TransportError(f"Network error: {exc or type(exc).__name__}", cause=exc) from exc

    def _attempt(self, request: OutgoingRequest) -> ApiResponse:
        log.debug("%s %s", request.method, request.url)
        response = self._client.request(
            request.method,
            request.url,
            headers=request.headers,
            json=request.json,
            files=request.files,
        )
        result = ApiResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )
        log.debug("HTTP %d (%d bytes)", result.status_code, len(result.body))
        if result.status_code >= 500:
            raise _ServerError(result)
        return result
