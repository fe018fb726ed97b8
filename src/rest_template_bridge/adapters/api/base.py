"""
Shared HTTP utilities for REST-backed adapters.

The helper provides a thin HTTPX wrapper: it keeps the code synchronous,
avoids global state, attaches the configured authorization header, and turns
transport failures into :class:`~rest_template_bridge.adapters.base.BridgeConnectionError`
with a caller-safe message while logging the underlying detail.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Mapping, MutableMapping, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ...core.logging import get_logger, log_event
from ..base import BridgeConnectionError, FormatError, RemoteServiceError, UnauthorizedError
from .auth import AuthStrategy

DEFAULT_TIMEOUT = 15.0
CONNECTION_FAILED_MESSAGE = "Unable to make a connection to the REST Service"


@dataclass(slots=True)
class BaseAPIClient:
    """
    Base synchronous HTTP client.

    Parameters
    ----------
    base_url:
        Root URL for the upstream service.
    auth:
        Strategy that sets the ``Authorization`` header on every request.
    timeout:
        Request timeout in seconds.
    default_headers:
        Headers automatically attached to every request.
    retry_attempts:
        Total attempts per request for transport failures. ``1`` disables retries.
    transport:
        Optional HTTPX transport, e.g. :class:`httpx.MockTransport` in tests.
    logger:
        Optional logger; defaults to one named after the concrete class.
    """

    base_url: str
    auth: Optional[AuthStrategy] = None
    timeout: float = DEFAULT_TIMEOUT
    default_headers: MutableMapping[str, str] = field(default_factory=dict)
    retry_attempts: int = 1
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)
    logger: Optional[LoggerAdapter] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.logger is None:
            self.logger = get_logger(
                f"{self.__class__.__module__}.{self.__class__.__name__}",
                extra={"base_url": self.base_url},
            )
        if self.retry_attempts < 1:
            raise ValueError("retry_attempts must be at least 1.")

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            follow_redirects=True,
            transport=self.transport,
        )

    def _headers(self) -> MutableMapping[str, str]:
        headers: MutableMapping[str, str] = {"Accept": "application/json"}
        headers.update(self.default_headers)
        if self.auth is not None:
            self.auth.apply(headers)
        return headers

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        log_event(self.logger, "HTTP request", extra={"method": method, "url": url})

        @retry(
            retry=retry_if_exception_type(httpx.TransportError),
            wait=wait_exponential(multiplier=1, min=1, max=8),
            stop=stop_after_attempt(self.retry_attempts),
            reraise=True,
        )
        def _send() -> httpx.Response:
            with self._build_client() as client:
                return client.request(method, url, **kwargs)

        try:
            response = _send()
        except httpx.RequestError as exc:
            log_event(
                self.logger,
                "HTTP transport failure",
                level=logging.ERROR,
                extra={"method": method, "url": url, "error": f"{type(exc).__name__}: {exc}"},
            )
            raise BridgeConnectionError(CONNECTION_FAILED_MESSAGE) from exc

        log_event(
            self.logger,
            "HTTP response",
            extra={"method": method, "url": url, "status_code": response.status_code},
        )
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if status == 401:
            raise UnauthorizedError("Unauthorized: the REST Service rejected the configured credentials.")
        if status >= 400:
            raise RemoteServiceError(
                f"The REST Service returned HTTP {status} for {response.request.url.path}.",
                status_code=status,
            )

    @staticmethod
    def _decode_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise FormatError(f"The REST Service returned a response from {response.request.url.path} that is not valid JSON.") from exc

    def _get_json(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        response = self._request("GET", url, params=params)
        self._raise_for_status(response)
        return self._decode_json(response)
