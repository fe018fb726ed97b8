"""
REST client for the template service.

The service exposes four GET endpoints below its root URL::

    /path/to/authentication/check
    /path/to/count/endpoint?query={escaped query}
    /path/to/retrieve/record/{id}
    /path/to/search/records?{escaped query}

The client only knows about URLs and payload shapes; request validation and
template resolution live in the adapter.
"""

from __future__ import annotations

from logging import LoggerAdapter
from typing import Any, List, Mapping, MutableMapping, Optional
from urllib.parse import quote

import httpx

from ..base import FormatError
from .auth import AuthStrategy
from .base import DEFAULT_TIMEOUT, BaseAPIClient

AUTH_CHECK_PATH = "/path/to/authentication/check"
COUNT_PATH = "/path/to/count/endpoint"
RETRIEVE_PATH = "/path/to/retrieve/record"
SEARCH_PATH = "/path/to/search/records"


def _require_object(payload: Any, *, context: str) -> Mapping[str, Any]:
    if not isinstance(payload, dict):
        raise FormatError(f"Unexpected {context} payload from the REST Service: expected a JSON object.")
    return payload


def parse_count(value: Any) -> int:
    """Convert the ``count`` field (a digit string) into a non-negative integer."""

    if isinstance(value, bool):
        raise FormatError("The REST Service returned a boolean where a count was expected.")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        try:
            number = int(value.strip())
        except ValueError as exc:
            raise FormatError("The REST Service returned a count that cannot be converted to an integer.") from exc
    else:
        raise FormatError(f"The REST Service returned a count that is not an integer: {value!r}.")
    if number < 0:
        raise FormatError(f"The REST Service returned a negative count: {number}.")
    return number


class RestTemplateClient(BaseAPIClient):
    """Client for the count / retrieve / search endpoints of the template service."""

    def __init__(
        self,
        *,
        base_url: str,
        auth: Optional[AuthStrategy] = None,
        timeout: float = DEFAULT_TIMEOUT,
        default_headers: Optional[MutableMapping[str, str]] = None,
        retry_attempts: int = 1,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[LoggerAdapter] = None,
    ) -> None:
        super().__init__(
            base_url=base_url.rstrip("/"),
            auth=auth,
            timeout=timeout,
            default_headers=dict(default_headers or {}),
            retry_attempts=retry_attempts,
            transport=transport,
            logger=logger,
        )

    def check_authentication(self) -> int:
        """Call the authentication check endpoint and return its status code."""

        response = self._request("GET", AUTH_CHECK_PATH)
        return response.status_code

    def fetch_count(self, escaped_query: str) -> int:
        payload = _require_object(self._get_json(f"{COUNT_PATH}?query={escaped_query}"), context="count")
        if "count" not in payload:
            raise FormatError("The REST Service count response is missing the 'count' field.")
        return parse_count(payload["count"])

    def fetch_record(self, record_id: str) -> Mapping[str, Any]:
        payload = _require_object(self._get_json(f"{RETRIEVE_PATH}/{quote(record_id, safe='')}"), context="retrieve")
        record = payload.get("record")
        if not isinstance(record, dict):
            raise FormatError("The REST Service retrieve response is missing the 'record' object.")
        return record

    def search_records(self, escaped_query: str) -> List[Mapping[str, Any]]:
        url = f"{SEARCH_PATH}?{escaped_query}" if escaped_query else SEARCH_PATH
        payload = _require_object(self._get_json(url), context="search")
        records = payload.get("records")
        if not isinstance(records, list):
            raise FormatError("The REST Service search response is missing the 'records' array.")
        for index, item in enumerate(records):
            if not isinstance(item, dict):
                raise FormatError(f"The REST Service search response contains a non-object record at index {index}.")
        return records


__all__ = [
    "AUTH_CHECK_PATH",
    "COUNT_PATH",
    "RETRIEVE_PATH",
    "SEARCH_PATH",
    "RestTemplateClient",
    "parse_count",
]
