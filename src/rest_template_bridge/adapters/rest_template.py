"""
Bridge adapter backed by the REST template service.

The adapter turns a :class:`~rest_template_bridge.adapters.types.BridgeRequest`
into one GET against the service:

* ``count``    -> ``/path/to/count/endpoint?query={escaped query}``
* ``retrieve`` -> ``/path/to/retrieve/record/{id}`` (``id`` taken from the query)
* ``search``   -> ``/path/to/search/records?{escaped query}``

Every operation first checks the structure against the allow-list and resolves
the query template, so invalid requests never reach the network. Credentials
are checked once in :meth:`RestTemplateAdapter.initialize`.
"""

from __future__ import annotations

import logging
from logging import LoggerAdapter
from typing import Iterable, Optional, Tuple, Union

import httpx

from ..config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, ConfigurablePropertyMap, PropertyNames, build_property_map
from ..core.logging import RedactingFilter, bind_extra, bind_redactor, get_logger, log_event
from ..core.qualification import QualificationParser, UnresolvedParameterError, escape_query, find_query_value
from ..core.registry import StructureRegistry
from .api.auth import AuthStrategy, BasicAuth
from .api.rest_template import RestTemplateClient
from .base import (
    BridgeError,
    ConfigurationError,
    InvalidRequestError,
    InvalidStructureError,
    UnauthorizedError,
    VerificationResult,
)
from .types import BridgeRequest, Count, Record, RecordList

DEFAULT_STRUCTURES: Tuple[str, ...] = ("FirstStructure", "SecondStructure")
RECORD_ID_KEY = "id"


class RestTemplateAdapter:
    """
    Count / retrieve / search adapter for a generic REST service.

    Parameters
    ----------
    endpoint:
        Root URL of the REST service.
    structures:
        Allow-list of structure names, as a :class:`StructureRegistry` or any
        iterable of names. Defaults to :data:`DEFAULT_STRUCTURES`.
    auth:
        Alternative authorization strategy (e.g. :class:`BearerAuth`). When
        omitted, Basic auth is built from the ``Username``/``Password`` properties.
    timeout:
        Per-request timeout in seconds.
    retry_attempts:
        Attempts per request on transport failure; ``1`` (the default) never retries.
    transport:
        Optional HTTPX transport handed to the underlying client.
    logger:
        Logger used for request tracing and transport failures. Records the
        adapter emits through it are masked with the adapter's own
        :class:`RedactingFilter`.
    parser:
        Qualification parser; defaults to :class:`QualificationParser`.
    """

    NAME = "Rest Template Bridge"
    VERSION = "1.0.0"

    def __init__(
        self,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        structures: Union[StructureRegistry, Iterable[str], None] = None,
        auth: Optional[AuthStrategy] = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_attempts: int = 1,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[LoggerAdapter] = None,
        parser: Optional[QualificationParser] = None,
    ) -> None:
        if isinstance(structures, StructureRegistry):
            self.structures = structures
        else:
            self.structures = StructureRegistry.from_names(DEFAULT_STRUCTURES if structures is None else structures)
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.retry_attempts = retry_attempts
        self.transport = transport
        self.redactor = RedactingFilter()
        self.logger = bind_redactor(logger or get_logger(__name__, extra={"adapter": self.NAME}), self.redactor)
        self.parser = parser or QualificationParser()
        self._auth_override = auth
        self._properties = build_property_map()
        self._client: Optional[RestTemplateClient] = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(endpoint={self.endpoint!r}, structures={self.structures.names()!r}, ready={self.is_ready})"

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def version(self) -> str:
        return self.VERSION

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def set_properties(self, values: dict[str, str]) -> None:
        self._properties.set_values(values)

    def get_properties(self) -> ConfigurablePropertyMap:
        return self._properties

    def initialize(self) -> None:
        """
        Read the configured credentials and check them against the service.

        A client from an earlier successful call stays in use until the new
        credentials have been accepted.

        Raises
        ------
        ConfigurationError
            A required property has no value.
        UnauthorizedError
            The authentication check endpoint answered ``401``.
        BridgeConnectionError
            The service could not be reached.
        """

        auth = self._auth_override
        if auth is None:
            missing = self._properties.missing_required()
            if missing:
                raise ConfigurationError(f"Missing required properties: {', '.join(missing)}.")
            auth = BasicAuth(
                username=self._properties.get_value(PropertyNames.USERNAME) or "",
                password=self._properties.get_value(PropertyNames.PASSWORD) or "",
            )

        self.redactor.add(*auth.secrets)
        client = RestTemplateClient(
            base_url=self.endpoint,
            auth=auth,
            timeout=self.timeout,
            retry_attempts=self.retry_attempts,
            transport=self.transport,
            logger=self.logger,
        )
        log_event(self.logger, "Testing the authentication credentials", extra={"url": self.endpoint})
        status = client.check_authentication()
        if status == 401:
            raise UnauthorizedError("Unauthorized: The inputted Username/Password combination is not valid.")
        self._client = client
        log_event(self.logger, "Adapter initialized", level=logging.INFO, extra={"status_code": status})

    def verify(self) -> VerificationResult:
        """Run :meth:`initialize` and report the outcome without raising."""

        details = {"endpoint": self.endpoint, "structures": self.structures.names()}
        try:
            self.initialize()
        except BridgeError as exc:
            return VerificationResult(success=False, message=f"REST Service verification failed: {exc}", details=details)
        return VerificationResult(success=True, message="REST Service reachable and credentials accepted.", details=details)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def count(self, request: BridgeRequest) -> Count:
        client, query, log = self._prepare(request, "count")
        value = client.fetch_count(escape_query(query))
        log_event(log, "Count resolved", extra={"result": value})
        return Count(value)

    def retrieve(self, request: BridgeRequest) -> Record:
        client, query, log = self._prepare(request, "retrieve")
        record_id = self._record_id(request.query, query)
        payload = client.fetch_record(record_id)
        log_event(log, "Record retrieved", extra={"record_id": record_id})
        return Record.from_payload(payload, request.fields)

    def search(self, request: BridgeRequest) -> RecordList:
        client, query, log = self._prepare(request, "search")
        payloads = client.search_records(escape_query(query))
        records = [Record.from_payload(item, request.fields) for item in payloads]
        size = str(len(records))
        log_event(log, "Search completed", extra={"result": size})
        return RecordList(fields=tuple(request.fields), records=records, metadata={"count": size, "size": size})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _prepare(self, request: BridgeRequest, operation: str) -> Tuple[RestTemplateClient, str, LoggerAdapter]:
        if request.structure not in self.structures:
            raise InvalidStructureError(request.structure)
        if self._client is None:
            raise BridgeError(f"{self.NAME} has not been initialized.")
        try:
            query = self.parser.parse(request.query, request.parameters)
        except UnresolvedParameterError as exc:
            raise InvalidRequestError(str(exc)) from exc
        log = bind_extra(self.logger, operation=operation, structure=request.structure)
        log_event(log, "Resolved query", extra={"query": query})
        return self._client, query, log

    @staticmethod
    def _record_id(template: str, resolved: str) -> str:
        # Presence is decided on the template; the value comes from the resolved query
        # so that ``id=<%=parameter["Id"]%>`` yields the bound id.
        if find_query_value(template, RECORD_ID_KEY) is None:
            raise InvalidRequestError("Retrieve requests must include an 'id=<value>' term in the query.")
        record_id = find_query_value(resolved, RECORD_ID_KEY)
        if not record_id:
            raise InvalidRequestError("Retrieve requests must include a non-empty record id.")
        return record_id


__all__ = ["DEFAULT_STRUCTURES", "RestTemplateAdapter"]
