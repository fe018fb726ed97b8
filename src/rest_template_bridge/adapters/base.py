"""
Base protocol and error hierarchy for bridge adapters.

Adapters are intentionally narrow in scope: they validate a bridge request,
perform exactly one call against their backing service, and translate the
result. Every failure surfaced to the bridge is a :class:`BridgeError`
subclass whose message is safe to display (it never contains credentials).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

from .types import BridgeRequest, Count, Record, RecordList


class AdapterError(RuntimeError):
    """Raised when an adapter encounters a non-recoverable error."""


class BridgeError(AdapterError):
    """Base class for errors reported back to the bridge caller."""


class ConfigurationError(BridgeError):
    """Required adapter properties are missing or invalid."""


class InvalidStructureError(BridgeError):
    """The requested structure is not in the adapter's allow-list."""

    def __init__(self, structure: str) -> None:
        super().__init__(f"Invalid Structure: '{structure}' is not a valid structure")
        self.structure = structure


class InvalidRequestError(BridgeError):
    """The request cannot be turned into a remote call (e.g. unbound parameter)."""


class BridgeConnectionError(BridgeError):
    """The remote service could not be reached. Details are logged, not surfaced."""


class UnauthorizedError(BridgeError):
    """The remote service rejected the configured credentials."""


class FormatError(BridgeError):
    """The remote response did not have the expected JSON shape."""


class RemoteServiceError(BridgeError):
    """The remote service answered with an error status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class VerificationResult:
    """
    Structured response returned by adapter verification routines.

    Attributes
    ----------
    success:
        Indicates whether the verification succeeded.
    message:
        Human-readable summary.
    details:
        Optional structured metadata (endpoint, structure count ...).
    """

    success: bool
    message: str
    details: Optional[Mapping[str, object]] = None


class BridgeAdapter(Protocol):
    """Protocol implemented by bridge adapters."""

    @property
    def name(self) -> str:
        """Display name of the adapter."""

    @property
    def version(self) -> str:
        """Adapter version string."""

    def initialize(self) -> None:
        """Validate configuration and credentials; must succeed before any operation."""

    def verify(self) -> VerificationResult:
        """Perform a lightweight connectivity check without raising."""

    def count(self, request: BridgeRequest) -> Count: ...

    def retrieve(self, request: BridgeRequest) -> Record: ...

    def search(self, request: BridgeRequest) -> RecordList: ...
