"""
Bridge adapters and the types they exchange with the bridge host.

The only concrete adapter is :class:`RestTemplateAdapter`; its HTTP plumbing
lives in :mod:`rest_template_bridge.adapters.api`.
"""

from .base import (
    AdapterError,
    BridgeAdapter,
    BridgeConnectionError,
    BridgeError,
    ConfigurationError,
    FormatError,
    InvalidRequestError,
    InvalidStructureError,
    RemoteServiceError,
    UnauthorizedError,
    VerificationResult,
)
from .rest_template import RestTemplateAdapter
from .types import BridgeRequest, Count, Record, RecordList

__all__ = [
    "AdapterError",
    "BridgeAdapter",
    "BridgeConnectionError",
    "BridgeError",
    "BridgeRequest",
    "ConfigurationError",
    "Count",
    "FormatError",
    "InvalidRequestError",
    "InvalidStructureError",
    "Record",
    "RecordList",
    "RemoteServiceError",
    "RestTemplateAdapter",
    "UnauthorizedError",
    "VerificationResult",
]
