"""
REST template bridge.

Exposes a generic REST service to a bridge host through count, retrieve and
search operations. Import :class:`RestTemplateAdapter` and
:class:`BridgeRequest` for the main developer-facing surface.
"""

from .adapters import (
    BridgeConnectionError,
    BridgeError,
    BridgeRequest,
    Count,
    FormatError,
    InvalidRequestError,
    InvalidStructureError,
    Record,
    RecordList,
    RestTemplateAdapter,
    UnauthorizedError,
)
from .core.qualification import UnresolvedParameterError, escape_query, resolve

__version__ = RestTemplateAdapter.VERSION

__all__ = [
    "BridgeConnectionError",
    "BridgeError",
    "BridgeRequest",
    "Count",
    "FormatError",
    "InvalidRequestError",
    "InvalidStructureError",
    "Record",
    "RecordList",
    "RestTemplateAdapter",
    "UnauthorizedError",
    "UnresolvedParameterError",
    "escape_query",
    "resolve",
]
