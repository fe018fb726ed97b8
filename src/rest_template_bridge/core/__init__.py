"""
Core building blocks of the REST template bridge.

Nothing in this package performs network I/O: it holds the qualification
parser, the structure registry, and the logging helpers shared by the adapter
and CLI layers.
"""

from .logging import RedactingFilter, bind_extra, bind_redactor, configure_logging, get_logger, log_event
from .qualification import (
    QualificationParser,
    UnresolvedParameterError,
    escape_query,
    find_query_value,
    resolve,
    split_query,
)
from .registry import RegistryLoadError, StructureDescriptor, StructureRegistry

__all__ = [
    "QualificationParser",
    "RedactingFilter",
    "RegistryLoadError",
    "StructureDescriptor",
    "StructureRegistry",
    "UnresolvedParameterError",
    "bind_extra",
    "bind_redactor",
    "configure_logging",
    "escape_query",
    "find_query_value",
    "get_logger",
    "log_event",
    "resolve",
    "split_query",
]
