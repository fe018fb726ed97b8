"""
Logging helpers for the REST template bridge.

Loggers are obtained through :func:`get_logger`, which returns a
:class:`logging.LoggerAdapter` carrying structured extras (``structure``,
``url``, ``status_code`` ...). The :class:`StructuredLogFormatter` renders those
extras as ``key=value`` pairs after the message so request traces stay
greppable. Each adapter owns a :class:`RedactingFilter` holding its own
credentials. :func:`bind_redactor` ties that filter to the records the adapter
emits, so the values are masked before any handler sees them and other
loggers are left alone.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from logging import Logger, LoggerAdapter
from typing import Any, FrozenSet, Iterable, Mapping, MutableMapping, Optional, Sequence, Set

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = "INFO"
REDACTED = "***"
MIN_SECRET_LENGTH = 4
_ENV_LEVEL = "REST_BRIDGE_LOG_LEVEL"
_EXTRA_FOCUS_ORDER: Sequence[str] = (
    "operation",
    "structure",
    "method",
    "url",
    "status_code",
    "attempt",
    "error",
)

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "asctime",
}

_configured = False


def redact(text: str, secrets: Iterable[str]) -> str:
    for secret in sorted(secrets, key=len, reverse=True):
        text = text.replace(secret, REDACTED)
    return text


def _resolve_level(level: Optional[int | str]) -> int:
    if isinstance(level, int):
        return level
    candidate = (level or os.getenv(_ENV_LEVEL) or DEFAULT_LEVEL).upper()
    resolved = logging.getLevelName(candidate)
    return resolved if isinstance(resolved, int) else logging.INFO


def _iter_extras(record: logging.LogRecord) -> Iterable[tuple[str, Any]]:
    payload = {key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS and not key.startswith("_") and value is not None}

    for key in _EXTRA_FOCUS_ORDER:
        if key in payload:
            yield key, payload.pop(key)

    for key in sorted(payload):
        yield key, payload[key]


def _format_extra_value(value: Any) -> str:
    if isinstance(value, (list, tuple, set)):
        return "[" + ", ".join(_format_extra_value(item) for item in value) + "]"
    if isinstance(value, Mapping):
        try:
            return json.dumps(value, ensure_ascii=False, default=str)
        except TypeError:
            return repr(dict(value))
    return str(value)


class StructuredLogFormatter(logging.Formatter):
    """Formatter that appends structured extras after the message."""

    def __init__(self) -> None:
        super().__init__(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = " ".join(f"{key}={_format_extra_value(value)}" for key, value in _iter_extras(record))
        if extras:
            return f"{base} | {extras}"
        return base


class RedactingFilter(logging.Filter):
    """
    Mask a set of secret values in the message and string extras of a record.

    Values shorter than :data:`MIN_SECRET_LENGTH` are never masked.
    """

    def __init__(self, secrets: Iterable[Optional[str]] = ()) -> None:
        super().__init__()
        self._secrets: Set[str] = set()
        self.add(*secrets)

    @property
    def secrets(self) -> FrozenSet[str]:
        return frozenset(self._secrets)

    def add(self, *secrets: Optional[str]) -> None:
        self._secrets.update(value for value in secrets if value and len(value) >= MIN_SECRET_LENGTH)

    def clear(self) -> None:
        self._secrets.clear()

    def filter(self, record: logging.LogRecord) -> bool:
        if self._secrets:
            record.msg = redact(record.getMessage(), self._secrets)
            record.args = None
            for key, value in list(record.__dict__.items()):
                if key not in _RESERVED_ATTRS and isinstance(value, str):
                    setattr(record, key, redact(value, self._secrets))
        return True


def _build_handler(level: Optional[int | str]) -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(_resolve_level(level))
    handler.setFormatter(StructuredLogFormatter())
    return handler


def configure_logging(level: Optional[int | str] = None, *, force: bool = False) -> None:
    """
    Install the structured stderr handler on the root logger.

    Parameters
    ----------
    level:
        Optional level override. Falls back to ``REST_BRIDGE_LOG_LEVEL`` or ``INFO``.
    force:
        Reapply the configuration even if it was installed before.
    """

    global _configured
    if _configured and not force:
        return
    logging.basicConfig(level=_resolve_level(level), handlers=[_build_handler(level)], force=force)
    _configured = True


def get_logger(
    name: str,
    *,
    level: Optional[int | str] = None,
    extra: Optional[Mapping[str, object]] = None,
) -> LoggerAdapter:
    """
    Return a :class:`logging.LoggerAdapter` bound to ``extra``.

    Parameters
    ----------
    name:
        Logger namespace, typically ``__name__``.
    level:
        Optional per-logger level override.
    extra:
        Structured metadata recorded with each entry. ``None`` values are dropped.
    """

    configure_logging(level)
    base: Logger = logging.getLogger(name)
    if level is not None:
        base.setLevel(_resolve_level(level))
    payload: MutableMapping[str, object] = {}
    if extra:
        payload.update({key: value for key, value in extra.items() if value is not None})
    return LoggerAdapter(base, payload)


def bind_extra(logger: LoggerAdapter, **extra: object) -> LoggerAdapter:
    """
    Create a child adapter with additional structured metadata.

    The adapter passed in is left untouched.
    """

    merged = dict(logger.extra) if isinstance(logger.extra, Mapping) else {}
    merged.update({key: value for key, value in extra.items() if value is not None})
    return LoggerAdapter(logger.logger, merged)


def log_event(
    logger: LoggerAdapter | Logger,
    message: str,
    *,
    level: int = logging.DEBUG,
    extra: Optional[Mapping[str, object]] = None,
) -> None:
    """Emit ``message`` with the adapter's extras merged with ``extra``."""

    merged: MutableMapping[str, object] = {}
    target: Logger
    if isinstance(logger, LoggerAdapter):
        if isinstance(logger.extra, Mapping):
            merged.update({key: value for key, value in logger.extra.items() if value is not None})
        target = logger.logger
    else:
        target = logger
    if extra:
        merged.update({key: value for key, value in extra.items() if value is not None})
    if merged:
        target.log(level, message, extra=merged)
    else:
        target.log(level, message)


class _RecordRedactor(logging.Filter):
    """Apply the :class:`RedactingFilter` carried in a record's ``_redactor`` extra."""

    def filter(self, record: logging.LogRecord) -> bool:
        redactor = getattr(record, "_redactor", None)
        if isinstance(redactor, RedactingFilter):
            redactor.filter(record)
        return True


_RECORD_REDACTOR = _RecordRedactor()


def bind_redactor(logger: LoggerAdapter | Logger, redactor: RedactingFilter) -> LoggerAdapter:
    """
    Return a child adapter whose records are masked by ``redactor``.

    Only records emitted through the returned adapter (or adapters derived
    from it with :func:`bind_extra`) are masked, and only with the secrets
    ``redactor`` holds.
    """

    if not isinstance(logger, LoggerAdapter):
        logger = LoggerAdapter(logger, {})
    logger.logger.addFilter(_RECORD_REDACTOR)
    return bind_extra(logger, _redactor=redactor)
