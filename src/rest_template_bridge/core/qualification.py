"""
Qualification (query template) parsing.

Bridge callers send query templates such as ``name=<%=parameter["Name"]%>&id=7``.
:func:`resolve` swaps every ``<%=parameter["Key"]%>`` placeholder for the bound
parameter value. The module also carries the small ``key=value`` scanner used
to escape resolved queries for a URL and to pull single values (the record id)
out of them.
"""

from __future__ import annotations

import re
from typing import List, Mapping, Optional, Tuple
from urllib.parse import quote

PLACEHOLDER_PATTERN = re.compile(r"<%=\s*parameter\[\s*(?P<quote>[\"'])(?P<name>.*?)(?P=quote)\s*\]\s*%>")


class UnresolvedParameterError(ValueError):
    """Raised when a placeholder names a parameter that was not supplied."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unable to resolve parameter '{name}': no value was supplied.")
        self.name = name


def placeholder_names(template: str) -> List[str]:
    """Return placeholder names in order of appearance (duplicates kept)."""

    return [match.group("name") for match in PLACEHOLDER_PATTERN.finditer(template or "")]


def resolve(template: str, parameters: Mapping[str, str]) -> str:
    """
    Substitute every placeholder in ``template`` with its parameter value.

    All placeholders are checked before anything is substituted, so a missing
    parameter never yields a partially resolved query. Substituted values are
    inserted literally and are not scanned again.

    Raises
    ------
    UnresolvedParameterError
        If a placeholder references a name absent from ``parameters``.
    """

    if not template:
        return template or ""

    for name in placeholder_names(template):
        if name not in parameters:
            raise UnresolvedParameterError(name)

    return PLACEHOLDER_PATTERN.sub(lambda match: str(parameters[match.group("name")]), template)


class QualificationParser:
    """Object wrapper around :func:`resolve` for callers that inject a parser."""

    def parse(self, template: str, parameters: Optional[Mapping[str, str]]) -> str:
        return resolve(template, parameters or {})


def split_query(query: str) -> List[Tuple[str, str]]:
    """
    Split ``query`` into ``(key, value)`` pairs.

    Pairs are separated by ``&`` and split on the first ``=`` only, so values
    may contain ``=``. A segment without ``=`` has an empty value; empty
    segments are skipped.
    """

    pairs: List[Tuple[str, str]] = []
    for segment in (query or "").split("&"):
        if not segment:
            continue
        key, _, value = segment.partition("=")
        pairs.append((key, value))
    return pairs


def find_query_value(query: str, key: str) -> Optional[str]:
    """Return the value of the first pair whose key matches ``key`` case-insensitively."""

    wanted = key.strip().lower()
    for candidate, value in split_query(query):
        if candidate.strip().lower() == wanted:
            return value
    return None


def escape_query(query: str) -> str:
    """
    Make a resolved query safe to append to a URL.

    Keys are trimmed with inner spaces replaced by ``+``; values are
    percent-encoded (spaces become ``%20``).
    """

    escaped = []
    for key, value in split_query(query):
        escaped.append(f"{key.strip().replace(' ', '+')}={quote(value, safe='')}")
    return "&".join(escaped)


__all__ = [
    "PLACEHOLDER_PATTERN",
    "QualificationParser",
    "UnresolvedParameterError",
    "escape_query",
    "find_query_value",
    "placeholder_names",
    "resolve",
    "split_query",
]
