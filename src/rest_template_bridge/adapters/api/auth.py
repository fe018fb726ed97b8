"""
Authorization header strategies.

The template adapter authenticates with HTTP Basic credentials. A bearer
token strategy is provided for services that issue API tokens instead; both
expose the same :meth:`apply` hook so the client does not care which is used.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import MutableMapping, Protocol, Tuple


class AuthStrategy(Protocol):
    @property
    def secrets(self) -> Tuple[str, ...]:
        """Credential values that must never appear in log output."""

    def apply(self, headers: MutableMapping[str, str]) -> MutableMapping[str, str]:
        """Set the ``Authorization`` header on ``headers`` and return it."""


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def bearer_auth_header(token: str) -> str:
    return f"Bearer {token}"


@dataclass(frozen=True, slots=True)
class BasicAuth:
    username: str
    password: str = field(repr=False)

    @property
    def secrets(self) -> Tuple[str, ...]:
        return (self.password, basic_auth_header(self.username, self.password).split(" ", 1)[1])

    def apply(self, headers: MutableMapping[str, str]) -> MutableMapping[str, str]:
        headers["Authorization"] = basic_auth_header(self.username, self.password)
        return headers


@dataclass(frozen=True, slots=True)
class BearerAuth:
    token: str = field(repr=False)

    @property
    def secrets(self) -> Tuple[str, ...]:
        return (self.token,)

    def apply(self, headers: MutableMapping[str, str]) -> MutableMapping[str, str]:
        headers["Authorization"] = bearer_auth_header(self.token)
        return headers
