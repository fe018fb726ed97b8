from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

import httpx
import pytest
from typer.testing import CliRunner

from rest_template_bridge.adapters import RestTemplateAdapter
from rest_template_bridge.cli.main import app

ENDPOINT = "http://rest.example.com/site"
USERNAME = "alice"
PASSWORD = "s3cret-pa55"


class FakeRestService:
    """In-memory stand-in for the REST service, served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.auth_status = 200
        self.routes: Dict[str, Dict[str, Any]] = {}
        self.error: Optional[Type[httpx.TransportError]] = None

    def respond(self, path: str, *, status: int = 200, json: Any = None, content: Optional[bytes] = None) -> None:
        if content is not None:
            self.routes[path] = {"status_code": status, "content": content}
        else:
            self.routes[path] = {"status_code": status, "json": json}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("Connection refused", request=request)
        path = request.url.path
        if path.endswith("/path/to/authentication/check"):
            return httpx.Response(self.auth_status)
        for suffix, kwargs in self.routes.items():
            if path.endswith(suffix):
                return httpx.Response(**kwargs)
        return httpx.Response(404, json={"error": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def service() -> FakeRestService:
    return FakeRestService()


@pytest.fixture()
def adapter(service: FakeRestService) -> RestTemplateAdapter:
    """An initialized adapter; the authentication check request is discarded."""

    instance = RestTemplateAdapter(endpoint=ENDPOINT, transport=service.transport)
    instance.set_properties({"Username": USERNAME, "Password": PASSWORD})
    instance.initialize()
    service.requests.clear()
    return instance


@pytest.fixture(scope="session")
def structures_file() -> Path:
    structures_pkg = "rest_template_bridge.resources.structures"
    with resources.as_file(resources.files(structures_pkg) / "default.yaml") as ref:
        return Path(ref)


@pytest.fixture()
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def cli_app():
    return app
