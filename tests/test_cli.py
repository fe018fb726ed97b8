from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from rest_template_bridge.adapters import RestTemplateAdapter
from rest_template_bridge.cli.main import app


@pytest.fixture(autouse=True)
def bridge_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("rest_template_bridge.config._discover_project_root", lambda: None)
    monkeypatch.delenv("REST_BRIDGE_CONFIG_PATH", raising=False)
    monkeypatch.setenv("REST_BRIDGE_ENDPOINT", "http://rest.example.com/site")
    monkeypatch.setenv("REST_BRIDGE_USERNAME", "alice")
    monkeypatch.setenv("REST_BRIDGE_PASSWORD", "s3cret-pa55")


def invoke(cli_runner: CliRunner, args: list[str]):
    return cli_runner.invoke(app, args)


def _adapter_factory(service):
    def build(settings, registry):
        adapter = RestTemplateAdapter(endpoint=settings.endpoint, structures=registry, transport=service.transport)
        adapter.set_properties(settings.to_properties())
        return adapter

    return build


def test_structures_list_uses_packaged_registry(cli_runner):
    result = invoke(cli_runner, ["structures", "list"])

    assert result.exit_code == 0
    assert "FirstStructure" in result.stdout
    assert "SecondStructure" in result.stdout


def test_structures_list_with_override(cli_runner, tmp_path):
    path = tmp_path / "structures.yaml"
    path.write_text("- Users\n", encoding="utf-8")

    result = invoke(cli_runner, ["--structures", str(path), "structures", "list"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "Users"


def test_count_command_prints_json(cli_runner, service):
    service.respond("/path/to/count/endpoint", json={"count": "42"})

    with patch("rest_template_bridge.cli.main.build_adapter", _adapter_factory(service)):
        result = invoke(
            cli_runner,
            ["count", "--structure", "FirstStructure", "--query", 'name=<%=parameter["Name"]%>', "--param", "Name=John Doe"],
        )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"count": 42}
    assert service.requests[-1].url.params["query"] == "name=John Doe"


def test_search_command_projects_fields(cli_runner, service):
    service.respond("/path/to/search/records", json={"records": [{"id": "1", "name": "a"}]})

    with patch("rest_template_bridge.cli.main.build_adapter", _adapter_factory(service)):
        result = invoke(cli_runner, ["search", "-S", "FirstStructure", "-q", "name=a", "-f", "name"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["records"] == [{"name": "a"}]
    assert payload["metadata"] == {"count": "1", "size": "1"}


def test_retrieve_command_reports_invalid_structure(cli_runner, service):
    with patch("rest_template_bridge.cli.main.build_adapter", _adapter_factory(service)):
        result = invoke(cli_runner, ["retrieve", "-S", "Nope", "-q", "id=1"])

    assert result.exit_code == 1
    assert "InvalidStructureError" in result.output


def test_verify_command_reports_unauthorized(cli_runner, service):
    service.auth_status = 401

    with patch("rest_template_bridge.cli.main.build_adapter", _adapter_factory(service)):
        result = invoke(cli_runner, ["verify"])

    assert result.exit_code == 1
    assert "verification failed" in result.stdout.lower()
    assert "s3cret-pa55" not in result.output


def test_malformed_param_is_rejected(cli_runner, service):
    with patch("rest_template_bridge.cli.main.build_adapter", _adapter_factory(service)):
        result = invoke(cli_runner, ["count", "-S", "FirstStructure", "--param", "novalue"])

    assert result.exit_code != 0
    assert service.requests == []
