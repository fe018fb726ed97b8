from __future__ import annotations

import pytest

from rest_template_bridge.config import (
    DEFAULT_ENDPOINT,
    MASK,
    BridgeSettings,
    PropertyNames,
    build_property_map,
    load_settings,
)


@pytest.fixture(autouse=True)
def clear_bridge_env(monkeypatch):
    for name in ("REST_BRIDGE_CONFIG_PATH", "REST_BRIDGE_ENDPOINT", "REST_BRIDGE_USERNAME", "REST_BRIDGE_PASSWORD"):
        monkeypatch.delenv(name, raising=False)


def test_load_settings_from_explicit_file(tmp_path):
    path = tmp_path / "bridge.toml"
    path.write_text(
        '[bridge]\nendpoint = "https://api.example.com/v1"\nusername = "svc"\npassword = "pw"\nstructures = ["Users", "Groups"]\ntimeout = 5\n',
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.endpoint == "https://api.example.com/v1"
    assert settings.username == "svc"
    assert settings.password == "pw"
    assert tuple(settings.structures) == ("Users", "Groups")
    assert settings.timeout == 5.0
    assert settings.source_path == path


def test_load_settings_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "bridge.toml"
    path.write_text('[bridge]\nusername = "svc"\npassword = "pw"\n', encoding="utf-8")
    monkeypatch.setenv("REST_BRIDGE_CONFIG_PATH", str(path))
    monkeypatch.setenv("REST_BRIDGE_PASSWORD", "from-env")

    settings = load_settings()

    assert settings.username == "svc"
    assert settings.password == "from-env"
    assert settings.endpoint == DEFAULT_ENDPOINT


def test_load_settings_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.toml")


def test_load_settings_strict_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("rest_template_bridge.config._discover_project_root", lambda: None)

    with pytest.raises(FileNotFoundError):
        load_settings(strict=True)
    assert load_settings().username is None


def test_settings_repr_hides_password():
    settings = BridgeSettings(username="svc", password="top-secret")

    assert "top-secret" not in repr(settings)
    assert settings.to_properties() == {PropertyNames.USERNAME: "svc", PropertyNames.PASSWORD: "top-secret"}


def test_property_map_reports_missing_and_masks_sensitive():
    properties = build_property_map()

    assert properties.missing_required() == ["Username", "Password"]

    properties.set_values({"Username": "svc", "Password": "pw"})

    assert properties.missing_required() == []
    assert properties.get_value("Password") == "pw"
    described = {entry["name"]: entry["value"] for entry in properties.describe()}
    assert described == {"Username": "svc", "Password": MASK}
