"""
Configuration helpers for the REST template bridge.

Two layers live here:

* :class:`ConfigurablePropertyMap`: the property schema the bridge host fills
  in (``Username`` and ``Password``; the password is marked sensitive).
* :func:`load_settings`: a convenience loader for the CLI and scripts that
  reads a ``[bridge]`` table from a TOML file and applies environment
  overrides.

The TOML lookup order is:

1. Explicit ``REST_BRIDGE_CONFIG_PATH`` environment variable.
2. ``.secrets/bridge.toml`` relative to the current directory.
3. ``.secrets/bridge.toml`` relative to the project root (the first parent
   directory holding a ``pyproject.toml``).

Environment variables ``REST_BRIDGE_ENDPOINT``, ``REST_BRIDGE_USERNAME`` and
``REST_BRIDGE_PASSWORD`` take precedence over file values.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

DEFAULT_ENDPOINT = "http://restendpoint.com/sitelocation"
DEFAULT_TIMEOUT = 15.0
MASK = "********"


class PropertyNames:
    USERNAME = "Username"
    PASSWORD = "Password"


@dataclass(slots=True)
class ConfigurableProperty:
    """A single named adapter property."""

    name: str
    required: bool = False
    sensitive: bool = False
    value: Optional[str] = field(default=None, repr=False)

    def display_value(self) -> Optional[str]:
        if self.sensitive and self.value:
            return MASK
        return self.value


class ConfigurablePropertyMap:
    """Ordered collection of :class:`ConfigurableProperty` entries."""

    def __init__(self, *properties: ConfigurableProperty) -> None:
        self._properties: Dict[str, ConfigurableProperty] = {prop.name: prop for prop in properties}

    def __iter__(self):
        return iter(self._properties.values())

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def set_values(self, values: Mapping[str, str]) -> None:
        """Assign values for known properties; unknown keys are ignored."""

        for name, value in values.items():
            prop = self._properties.get(name)
            if prop is not None:
                prop.value = value

    def get_value(self, name: str) -> Optional[str]:
        prop = self._properties.get(name)
        return prop.value if prop is not None else None

    def missing_required(self) -> List[str]:
        return [prop.name for prop in self._properties.values() if prop.required and not prop.value]

    def describe(self) -> List[Dict[str, object]]:
        """Describe the schema; sensitive values are masked."""

        return [
            {
                "name": prop.name,
                "required": prop.required,
                "sensitive": prop.sensitive,
                "value": prop.display_value(),
            }
            for prop in self._properties.values()
        ]


def build_property_map() -> ConfigurablePropertyMap:
    return ConfigurablePropertyMap(
        ConfigurableProperty(PropertyNames.USERNAME, required=True),
        ConfigurableProperty(PropertyNames.PASSWORD, required=True, sensitive=True),
    )


@dataclass(slots=True)
class BridgeSettings:
    """Resolved settings used to construct an adapter outside a bridge host."""

    endpoint: str = DEFAULT_ENDPOINT
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    structures: Sequence[str] = field(default_factory=tuple)
    timeout: float = DEFAULT_TIMEOUT
    source_path: Optional[Path] = None

    def to_properties(self) -> Dict[str, str]:
        properties: Dict[str, str] = {}
        if self.username is not None:
            properties[PropertyNames.USERNAME] = self.username
        if self.password is not None:
            properties[PropertyNames.PASSWORD] = self.password
        return properties


def _discover_project_root() -> Optional[Path]:
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").is_file():
            return parent
    return None


def _candidate_paths() -> Iterable[Path]:
    env_override = os.getenv("REST_BRIDGE_CONFIG_PATH")
    if env_override:
        yield Path(env_override).expanduser()

    yield Path.cwd() / ".secrets" / "bridge.toml"
    project_root = _discover_project_root()
    if project_root:
        yield project_root / ".secrets" / "bridge.toml"


def _load_toml(path: Path) -> Dict[str, object]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _settings_from_section(section: Mapping[str, object], *, source_path: Optional[Path]) -> BridgeSettings:
    def _extract(key: str) -> Optional[str]:
        value = section.get(key)
        return str(value) if isinstance(value, str) and value else None

    structures = section.get("structures")
    timeout = section.get("timeout")
    return BridgeSettings(
        endpoint=_extract("endpoint") or DEFAULT_ENDPOINT,
        username=_extract("username"),
        password=_extract("password"),
        structures=tuple(str(item) for item in structures) if isinstance(structures, list) else (),
        timeout=float(timeout) if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) else DEFAULT_TIMEOUT,
        source_path=source_path,
    )


def _apply_env_overrides(settings: BridgeSettings) -> BridgeSettings:
    endpoint = os.getenv("REST_BRIDGE_ENDPOINT")
    username = os.getenv("REST_BRIDGE_USERNAME")
    password = os.getenv("REST_BRIDGE_PASSWORD")
    if endpoint:
        settings.endpoint = endpoint
    if username:
        settings.username = username
    if password:
        settings.password = password
    return settings


def load_settings(path: Optional[Path | str] = None, *, strict: bool = False) -> BridgeSettings:
    """
    Load bridge settings from TOML and the environment.

    Parameters
    ----------
    path:
        Explicit TOML file. Skips discovery when given; the file must exist.
    strict:
        When ``True`` raise ``FileNotFoundError`` if discovery finds no file.
    """

    candidates: Iterable[Path] = [Path(path)] if path is not None else _candidate_paths()
    for candidate in candidates:
        if candidate.is_file():
            raw = _load_toml(candidate)
            section = raw.get("bridge", {})
            if not isinstance(section, dict):
                section = {}
            return _apply_env_overrides(_settings_from_section(section, source_path=candidate))
        if path is not None:
            raise FileNotFoundError(f"Configuration file '{candidate}' does not exist.")

    if strict:
        raise FileNotFoundError("No bridge configuration found. Set REST_BRIDGE_CONFIG_PATH or create .secrets/bridge.toml.")

    return _apply_env_overrides(BridgeSettings())
