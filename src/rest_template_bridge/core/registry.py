"""
Structure registry.

A structure is the name a bridge request uses to target a remote resource
collection. The registry is the adapter's allow-list: it is built once (from a
sequence of names or a YAML document) and handed to the adapter at
construction, after which it is only read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

import yaml


class RegistryLoadError(RuntimeError):
    """Raised when a structure YAML file cannot be parsed or validated."""


@dataclass(frozen=True, slots=True)
class StructureDescriptor:
    """
    A single allowed structure.

    Parameters
    ----------
    name:
        Structure name as sent by the bridge (case-sensitive).
    description:
        Short human-readable summary.
    tags:
        Free-form keywords for listing and filtering.
    """

    name: str
    description: str = ""
    tags: Sequence[str] = field(default_factory=tuple)

    def validate(self) -> None:
        if not self.name or not self.name.strip():
            raise RegistryLoadError("Structure names must be non-empty.")
        if self.name != self.name.strip():
            raise RegistryLoadError(f"Structure '{self.name}' must not have leading or trailing whitespace.")


class StructureRegistry:
    """Immutable allow-list of :class:`StructureDescriptor` entries."""

    def __init__(self, descriptors: Iterable[StructureDescriptor] = ()) -> None:
        entries: Dict[str, StructureDescriptor] = {}
        for descriptor in descriptors:
            descriptor.validate()
            if descriptor.name in entries:
                raise RegistryLoadError(f"Structure '{descriptor.name}' is declared more than once.")
            entries[descriptor.name] = descriptor
        self._entries: Mapping[str, StructureDescriptor] = entries

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "StructureRegistry":
        return cls(StructureDescriptor(name=str(name)) for name in names)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._entries

    def __iter__(self) -> Iterator[StructureDescriptor]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> Optional[StructureDescriptor]:
        return self._entries.get(name)

    def names(self) -> List[str]:
        return list(self._entries)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "StructureRegistry":
        """
        Load structures from a YAML document.

        The document is a list whose items are either plain names or mappings
        with ``name`` and optional ``description`` / ``tags`` keys.
        """

        location = Path(path)
        if not location.exists():
            raise RegistryLoadError(f"Structure file '{location}' does not exist.")

        try:
            with location.open("r", encoding="utf-8") as handle:
                payload = yaml.safe_load(handle)
        except yaml.YAMLError as exc:  # pragma: no cover - depends on PyYAML
            raise RegistryLoadError(f"Failed to parse '{location}': {exc}") from exc

        if not isinstance(payload, list):
            raise RegistryLoadError(f"Structure file '{location}' must contain a list of structures.")

        return cls(_descriptor_from_payload(entry, origin=location) for entry in payload)


def _descriptor_from_payload(entry: object, *, origin: Path) -> StructureDescriptor:
    if isinstance(entry, str):
        return StructureDescriptor(name=entry)
    if not isinstance(entry, dict):
        raise RegistryLoadError(f"Invalid entry in '{origin}': expected mapping or string, got {type(entry)!r}")
    try:
        name = str(entry["name"])
    except KeyError as exc:
        raise RegistryLoadError(f"Missing required key {exc!s} in '{origin}'.") from exc
    return StructureDescriptor(
        name=name,
        description=str(entry.get("description") or ""),
        tags=tuple(_ensure_list(entry.get("tags"))),
    )


def _ensure_list(value: object | None) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value]
    return [str(value)]
