"""
Value types exchanged between the bridge and adapters.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

Scalar = Union[str, int, float, bool, None]


@dataclass(frozen=True, slots=True)
class BridgeRequest:
    """
    A single count/retrieve/search request.

    Attributes
    ----------
    structure:
        Name of the targeted structure; must be in the adapter's allow-list.
    query:
        Query template, possibly containing ``<%=parameter["Name"]%>`` placeholders.
    parameters:
        Values bound to placeholder names.
    fields:
        Field names to project; empty means every field.
    """

    structure: str
    query: str = ""
    parameters: Mapping[str, str] = field(default_factory=dict)
    fields: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Count:
    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Count must be non-negative.")

    def __int__(self) -> int:
        return self.value


def _to_scalar(value: Any) -> Scalar:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


@dataclass(frozen=True, slots=True)
class Record:
    """One remote entity as a flat ``field -> scalar`` mapping."""

    values: Mapping[str, Scalar] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], fields: Optional[Sequence[str]] = None) -> "Record":
        """
        Build a record from a decoded JSON object.

        When ``fields`` is non-empty only those fields are kept, in the requested
        order; requested fields missing from ``payload`` map to ``None``. Nested
        objects and arrays are stored as compact JSON strings.
        """

        if fields:
            projected: Dict[str, Scalar] = {name: _to_scalar(payload.get(name)) for name in fields}
        else:
            projected = {str(key): _to_scalar(value) for key, value in payload.items()}
        return cls(values=projected)

    def get(self, name: str, default: Scalar = None) -> Scalar:
        return self.values.get(name, default)

    def __getitem__(self, name: str) -> Scalar:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def to_dict(self) -> Dict[str, Scalar]:
        return dict(self.values)


@dataclass(frozen=True, slots=True)
class RecordList:
    """A page of records plus string metadata (``count`` and ``size``)."""

    fields: Sequence[str]
    records: Sequence[Record]
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    def to_dict(self) -> Dict[str, Any]:
        records: List[Dict[str, Scalar]] = [record.to_dict() for record in self.records]
        return {"fields": list(self.fields), "records": records, "metadata": dict(self.metadata)}
