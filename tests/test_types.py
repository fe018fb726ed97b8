from __future__ import annotations

import pytest

from rest_template_bridge.adapters.types import BridgeRequest, Count, Record, RecordList


def test_record_from_payload_keeps_all_fields_without_projection():
    record = Record.from_payload({"id": "1", "score": 2.5, "owner": {"name": "a"}, "deleted": None})

    assert record.to_dict() == {"id": "1", "score": 2.5, "owner": '{"name":"a"}', "deleted": None}


def test_record_projection_follows_requested_order():
    record = Record.from_payload({"a": 1, "b": 2, "c": 3}, ["c", "a"])

    assert list(record.to_dict()) == ["c", "a"]
    assert "b" not in record


def test_record_list_serialises_metadata():
    records = [Record.from_payload({"id": "1"})]
    page = RecordList(fields=("id",), records=records, metadata={"count": "1", "size": "1"})

    assert page.to_dict() == {"fields": ["id"], "records": [{"id": "1"}], "metadata": {"count": "1", "size": "1"}}


def test_count_rejects_negative_values():
    with pytest.raises(ValueError):
        Count(-1)


def test_bridge_request_defaults():
    request = BridgeRequest(structure="FirstStructure")

    assert request.query == ""
    assert dict(request.parameters) == {}
    assert tuple(request.fields) == ()
