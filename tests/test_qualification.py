from __future__ import annotations

import pytest

from rest_template_bridge.core.qualification import (
    QualificationParser,
    UnresolvedParameterError,
    escape_query,
    find_query_value,
    placeholder_names,
    resolve,
    split_query,
)


def test_resolve_without_placeholders_returns_template():
    template = "status=open&sort=name&&limit=10"
    assert resolve(template, {"Unused": "x"}) == template


def test_resolve_empty_template():
    assert resolve("", {}) == ""


def test_resolve_replaces_placeholder_and_keeps_surrounding_text():
    template = 'user=<%=parameter["Username"]%>&active=true'

    assert resolve(template, {"Username": "test.user"}) == "user=test.user&active=true"


def test_resolve_handles_repeated_and_multiple_placeholders():
    template = 'a=<%=parameter["A"]%>&b=<%=parameter["B"]%>&again=<%=parameter["A"]%>'

    assert resolve(template, {"A": "1", "B": "2"}) == "a=1&b=2&again=1"


def test_resolve_tolerates_whitespace_and_single_quotes():
    template = "name=<%= parameter[ 'Name' ] %>"

    assert resolve(template, {"Name": "Ada"}) == "name=Ada"


def test_resolve_missing_parameter_raises_without_partial_substitution():
    template = 'a=<%=parameter["A"]%>&b=<%=parameter["Missing"]%>'

    with pytest.raises(UnresolvedParameterError) as excinfo:
        resolve(template, {"A": "1"})

    assert excinfo.value.name == "Missing"
    assert "Missing" in str(excinfo.value)


def test_resolve_does_not_rescan_substituted_values():
    template = 'q=<%=parameter["Outer"]%>'
    value = '<%=parameter["Inner"]%>'

    assert resolve(template, {"Outer": value}) == f"q={value}"


def test_resolve_leaves_unrecognised_syntax_untouched():
    template = 'a=<%=params["A"]%>&b=<% parameter["B"] %>&c=<%=parameter[C]%>'

    assert resolve(template, {"A": "x", "B": "y", "C": "z"}) == template


def test_placeholder_names_in_order():
    template = 'x=<%=parameter["B"]%>&y=<%=parameter["A"]%>&z=<%=parameter["B"]%>'

    assert placeholder_names(template) == ["B", "A", "B"]


def test_qualification_parser_accepts_missing_parameter_map():
    parser = QualificationParser()

    assert parser.parse("id=7", None) == "id=7"


def test_split_query_splits_on_first_equals_only():
    assert split_query("a=1&token=abc==&flag&&b=") == [("a", "1"), ("token", "abc=="), ("flag", ""), ("b", "")]


def test_find_query_value_is_case_insensitive():
    query = "name=x&ID=1234abcd&other=y"

    assert find_query_value(query, "id") == "1234abcd"
    assert find_query_value(query, "missing") is None


def test_escape_query_encodes_spaces_in_keys_and_values():
    escaped = escape_query("name=John Doe&city=New York")

    assert escaped == "name=John%20Doe&city=New%20York"
    assert " " not in escaped


def test_escape_query_key_spaces_become_plus_and_reserved_values_encoded():
    escaped = escape_query(" first name =a&b&c=1=2&d=x/y?z")

    assert escaped == "first+name=a&b=&c=1%3D2&d=x%2Fy%3Fz"


def test_escape_query_empty():
    assert escape_query("") == ""


def test_escape_query_drops_empty_segments():
    assert escape_query("a=1&&b=2&") == "a=1&b=2"
