"""Tests for array, tuple, record, map and set schemas."""

import pytest

from schemata import IssueCode, SchemaDefinitionError, s


def _paths(result):
    return [issue.path for issue in result.error.issues]


def test_array_validates_every_element():
    """A bad element does not stop the others from being checked."""
    result = s.array(s.number()).safe_parse([1, "a", 3, "b"])
    assert _paths(result) == [[1], [3]]


def test_array_accepts_tuples_and_returns_lists():
    assert s.array(s.number()).parse((1, 2)) == [1, 2]


def test_array_size_constraints():
    assert s.array(s.string()).nonempty().safe_parse([]).error.issues[0].code == IssueCode.TOO_SMALL
    assert not s.array(s.string()).max(1).is_valid(["a", "b"])
    assert s.array(s.string()).length(2).is_valid(["a", "b"])


def test_array_size_and_element_issues_aggregate():
    result = s.array(s.number()).min(3).safe_parse(["x"])
    codes = [issue.code for issue in result.error.issues]
    assert codes == [IssueCode.TOO_SMALL, IssueCode.INVALID_TYPE]


def test_schema_array_shortcut():
    assert s.string().array().parse(["a"]) == ["a"]


def test_array_element_must_be_schema():
    with pytest.raises(SchemaDefinitionError):
        s.array(str)


def test_tuple_fixed_items():
    schema = s.tuple([s.string(), s.number()])
    assert schema.parse(["a", 1]) == ["a", 1]
    assert schema.safe_parse(["a"]).error.issues[0].code == IssueCode.TOO_SMALL
    assert schema.safe_parse(["a", 1, 2]).error.issues[0].code == IssueCode.TOO_BIG
    assert _paths(schema.safe_parse([1, "a"])) == [[0], [1]]


def test_tuple_optional_trailing_items():
    schema = s.tuple([s.string(), s.number().optional()])
    assert schema.min_length == 1
    assert schema.parse(["a"]) == ["a"]


def test_tuple_rest():
    schema = s.tuple([s.string()], rest=s.number())
    assert schema.parse(["a", 1, 2]) == ["a", 1, 2]
    assert _paths(schema.safe_parse(["a", 1, "x"])) == [[2]]


def test_record_per_key_paths():
    schema = s.record(s.number())
    assert schema.parse({"a": 1}) == {"a": 1}
    assert _paths(schema.safe_parse({"a": 1, "b": "x"})) == [["b"]]


def test_record_with_key_schema():
    schema = s.record(s.string().min(2), s.number())
    result = schema.safe_parse({"a": 1})
    assert result.error.issues[0].code == IssueCode.TOO_SMALL
    assert result.error.issues[0].path == ["a"]


def test_map_paths_address_key_or_value():
    schema = s.map(s.string(), s.number())
    assert schema.parse({"a": 1}) == {"a": 1}
    result = schema.safe_parse({"a": 1, 2: "x"})
    assert _paths(result) == [[1, "key"], [1, "value"]]


def test_map_size():
    assert not s.map(s.string(), s.number()).min(2).is_valid({"a": 1})
    assert s.map(s.string(), s.number()).size(1).is_valid({"a": 1})


def test_set():
    schema = s.set(s.number())
    assert schema.parse({1, 2}) == {1, 2}
    assert schema.parse(frozenset({3})) == {3}
    assert not schema.is_valid([1, 2])
    assert not schema.nonempty().is_valid(set())
    assert not schema.max(1).is_valid({1, 2})


def test_set_reports_unhashable_elements():
    result = s.set(s.string().transform(list)).safe_parse({"ab"})
    issue = result.error.issues[0]
    assert issue.code == IssueCode.INVALID_TYPE
    assert issue.path == [0]
    assert s.set(s.string().transform(str.upper)).parse({"ab"}) == {"AB"}
