"""Tests for lazy, custom and instanceof schemas."""

import pytest

from schemata import IssueCode, SchemaDefinitionError, s


def test_lazy_resolves_once():
    calls = []

    def getter():
        calls.append(1)
        return s.string()

    schema = s.lazy(getter)
    assert calls == []
    assert schema.parse("a") == "a"
    assert schema.parse("b") == "b"
    assert calls == [1]


def test_lazy_getter_must_return_schema():
    with pytest.raises(SchemaDefinitionError):
        s.lazy(lambda: "nope").parse("x")


def test_lazy_forward_reference():
    schema = s.object({"child": s.lazy(lambda: later)})
    later = s.number()
    assert schema.parse({"child": 1}) == {"child": 1}


def test_lazy_key_is_required_unless_wrapped_optional():
    required = s.object({"child": s.lazy(lambda: s.number().optional())})
    assert required.safe_parse({}).error.issues[0].code == IssueCode.MISSING_PROPERTY
    optional = s.object({"child": s.lazy(lambda: s.number()).optional()})
    assert optional.parse({}) == {}


def test_custom():
    even = s.custom(lambda v: isinstance(v, int) and v % 2 == 0, "must be even")
    assert even.parse(4) == 4
    issue = even.safe_parse(3).error.issues[0]
    assert issue.code == IssueCode.CUSTOM
    assert issue.message == "must be even"
    assert s.custom().is_valid(object())


class Point:
    pass


def test_instanceof():
    point = Point()
    assert s.instanceof(Point).parse(point) is point
    result = s.instanceof(Point).safe_parse("x")
    assert result.error.issues[0].expected == "Point"
    with pytest.raises(SchemaDefinitionError):
        s.instanceof("Point")
