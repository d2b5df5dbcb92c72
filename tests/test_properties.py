"""Behavioural guarantees and the reference scenarios."""

import pytest

from schemata import MISSING, IssueCode, ParseError, s


def test_string_min_and_pattern_both_reported():
    """Scenario: min(3) + ^[a-z]+$ on "AB" yields too_small and invalid_string."""
    result = s.string().min(3).regex(r"^[a-z]+$").safe_parse("AB")
    assert [issue.code for issue in result.error.issues] == [
        IssueCode.TOO_SMALL,
        IssueCode.INVALID_STRING,
    ]


def test_missing_required_but_not_optional():
    """Scenario: {} against {name, age?} yields one missing_property for name."""
    schema = s.object({"name": s.string(), "age": s.number().optional()})
    issues = schema.safe_parse({}).error.issues
    assert len(issues) == 1
    assert issues[0].code == IssueCode.MISSING_PROPERTY
    assert issues[0].path == ["name"]


def test_discriminated_union_scenario():
    schema = s.discriminated_union("kind", [
        s.object({"kind": s.literal("circle"), "radius": s.number()}),
        s.object({"kind": s.literal("square"), "side": s.number()}),
    ])
    assert schema.safe_parse({"kind": "circle", "radius": 5}).ok
    issues = schema.safe_parse({"kind": "triangle"}).error.issues
    assert len(issues) == 1
    assert issues[0].code == IssueCode.INVALID_UNION


def test_transform_output_and_input_side_reflection():
    """Scenario: string -> length parses to 5 and reflects as a string."""
    schema = s.string().transform(len)
    assert schema.parse("hello") == 5
    assert schema.to_structural_schema() == {"type": "string"}


def test_named_recursive_schema_reflection():
    """Scenario: Node references itself through children.items."""
    node = s.object({
        "value": s.number(),
        "children": s.array(s.lazy(lambda: node)),
    }).id("Node")
    reflected = node.to_structural_schema()
    assert set(reflected["$defs"]) == {"Node"}
    children = reflected["$defs"]["Node"]["properties"]["children"]
    assert children["items"] == {"$ref": "#/$defs/Node"}
    assert node.parse({"value": 1, "children": [{"value": 2, "children": []}]})


def test_recursive_parse_reports_deep_paths():
    node = s.object({
        "value": s.number(),
        "children": s.array(s.lazy(lambda: node)),
    }).id("Node")
    result = node.safe_parse({"value": 1, "children": [{"value": "x", "children": []}]})
    assert result.error.issues[0].path == ["children", 0, "value"]


def test_aggregation_completeness():
    schema = s.object({key: s.string() for key in ("a", "b", "c", "d")})
    issues = schema.safe_parse({}).error.issues
    assert [issue.code for issue in issues] == [IssueCode.MISSING_PROPERTY] * 4


def test_parse_raises_with_every_issue():
    schema = s.object({"a": s.string(), "b": s.string()})
    with pytest.raises(ParseError) as excinfo:
        schema.parse({})
    assert len(excinfo.value.issues) == 2


def test_refine_sees_pre_transform_value():
    seen = []
    schema = s.string().refine(lambda v: seen.append(v) or True).transform(len)
    assert schema.parse("abc") == 3
    assert seen == ["abc"]


def test_transform_never_runs_after_failed_constraint():
    calls = []
    schema = s.string().min(5).transform(lambda v: calls.append(v))
    assert not schema.is_valid("abc")
    assert calls == []


def test_optional_short_circuits_before_refinement():
    calls = []
    schema = s.string().refine(lambda v: calls.append(v) or True).optional()
    assert schema.parse() is MISSING
    assert calls == []
    schema.parse("x")
    assert calls == ["x"]


@pytest.mark.parametrize("value", [5, -1, "x", None])
def test_default_round_trip_for_failures_too(value):
    inner = s.number().positive()
    defaulted = inner.default(value).safe_parse()
    direct = inner.safe_parse(value)
    assert defaulted.ok == direct.ok
    if not direct.ok:
        assert defaulted.error.issues == direct.error.issues


def test_discriminated_union_never_runs_other_branch():
    calls = []
    a = s.object({"kind": s.literal("a")}).refine(lambda v: calls.append("a") or True)
    b = s.object({"kind": s.literal("b")}).refine(lambda v: calls.append("b") or True)
    s.discriminated_union("kind", [a, b]).parse({"kind": "a"})
    assert calls == ["a"]


def test_immutability_preserves_behaviour():
    base = s.object({"a": s.string()})
    before = base.safe_parse({"a": "x", "b": 1})
    base.strict()
    base.extend({"b": s.number()})
    after = base.safe_parse({"a": "x", "b": 1})
    assert before.data == after.data == {"a": "x"}
