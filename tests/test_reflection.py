"""Tests for JSON-Schema reflection."""

from datetime import datetime

from schemata import ReflectionOptions, s
from schemata._internal.canonical_json import canonical_dumps


def test_primitive_mappings():
    assert s.string().min(1).max(5).regex("^a").to_structural_schema() == {
        "type": "string", "minLength": 1, "maxLength": 5, "pattern": "^a",
    }
    assert s.number().gte(0).lt(10).multiple_of(2).to_structural_schema() == {
        "type": "number", "minimum": 0, "exclusiveMaximum": 10, "multipleOf": 2,
    }
    assert s.int().to_structural_schema() == {"type": "integer"}
    assert s.boolean().to_structural_schema() == {"type": "boolean"}
    assert s.date().to_structural_schema() == {"type": "string", "format": "date-time"}
    assert s.null().to_structural_schema() == {"type": "null"}
    assert s.never().to_structural_schema() == {"not": {}}
    assert s.any().to_structural_schema() == {}
    assert s.literal("a").to_structural_schema() == {"type": "string", "const": "a"}
    assert s.enum(["a", "b"]).to_structural_schema() == {"type": "string", "enum": ["a", "b"]}


def test_object_mapping_required_and_additional_properties():
    schema = s.object({
        "name": s.string(),
        "age": s.number().optional(),
        "role": s.string().default("user"),
    }).strict()
    assert schema.to_structural_schema() == {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "age": {"type": "number"},
            "role": {"type": "string", "default": "user"},
        },
        "required": ["name"],
        "additionalProperties": False,
    }


def test_nullable_mapping():
    assert s.string().nullable().to_structural_schema() == {"type": ["string", "null"]}
    named = s.string().id("Name")
    assert s.object({"n": named.nullable()}).to_structural_schema()["properties"]["n"] == {
        "anyOf": [{"$ref": "#/$defs/Name"}, {"type": "null"}],
    }


def test_container_mappings():
    assert s.array(s.string()).min(1).to_structural_schema() == {
        "type": "array", "items": {"type": "string"}, "minItems": 1,
    }
    assert s.tuple([s.string(), s.number()]).to_structural_schema() == {
        "type": "array",
        "prefixItems": [{"type": "string"}, {"type": "number"}],
        "items": False,
        "maxItems": 2,
        "minItems": 2,
    }
    assert s.record(s.number()).to_structural_schema() == {
        "type": "object", "additionalProperties": {"type": "number"},
    }


def test_union_intersection_mappings():
    assert s.union([s.string(), s.number()]).to_structural_schema() == {
        "anyOf": [{"type": "string"}, {"type": "number"}],
    }
    assert s.intersection(s.string(), s.string().min(1)).to_structural_schema() == {
        "allOf": [{"type": "string"}, {"type": "string", "minLength": 1}],
    }


def test_discriminated_union_mapping():
    a = s.object({"kind": s.literal("a")})
    b = s.object({"kind": s.literal("b")})
    reflected = s.discriminated_union("kind", [a, b]).to_structural_schema()
    assert reflected["discriminator"] == {"propertyName": "kind"}
    assert len(reflected["oneOf"]) == 2


def test_effects_reflect_their_input_side():
    base = {"type": "string"}
    assert s.string().transform(len).to_structural_schema() == base
    assert s.string().refine(bool).to_structural_schema() == base
    assert s.string().readonly().to_structural_schema() == base
    assert s.string().catch("x").to_structural_schema() == base
    assert s.string().optional().to_structural_schema() == base


def test_description_and_examples():
    schema = s.string().describe("A name").example("Ada")
    assert schema.to_structural_schema() == {
        "type": "string", "description": "A name", "examples": ["Ada"],
    }


def test_named_schema_is_expanded_once_and_referenced():
    address = s.object({"city": s.string()}).id("Address")
    person = s.object({"home": address, "work": address})
    reflected = person.to_structural_schema()
    assert reflected["$defs"] == {
        "Address": {"type": "object", "properties": {"city": {"type": "string"}}, "required": ["city"]},
    }
    assert reflected["properties"]["home"] == {"$ref": "#/$defs/Address"}
    assert reflected["properties"]["work"] == {"$ref": "#/$defs/Address"}


def test_named_root_becomes_a_reference():
    reflected = s.string().id("Name").to_structural_schema()
    assert reflected == {"$defs": {"Name": {"type": "string"}}, "$ref": "#/$defs/Name"}


def test_recursive_named_lazy_schema_terminates():
    node = s.object({
        "value": s.number(),
        "children": s.array(s.lazy(lambda: node)),
    }).id("Node")
    reflected = node.to_structural_schema()
    assert list(reflected["$defs"]) == ["Node"]
    assert reflected["$defs"]["Node"]["properties"]["children"]["items"] == {"$ref": "#/$defs/Node"}


def test_reflection_calls_are_independent():
    """Cycle state never leaks between calls on the same schema."""
    named = s.string().id("Name")
    schema = s.object({"a": named})
    assert schema.to_structural_schema() == schema.to_structural_schema()


def test_reflection_options():
    named = s.string().id("Name")
    options = ReflectionOptions(ref_template="#/components/schemas/{name}", defs_key="definitions")
    reflected = s.object({"a": named}).to_structural_schema(options)
    assert reflected["definitions"] == {"Name": {"type": "string"}}
    assert reflected["properties"]["a"] == {"$ref": "#/components/schemas/Name"}


def test_to_json_schema_alias():
    assert s.string().to_json_schema() == {"type": "string"}


def test_default_is_reflected_as_json():
    reflected = s.date().default(datetime(2020, 1, 1)).to_structural_schema()
    assert reflected["default"] == "2020-01-01T00:00:00"
    assert '"default":"2020-01-01T00:00:00"' in canonical_dumps(reflected)
