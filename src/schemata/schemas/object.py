"""Object schema: a fixed shape of keyed child schemas plus an unknown-key policy."""

from collections.abc import Mapping as MappingABC
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional

from schemata.codes import IssueCode, SchemaType
from schemata.errors import SchemaDefinitionError
from schemata.kernel.context import MISSING, ParseContext, type_name
from schemata.kernel.reflection import JSONSchema, RefTracker
from schemata.kernel.schema import OptionalSchema, Schema, unwrap_presence


UnknownKeys = Literal["strip", "strict", "passthrough"]


def is_plain_object(value: Any) -> bool:
    return isinstance(value, MappingABC)


class ObjectSchema(Schema):
    """Validates a mapping against a shape.

    Unknown keys are stripped by default; ``strict()`` reports them as one
    aggregated issue, ``passthrough()`` copies them through and
    ``catchall(schema)`` validates each of them against ``schema``.
    """

    schema_type = SchemaType.OBJECT

    def __init__(self, shape: Mapping[str, Schema]):
        super().__init__()
        for key, child in shape.items():
            if not isinstance(child, Schema):
                raise SchemaDefinitionError(
                    f"Shape entry '{key}' must be a Schema, got {type(child).__name__}"
                )
        self._shape: Mapping[str, Schema] = MappingProxyType(dict(shape))
        self._unknown_keys: UnknownKeys = "strip"
        self._catchall: Optional[Schema] = None

    @property
    def shape(self) -> Mapping[str, Schema]:
        return self._shape

    @property
    def unknown_keys(self) -> UnknownKeys:
        return self._unknown_keys

    @property
    def catchall_schema(self) -> Optional[Schema]:
        return self._catchall

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not is_plain_object(value):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected object, received {type_name(value)}",
                expected="object",
                received=type_name(value),
            )
            return value

        result: Dict[str, Any] = {}
        for key, child in self._shape.items():
            present = key in value
            if not present and not child._is_optional_key():
                ctx.add_issue(
                    IssueCode.MISSING_PROPERTY,
                    f'Missing required property "{key}"',
                    path=[key],
                    expected=child.schema_type.value,
                    received="undefined",
                )
                continue
            ctx.push_path(key)
            parsed = child._run_pipeline(value[key] if present else MISSING, ctx)
            ctx.pop_path()
            if parsed is not MISSING:
                result[key] = parsed

        unknown = [key for key in value.keys() if key not in self._shape]
        if unknown:
            if self._catchall is not None:
                for key in unknown:
                    ctx.push_path(key)
                    result[key] = self._catchall._run_pipeline(value[key], ctx)
                    ctx.pop_path()
            elif self._unknown_keys == "strict":
                listed = ", ".join(f'"{key}"' for key in unknown)
                ctx.add_issue(IssueCode.UNRECOGNIZED_KEYS, f"Unrecognized key(s) in object: {listed}")
            elif self._unknown_keys == "passthrough":
                for key in unknown:
                    result[key] = value[key]
        return result

    # -- unknown-key policy -------------------------------------------------

    def strict(self) -> "ObjectSchema":
        return self._with(_unknown_keys="strict", _catchall=None)

    def strip(self) -> "ObjectSchema":
        return self._with(_unknown_keys="strip", _catchall=None)

    def passthrough(self) -> "ObjectSchema":
        return self._with(_unknown_keys="passthrough", _catchall=None)

    def catchall(self, schema: Schema) -> "ObjectSchema":
        """Validate every unknown key against ``schema`` (overrides strict/passthrough)."""
        return self._with(_unknown_keys="strip", _catchall=schema)

    # -- derivations --------------------------------------------------------

    def _derive(self, shape: Mapping[str, Schema]) -> "ObjectSchema":
        derived = ObjectSchema(shape)
        derived._unknown_keys = self._unknown_keys
        derived._catchall = self._catchall
        return derived

    def _require_keys(self, keys) -> None:
        unknown = [key for key in keys if key not in self._shape]
        if unknown:
            raise SchemaDefinitionError(f"Unknown keys for this object shape: {unknown}")

    def extend(self, shape: Mapping[str, Schema]) -> "ObjectSchema":
        return self._derive({**self._shape, **shape})

    def merge(self, other: "ObjectSchema") -> "ObjectSchema":
        """Combine shapes; ``other`` wins on key conflicts and supplies the unknown-key policy."""
        return other._derive({**self._shape, **other.shape})

    def pick(self, *keys: str) -> "ObjectSchema":
        self._require_keys(keys)
        return self._derive({key: child for key, child in self._shape.items() if key in keys})

    def omit(self, *keys: str) -> "ObjectSchema":
        self._require_keys(keys)
        return self._derive({key: child for key, child in self._shape.items() if key not in keys})

    def partial(self, *keys: str) -> "ObjectSchema":
        """Make every key (or only ``keys``) optional."""
        self._require_keys(keys)
        shape = {}
        for key, child in self._shape.items():
            if (not keys or key in keys) and not isinstance(child, OptionalSchema):
                child = child.optional()
            shape[key] = child
        return self._derive(shape)

    def required(self, *keys: str) -> "ObjectSchema":
        """Strip optional/default wrappers from every key (or only ``keys``)."""
        self._require_keys(keys)
        shape = {}
        for key, child in self._shape.items():
            shape[key] = unwrap_presence(child) if (not keys or key in keys) else child
        return self._derive(shape)

    def keys(self) -> List[str]:
        return list(self._shape)

    def keyof(self):
        """Enum schema over this shape's keys."""
        from schemata.schemas.primitives import EnumSchema
        if not self._shape:
            raise SchemaDefinitionError("keyof() requires a non-empty shape")
        return EnumSchema(list(self._shape))

    # -- reflection ---------------------------------------------------------

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        properties: Dict[str, JSONSchema] = {}
        required: List[str] = []
        for key, child in self._shape.items():
            properties[key] = child._reflect(tracker)
            if not child._is_optional_key():
                required.append(key)
        schema: JSONSchema = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        if self._catchall is not None:
            schema["additionalProperties"] = self._catchall._reflect(tracker)
        elif self._unknown_keys == "strict":
            schema["additionalProperties"] = False
        return schema
