"""Container schemas: array, tuple, record, map and set.

Every element is checked; issues carry index- or key-qualified paths and a
bad element never stops the remaining ones from being validated.
"""

from collections.abc import Mapping as MappingABC
from typing import Any, Dict, Optional, Sequence, Set

from schemata.codes import IssueCode, SchemaType
from schemata.errors import PathSegment, SchemaDefinitionError
from schemata.kernel.context import MISSING, ParseContext, type_name
from schemata.kernel.reflection import JSONSchema, RefTracker
from schemata.kernel.schema import Schema
from schemata.schemas.primitives import CheckedSchema


def path_segment(key: Any) -> PathSegment:
    """Keys that are not str/int are rendered with ``str()`` in issue paths."""
    if isinstance(key, (str, int)) and not isinstance(key, bool):
        return key
    return str(key)


def _require_schema(schema: Any, role: str) -> Schema:
    if not isinstance(schema, Schema):
        raise SchemaDefinitionError(f"{role} must be a Schema, got {type(schema).__name__}")
    return schema


def _check_size(checks, size: int, noun: str, ctx: ParseContext) -> None:
    for check in checks:
        if check.kind == "min" and size < check.value:
            ctx.add_issue(IssueCode.TOO_SMALL, check.message or f"{noun} must contain at least {check.value} element(s)")
        elif check.kind == "max" and size > check.value:
            ctx.add_issue(IssueCode.TOO_BIG, check.message or f"{noun} must contain at most {check.value} element(s)")
        elif check.kind == "length" and size != check.value:
            code = IssueCode.TOO_SMALL if size < check.value else IssueCode.TOO_BIG
            ctx.add_issue(code, check.message or f"{noun} must contain exactly {check.value} element(s)")


def _size_keywords(checks, schema: JSONSchema) -> JSONSchema:
    for check in checks:
        if check.kind in ("min", "length"):
            schema["minItems"] = check.value
        if check.kind in ("max", "length"):
            schema["maxItems"] = check.value
    return schema


class ArraySchema(CheckedSchema):
    """Homogeneous list (tuples are accepted as input, lists are returned)."""

    schema_type = SchemaType.ARRAY

    def __init__(self, element: Schema):
        super().__init__()
        self._element = _require_schema(element, "Array element")

    @property
    def element(self) -> Schema:
        return self._element

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, (list, tuple)):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected array, received {type_name(value)}",
                expected="array",
                received=type_name(value),
            )
            return value
        _check_size(self._checks, len(value), "Array", ctx)
        result = []
        for index, item in enumerate(value):
            ctx.push_path(index)
            result.append(self._element._run_pipeline(item, ctx))
            ctx.pop_path()
        return result

    def min(self, n: int, message: Optional[str] = None) -> "ArraySchema":
        return self._add_check("min", n, message)

    def max(self, n: int, message: Optional[str] = None) -> "ArraySchema":
        return self._add_check("max", n, message)

    def length(self, n: int, message: Optional[str] = None) -> "ArraySchema":
        return self._add_check("length", n, message)

    def nonempty(self, message: Optional[str] = None) -> "ArraySchema":
        return self.min(1, message or "Array must contain at least 1 element(s)")

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return _size_keywords(self._checks, {"type": "array", "items": self._element._reflect(tracker)})


class TupleSchema(Schema):
    """Fixed heterogeneous prefix, optionally followed by a rest schema."""

    schema_type = SchemaType.TUPLE

    def __init__(self, items: Sequence[Schema], rest: Optional[Schema] = None):
        super().__init__()
        self._items = tuple(_require_schema(item, "Tuple item") for item in items)
        self._rest = _require_schema(rest, "Tuple rest") if rest is not None else None

    @property
    def items(self) -> Sequence[Schema]:
        return self._items

    @property
    def min_length(self) -> int:
        """Positions up to the last one that does not accept an absent value."""
        required = 0
        for index, item in enumerate(self._items):
            if not item._is_optional_key():
                required = index + 1
        return required

    def rest(self, schema: Schema) -> "TupleSchema":
        return self._with(_rest=_require_schema(schema, "Tuple rest"))

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, (list, tuple)):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected array, received {type_name(value)}",
                expected="tuple",
                received=type_name(value),
            )
            return value
        if len(value) < self.min_length:
            ctx.add_issue(IssueCode.TOO_SMALL, f"Tuple must contain at least {self.min_length} element(s)")
            return value
        if self._rest is None and len(value) > len(self._items):
            ctx.add_issue(IssueCode.TOO_BIG, f"Tuple must contain at most {len(self._items)} element(s)")
            return value

        result = []
        for index, item in enumerate(self._items):
            ctx.push_path(index)
            parsed = item._run_pipeline(value[index] if index < len(value) else MISSING, ctx)
            ctx.pop_path()
            if parsed is not MISSING:
                result.append(parsed)
        for index in range(len(self._items), len(value)):
            ctx.push_path(index)
            result.append(self._rest._run_pipeline(value[index], ctx))
            ctx.pop_path()
        return result

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        schema: JSONSchema = {
            "type": "array",
            "prefixItems": [item._reflect(tracker) for item in self._items],
        }
        if self._rest is not None:
            schema["items"] = self._rest._reflect(tracker)
        else:
            schema["items"] = False
            schema["maxItems"] = len(self._items)
        if self.min_length:
            schema["minItems"] = self.min_length
        return schema


class RecordSchema(Schema):
    """Mapping with uniformly typed values (and optionally validated keys)."""

    schema_type = SchemaType.RECORD

    def __init__(self, key_or_value: Schema, value: Optional[Schema] = None):
        super().__init__()
        if value is None:
            self._key: Optional[Schema] = None
            self._value = _require_schema(key_or_value, "Record value")
        else:
            self._key = _require_schema(key_or_value, "Record key")
            self._value = _require_schema(value, "Record value")

    @property
    def key_schema(self) -> Optional[Schema]:
        return self._key

    @property
    def value_schema(self) -> Schema:
        return self._value

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, MappingABC):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected object, received {type_name(value)}",
                expected="record",
                received=type_name(value),
            )
            return value
        result: Dict[Any, Any] = {}
        for key, item in value.items():
            ctx.push_path(path_segment(key))
            parsed_key = self._key._run_pipeline(key, ctx) if self._key is not None else key
            result[parsed_key] = self._value._run_pipeline(item, ctx)
            ctx.pop_path()
        return result

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        schema: JSONSchema = {"type": "object", "additionalProperties": self._value._reflect(tracker)}
        if self._key is not None:
            schema["propertyNames"] = self._key._reflect(tracker)
        return schema


class MapSchema(CheckedSchema):
    """Mapping with validated keys and values plus size constraints.

    Issue paths are ``[index, "key"]`` or ``[index, "value"]`` since map keys
    need not be strings.
    """

    schema_type = SchemaType.MAP

    def __init__(self, key: Schema, value: Schema):
        super().__init__()
        self._key = _require_schema(key, "Map key")
        self._value = _require_schema(value, "Map value")

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, MappingABC):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected map, received {type_name(value)}",
                expected="map",
                received=type_name(value),
            )
            return value
        _check_size(self._checks, len(value), "Map", ctx)
        result: Dict[Any, Any] = {}
        for index, (key, item) in enumerate(value.items()):
            ctx.push_path(index)
            ctx.push_path("key")
            parsed_key = self._key._run_pipeline(key, ctx)
            ctx.pop_path()
            ctx.push_path("value")
            parsed_value = self._value._run_pipeline(item, ctx)
            ctx.pop_path()
            ctx.pop_path()
            try:
                result[parsed_key] = parsed_value
            except TypeError:
                # unhashable key; already reported by the key schema or kept raw
                ctx.add_issue(IssueCode.INVALID_TYPE, "Map key must be hashable", path=[index, "key"])
        return result

    def min(self, n: int, message: Optional[str] = None) -> "MapSchema":
        return self._add_check("min", n, message)

    def max(self, n: int, message: Optional[str] = None) -> "MapSchema":
        return self._add_check("max", n, message)

    def size(self, n: int, message: Optional[str] = None) -> "MapSchema":
        return self._add_check("length", n, message)

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        schema: JSONSchema = {
            "type": "object",
            "propertyNames": self._key._reflect(tracker),
            "additionalProperties": self._value._reflect(tracker),
        }
        for check in self._checks:
            if check.kind in ("min", "length"):
                schema["minProperties"] = check.value
            if check.kind in ("max", "length"):
                schema["maxProperties"] = check.value
        return schema


class SetSchema(CheckedSchema):
    """``set``/``frozenset`` of validated elements plus size constraints."""

    schema_type = SchemaType.SET

    def __init__(self, element: Schema):
        super().__init__()
        self._element = _require_schema(element, "Set element")

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, (set, frozenset)):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected set, received {type_name(value)}",
                expected="set",
                received=type_name(value),
            )
            return value
        _check_size(self._checks, len(value), "Set", ctx)
        result: Set[Any] = set()
        for index, item in enumerate(value):
            mark = ctx.issue_count
            ctx.push_path(index)
            parsed = self._element._run_pipeline(item, ctx)
            ctx.pop_path()
            if ctx.issue_count > mark:
                continue
            try:
                result.add(parsed)
            except TypeError:
                ctx.add_issue(
                    IssueCode.INVALID_TYPE,
                    f"Set element must be hashable, received {type_name(parsed)}",
                    path=[index],
                    expected="hashable",
                    received=type_name(parsed),
                )
        return result

    def min(self, n: int, message: Optional[str] = None) -> "SetSchema":
        return self._add_check("min", n, message)

    def max(self, n: int, message: Optional[str] = None) -> "SetSchema":
        return self._add_check("max", n, message)

    def size(self, n: int, message: Optional[str] = None) -> "SetSchema":
        return self._add_check("length", n, message)

    def nonempty(self, message: Optional[str] = None) -> "SetSchema":
        return self.min(1, message)

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        schema: JSONSchema = {"type": "array", "uniqueItems": True, "items": self._element._reflect(tracker)}
        return _size_keywords(self._checks, schema)
