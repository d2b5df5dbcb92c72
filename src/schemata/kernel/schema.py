"""Schema node base class, pipeline entry points and wrapper/effect schemas.

Every modifier returns a new node; nodes are never mutated after
construction, so one schema instance can be shared by any number of
concurrent callers. Pipeline ordering comes purely from composition: a
wrapper first runs the pipeline it wraps and only then applies its own
stage, and only when the wrapped run added no issues.
"""

import copy
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import to_jsonable_python

from schemata.codes import IssueCode, SchemaType
from schemata.errors import ParseError, PathSegment
from schemata.kernel.context import MISSING, ParseContext, RefinementContext
from schemata.kernel.registry import get_registry
from schemata.kernel.reflection import JSONSchema, RefTracker, ReflectionOptions, reflect, to_structural_schema
from schemata.result import SafeParseResult


class SchemaMetadata(BaseModel):
    """Read-only view of a schema's identity metadata."""
    type: SchemaType
    id: Optional[str] = None
    description: Optional[str] = None
    meta: Dict[str, Any] = Field(default_factory=dict)
    examples: List[Any] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


@dataclass(frozen=True)
class CatchInfo:
    """Passed to callable ``catch`` fallbacks."""
    error: ParseError
    input: Any


class Schema:
    """Base contract implemented by every schema type.

    Subclasses implement ``_parse`` (type check plus constraints) and
    ``_structural`` (their JSON-Schema fragment). Everything else, including
    the parse entry points and the universal modifiers, lives here.
    """

    schema_type: SchemaType = SchemaType.UNKNOWN

    def __init__(self):
        self._name: Optional[str] = None
        self._description: Optional[str] = None
        self._meta: Mapping[str, Any] = MappingProxyType({})
        self._examples: Tuple[Any, ...] = ()

    # -- pipeline -----------------------------------------------------------

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        """Validate ``value``. The return value is discarded when ``ctx`` gained issues."""
        raise NotImplementedError

    def _run_pipeline(self, value: Any, ctx: ParseContext) -> Any:
        return self._parse(value, ctx)

    def _is_optional_key(self) -> bool:
        """Whether an absent object key may be handed to this schema.

        Only optional and defaulted schemas qualify; brand and readonly are
        seen through, every other wrapper makes the key required.
        """
        return False

    def parse(self, value: Any = MISSING) -> Any:
        """Validate ``value`` and return the parsed output.

        Raises:
            ParseError: carrying every issue collected during the run
        """
        ctx = ParseContext()
        result = self._run_pipeline(value, ctx)
        if ctx.has_issues():
            raise ParseError(ctx.issues)
        return result

    def safe_parse(self, value: Any = MISSING) -> SafeParseResult:
        """Validate ``value`` without raising for validation failures."""
        ctx = ParseContext()
        try:
            data = self._run_pipeline(value, ctx)
        except ParseError as e:
            return SafeParseResult(ok=False, error=e)
        if ctx.has_issues():
            return SafeParseResult(ok=False, error=ParseError(ctx.issues))
        return SafeParseResult(ok=True, data=data)

    def is_valid(self, value: Any = MISSING) -> bool:
        return self.safe_parse(value).ok

    # -- cloning ------------------------------------------------------------

    def _clone(self) -> "Schema":
        # Shallow copy is enough: all per-node state is immutable or replaced on write.
        return copy.copy(self)

    def _with(self, **changes: Any) -> "Schema":
        clone = self._clone()
        for attr, value in changes.items():
            setattr(clone, attr, value)
        return clone

    # -- metadata -----------------------------------------------------------

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def examples(self) -> Tuple[Any, ...]:
        return self._examples

    @property
    def meta_data(self) -> Mapping[str, Any]:
        return self._meta

    @property
    def metadata(self) -> SchemaMetadata:
        return SchemaMetadata(
            type=self.schema_type,
            id=self._name,
            description=self._description,
            meta=dict(self._meta),
            examples=list(self._examples),
        )

    def id(self, name: str) -> "Schema":
        """Name this schema and register the named clone in the schema registry."""
        clone = self._with(_name=name)
        get_registry().register(name, clone)
        return clone

    def describe(self, description: str) -> "Schema":
        return self._with(_description=description)

    def meta(self, data: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "Schema":
        merged = dict(self._meta)
        merged.update(data or {})
        merged.update(kwargs)
        return self._with(_meta=MappingProxyType(merged))

    def example(self, value: Any) -> "Schema":
        return self._with(_examples=self._examples + (value,))

    # -- reflection ---------------------------------------------------------

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        raise NotImplementedError

    def _reflect(self, tracker: RefTracker) -> JSONSchema:
        return reflect(self, tracker)

    def to_structural_schema(self, options: Optional[ReflectionOptions] = None) -> JSONSchema:
        """JSON-Schema (2020-12 / OpenAPI 3.1) description of this schema."""
        return to_structural_schema(self, options)

    to_json_schema = to_structural_schema

    # -- wrappers -----------------------------------------------------------

    def optional(self) -> "OptionalSchema":
        return OptionalSchema(self)

    def nullable(self) -> "NullableSchema":
        return NullableSchema(self)

    def nullish(self) -> "OptionalSchema":
        return OptionalSchema(NullableSchema(self))

    def default(self, value: Any) -> "DefaultSchema":
        """Substitute ``value`` (or ``value()`` when callable) for an absent input."""
        return DefaultSchema(self, value)

    def refine(
        self,
        predicate: Callable[[Any], bool],
        message: Optional[str] = None,
        path: Optional[Sequence[PathSegment]] = None,
    ) -> "RefinedSchema":
        return RefinedSchema(self, predicate, message, path)

    def super_refine(self, refinement: Callable[[Any, RefinementContext], None]) -> "SuperRefinedSchema":
        return SuperRefinedSchema(self, refinement)

    check = super_refine

    def transform(self, fn: Callable[[Any], Any]) -> "TransformSchema":
        return TransformSchema(self, fn)

    def pipe(self, schema: "Schema") -> "PipeSchema":
        return PipeSchema(self, schema)

    def catch(self, fallback: Any) -> "CatchSchema":
        return CatchSchema(self, fallback)

    def brand(self, brand: Optional[str] = None) -> "BrandedSchema":
        return BrandedSchema(self, brand)

    def readonly(self) -> "ReadonlySchema":
        return ReadonlySchema(self)

    def array(self):
        from schemata.schemas.containers import ArraySchema
        return ArraySchema(self)

    def or_(self, other: "Schema"):
        from schemata.schemas.unions import UnionSchema
        return UnionSchema([self, other])

    def and_(self, other: "Schema"):
        from schemata.schemas.unions import IntersectionSchema
        return IntersectionSchema(self, other)

    def __repr__(self) -> str:
        if self._name:
            return f"{type(self).__name__}(id={self._name!r})"
        return f"{type(self).__name__}()"


class WrapperSchema(Schema):
    """A schema that delegates to one inner schema and adds one stage."""

    def __init__(self, inner: Schema):
        super().__init__()
        if not isinstance(inner, Schema):
            raise TypeError(f"Expected a Schema, got {type(inner).__name__}")
        self._inner = inner

    @property
    def schema_type(self) -> SchemaType:
        return self._inner.schema_type

    def unwrap(self) -> Schema:
        return self._inner

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return self._inner._reflect(tracker)


class OptionalSchema(WrapperSchema):
    """Short-circuits on an absent value; otherwise delegates."""

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            return MISSING
        return self._inner._run_pipeline(value, ctx)

    def _is_optional_key(self) -> bool:
        return True


class NullableSchema(WrapperSchema):
    """Short-circuits on ``None``; otherwise delegates."""

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is None:
            return None
        return self._inner._run_pipeline(value, ctx)

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        inner = self._inner._reflect(tracker)
        inner_type = inner.get("type")
        if isinstance(inner_type, str) and "$ref" not in inner:
            return {**inner, "type": [inner_type, "null"]}
        return {"anyOf": [inner, {"type": "null"}]}


class DefaultSchema(WrapperSchema):
    """Substitutes a default for an absent value, then runs the inner pipeline."""

    def __init__(self, inner: Schema, default: Any):
        super().__init__(inner)
        self._default = default

    def _resolve_default(self) -> Any:
        return self._default() if callable(self._default) else self._default

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            value = self._resolve_default()
        return self._inner._run_pipeline(value, ctx)

    def _is_optional_key(self) -> bool:
        return True

    def remove_default(self) -> Schema:
        return self._inner

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {**self._inner._reflect(tracker), "default": to_jsonable_python(self._resolve_default())}


class RefinedSchema(WrapperSchema):
    """Single boolean check on the parsed value; one ``custom`` issue on failure."""

    def __init__(
        self,
        inner: Schema,
        predicate: Callable[[Any], bool],
        message: Optional[str] = None,
        path: Optional[Sequence[PathSegment]] = None,
    ):
        super().__init__(inner)
        self._predicate = predicate
        self._message = message or "Custom validation failed"
        self._path = tuple(path) if path else ()

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        mark = ctx.issue_count
        result = self._inner._run_pipeline(value, ctx)
        if ctx.issue_count > mark:
            return result
        if not self._predicate(result):
            ctx.add_issue(IssueCode.CUSTOM, self._message, path=self._path)
        return result


class SuperRefinedSchema(WrapperSchema):
    """Hands the parsed value and a ``RefinementContext`` to a callback."""

    def __init__(self, inner: Schema, refinement: Callable[[Any, RefinementContext], None]):
        super().__init__(inner)
        self._refinement = refinement

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        mark = ctx.issue_count
        result = self._inner._run_pipeline(value, ctx)
        if ctx.issue_count > mark:
            return result
        self._refinement(result, RefinementContext(ctx))
        return result


class TransformSchema(WrapperSchema):
    """Maps a fully validated value to a new output value.

    The transform function must not fail. A ``ParseError`` raised inside it
    (typically from parsing with another schema) is folded into the run;
    any other exception is a programmer error and propagates.
    """

    def __init__(self, inner: Schema, fn: Callable[[Any], Any]):
        super().__init__(inner)
        self._fn = fn

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        mark = ctx.issue_count
        result = self._inner._run_pipeline(value, ctx)
        if ctx.issue_count > mark:
            return result
        try:
            return self._fn(result)
        except ParseError as e:
            ctx.adopt(e.issues)
            return result


class PipeSchema(WrapperSchema):
    """Feeds the output of the first schema into the second."""

    def __init__(self, first: Schema, second: Schema):
        super().__init__(first)
        if not isinstance(second, Schema):
            raise TypeError(f"Expected a Schema, got {type(second).__name__}")
        self._second = second

    @property
    def schema_type(self) -> SchemaType:
        return self._second.schema_type

    @property
    def output_schema(self) -> Schema:
        return self._second

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        mark = ctx.issue_count
        intermediate = self._inner._run_pipeline(value, ctx)
        if ctx.issue_count > mark:
            return intermediate
        return self._second._run_pipeline(intermediate, ctx)


class CatchSchema(WrapperSchema):
    """Replaces any failure of the inner pipeline with a fallback value."""

    def __init__(self, inner: Schema, fallback: Any):
        super().__init__(inner)
        self._fallback = fallback

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        trial = ctx.fork()
        try:
            result = self._inner._run_pipeline(value, trial)
        except ParseError as e:
            trial.adopt(e.issues)
            result = None
        if trial.has_issues():
            if callable(self._fallback):
                return self._fallback(CatchInfo(error=ParseError(trial.issues), input=value))
            return self._fallback
        return result

    def remove_catch(self) -> Schema:
        return self._inner


class BrandedSchema(WrapperSchema):
    """Nominal tag with no runtime effect."""

    def __init__(self, inner: Schema, brand: Optional[str] = None):
        super().__init__(inner)
        self._brand = brand

    @property
    def brand_name(self) -> Optional[str]:
        return self._brand

    def _is_optional_key(self) -> bool:
        return self._inner._is_optional_key()

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        return self._inner._run_pipeline(value, ctx)


def freeze(value: Any) -> Any:
    """Shallow-freeze containers (dict, list, set); other values pass through."""
    if isinstance(value, dict):
        return MappingProxyType(value)
    if isinstance(value, list):
        return tuple(value)
    if isinstance(value, set):
        return frozenset(value)
    return value


class ReadonlySchema(WrapperSchema):
    """Freezes the output after a successful parse."""

    def _is_optional_key(self) -> bool:
        return self._inner._is_optional_key()

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        mark = ctx.issue_count
        result = self._inner._run_pipeline(value, ctx)
        if ctx.issue_count > mark:
            return result
        return freeze(result)


class PreprocessSchema(WrapperSchema):
    """Applies a function to the raw input before the inner pipeline sees it."""

    def __init__(self, fn: Callable[[Any], Any], inner: Schema):
        super().__init__(inner)
        self._fn = fn

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        try:
            value = self._fn(value)
        except ParseError as e:
            ctx.adopt(e.issues)
            return value
        return self._inner._run_pipeline(value, ctx)


def preprocess(fn: Callable[[Any], Any], schema: Schema) -> PreprocessSchema:
    """Run ``fn`` on the raw input, then validate the result with ``schema``."""
    return PreprocessSchema(fn, schema)


def unwrap_presence(schema: Schema) -> Schema:
    """Strip optional/default wrappers (used by ``ObjectSchema.required``)."""
    while isinstance(schema, (OptionalSchema, DefaultSchema)):
        schema = schema.unwrap()
    return schema


