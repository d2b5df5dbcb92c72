"""Union, discriminated union and intersection schemas."""

import logging
from collections.abc import Mapping as MappingABC
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

from schemata.codes import IssueCode, SchemaType
from schemata.errors import SchemaDefinitionError
from schemata.kernel.context import MISSING, ParseContext, type_name
from schemata.kernel.reflection import JSONSchema, RefTracker
from schemata.kernel.schema import Schema, WrapperSchema
from schemata.schemas.object import ObjectSchema
from schemata.schemas.primitives import literal_values


logger = logging.getLogger(__name__)


class UnionSchema(Schema):
    """First option (in declared order) that validates cleanly wins."""

    schema_type = SchemaType.UNION

    def __init__(self, options: Sequence[Schema]):
        super().__init__()
        options = tuple(options)
        if not options:
            raise SchemaDefinitionError("union() requires at least one option")
        for option in options:
            if not isinstance(option, Schema):
                raise SchemaDefinitionError(f"Union option must be a Schema, got {type(option).__name__}")
        self._options = options

    @property
    def options(self) -> Tuple[Schema, ...]:
        return self._options

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        for option in self._options:
            trial = ctx.fork()
            result = option._run_pipeline(value, trial)
            if not trial.has_issues():
                return result
        expected = " | ".join(option.schema_type.value for option in self._options)
        ctx.add_issue(
            IssueCode.INVALID_UNION,
            "Invalid input: no union option matched",
            expected=expected,
            received=type_name(value),
        )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"anyOf": [option._reflect(tracker) for option in self._options]}


def _object_shape(schema: Schema) -> Optional[ObjectSchema]:
    while isinstance(schema, WrapperSchema):
        schema = schema.unwrap()
    return schema if isinstance(schema, ObjectSchema) else None


def _lookup_key(value: Any) -> Tuple[bool, Hashable]:
    # True == 1 in a dict; the flag keeps boolean and numeric discriminators apart
    return (isinstance(value, bool), value)


class DiscriminatedUnionSchema(Schema):
    """Object union dispatched in O(1) on a literal discriminator field.

    The lookup map is built at construction. A branch whose shape does not
    declare the discriminator as a literal (or enum) raises
    ``SchemaDefinitionError`` when ``strict`` is true; with ``strict=False``
    the branch is excluded from dispatch and a warning is logged.
    """

    schema_type = SchemaType.DISCRIMINATED_UNION

    def __init__(self, discriminator: str, options: Sequence[Schema], strict: bool = True):
        super().__init__()
        self._discriminator = discriminator
        self._options = tuple(options)
        self._strict = strict
        if not self._options:
            raise SchemaDefinitionError("discriminated_union() requires at least one option")
        self._lookup: Dict[Tuple[bool, Hashable], Schema] = {}
        for index, option in enumerate(self._options):
            if not isinstance(option, Schema):
                raise SchemaDefinitionError(f"Union option must be a Schema, got {type(option).__name__}")
            values = self._discriminator_values(option)
            if not values:
                reason = f"Option {index} does not declare discriminator '{discriminator}' as a literal"
                if strict:
                    raise SchemaDefinitionError(reason)
                logger.warning(f"{reason}; excluding it from dispatch")
                continue
            for value in values:
                key = _lookup_key(value)
                if key in self._lookup:
                    raise SchemaDefinitionError(
                        f"Duplicate discriminator value {value!r} for '{discriminator}'"
                    )
                self._lookup[key] = option

    def _discriminator_values(self, option: Schema) -> Tuple[Any, ...]:
        shape = _object_shape(option)
        if shape is None:
            return ()
        field = shape.shape.get(self._discriminator)
        if field is None:
            return ()
        return tuple(literal_values(field))

    @property
    def discriminator(self) -> str:
        return self._discriminator

    @property
    def options(self) -> Tuple[Schema, ...]:
        return self._options

    @property
    def strict(self) -> bool:
        return self._strict

    def option_for(self, value: Any) -> Optional[Schema]:
        """Branch selected by discriminator ``value`` (None when unmatched)."""
        try:
            return self._lookup.get(_lookup_key(value))
        except TypeError:
            return None

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, MappingABC):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected object, received {type_name(value)}",
                expected="object",
                received=type_name(value),
            )
            return value
        tag = value.get(self._discriminator, MISSING)
        option = None if tag is MISSING else self.option_for(tag)
        if option is None:
            expected = " | ".join(repr(key[1]) for key in self._lookup)
            ctx.add_issue(
                IssueCode.INVALID_UNION,
                f"Invalid discriminator value. Expected {expected}",
                path=[self._discriminator],
                expected=expected,
                received=type_name(tag),
            )
            return value
        return option._run_pipeline(value, ctx)

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        dispatched: List[Schema] = []
        for option in self._options:
            if option in self._lookup.values() and option not in dispatched:
                dispatched.append(option)
        return {
            "oneOf": [option._reflect(tracker) for option in dispatched],
            "discriminator": {"propertyName": self._discriminator},
        }


class _MergeConflict(Exception):
    pass


def merge_values(left: Any, right: Any) -> Any:
    """Merge the two outputs of an intersection.

    Mappings merge key-wise (recursively), equal-length sequences merge
    element-wise and anything else must be equal.

    Raises:
        _MergeConflict: when the outputs cannot be reconciled
    """
    if left is right:
        return left
    if isinstance(left, MappingABC) and isinstance(right, MappingABC):
        merged = dict(left)
        for key, item in right.items():
            merged[key] = merge_values(left[key], item) if key in left else item
        return merged
    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            raise _MergeConflict()
        return [merge_values(a, b) for a, b in zip(left, right)]
    if type(left) is type(right) and left == right:
        return left
    raise _MergeConflict()


class IntersectionSchema(Schema):
    """Value must satisfy both sides; issues from both sides are reported."""

    schema_type = SchemaType.INTERSECTION

    def __init__(self, left: Schema, right: Schema):
        super().__init__()
        for side in (left, right):
            if not isinstance(side, Schema):
                raise SchemaDefinitionError(f"Intersection side must be a Schema, got {type(side).__name__}")
        self._left = left
        self._right = right

    @property
    def left(self) -> Schema:
        return self._left

    @property
    def right(self) -> Schema:
        return self._right

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        mark = ctx.issue_count
        left = self._left._run_pipeline(value, ctx)
        right = self._right._run_pipeline(value, ctx)
        if ctx.issue_count > mark:
            return value
        try:
            return merge_values(left, right)
        except _MergeConflict:
            ctx.add_issue(IssueCode.INVALID_INTERSECTION, "Intersection results could not be merged")
            return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"allOf": [self._left._reflect(tracker), self._right._reflect(tracker)]}
