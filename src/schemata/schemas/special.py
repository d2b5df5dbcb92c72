"""Absorbing and singleton types: any, unknown, never, void, undefined, null, nan."""

import math
from typing import Any

from schemata.codes import IssueCode, SchemaType
from schemata.kernel.context import MISSING, ParseContext, type_name
from schemata.kernel.reflection import JSONSchema, RefTracker
from schemata.kernel.schema import Schema


class AnySchema(Schema):
    schema_type = SchemaType.ANY

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {}


class UnknownSchema(AnySchema):
    schema_type = SchemaType.UNKNOWN


class NeverSchema(Schema):
    """Rejects every value."""

    schema_type = SchemaType.NEVER

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        ctx.add_issue(
            IssueCode.INVALID_TYPE,
            f"Expected never, received {type_name(value)}",
            expected="never",
            received=type_name(value),
        )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"not": {}}


class UndefinedSchema(Schema):
    """Accepts only the absent value."""

    schema_type = SchemaType.UNDEFINED

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is not MISSING:
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected undefined, received {type_name(value)}",
                expected="undefined",
                received=type_name(value),
            )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"not": {}}


class VoidSchema(UndefinedSchema):
    schema_type = SchemaType.VOID


class NullSchema(Schema):
    schema_type = SchemaType.NULL

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is not None:
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected null, received {type_name(value)}",
                expected="null",
                received=type_name(value),
            )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"type": "null"}


class NanSchema(Schema):
    """Accepts only float NaN."""

    schema_type = SchemaType.NAN

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not (isinstance(value, float) and math.isnan(value)):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected nan, received {type_name(value)}",
                expected="nan",
                received=type_name(value),
            )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"not": {}}
