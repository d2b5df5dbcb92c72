"""Primitive schemas: string, number, bigint, boolean, date, symbol, literal, enum.

Each primitive runs one type check and then every constraint it carries.
A failed type check skips the constraints (they assume the right type);
otherwise every violated constraint is reported, not just the first.
"""

from __future__ import annotations

import enum
import math
import re
import unicodedata
from datetime import datetime
from typing import Any, Iterable, Optional, Pattern, Sequence, Tuple, Type, Union

from schemata.codes import IssueCode, SchemaType
from schemata.errors import SchemaDefinitionError
from schemata.kernel.checks import Check, Checks, find_check, is_multiple_of
from schemata.kernel.context import ParseContext, Symbol, type_name
from schemata.kernel.reflection import JSONSchema, RefTracker
from schemata.kernel.schema import Schema


MAX_SAFE_INTEGER = 2 ** 53 - 1


def is_number(value: Any) -> bool:
    """int or float, never bool, never NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value == value


def same_literal(a: Any, b: Any) -> bool:
    """Literal equality that keeps ``True`` apart from ``1`` and ``"1"`` apart from ``1``."""
    if isinstance(a, bool) or isinstance(b, bool) or a is None or b is None:
        return a is b
    if isinstance(a, Symbol) or isinstance(b, Symbol):
        return a is b
    if isinstance(a, str) != isinstance(b, str):
        return False
    return a == b


def literal_json_type(value: Any) -> Optional[str]:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    return None


class CheckedSchema(Schema):
    """Base for schemas that accumulate named constraints immutably."""

    def __init__(self):
        super().__init__()
        self._checks: Checks = ()

    def _add_check(self, kind: str, value: Any = None, message: Optional[str] = None):
        return self._with(_checks=self._checks + (Check(kind, value, message),))

    @property
    def checks(self) -> Checks:
        return self._checks


class StringSchema(CheckedSchema):
    """``str`` with length, pattern, affix and case constraints."""

    schema_type = SchemaType.STRING
    format_name: Optional[str] = None

    def __init__(self):
        super().__init__()
        self._normalizers: Tuple[str, ...] = ()

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, str):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected string, received {type_name(value)}",
                expected="string",
                received=type_name(value),
            )
            return value
        v = value
        for normalizer in self._normalizers:
            if normalizer == "trim":
                v = v.strip()
            elif normalizer == "lower":
                v = v.lower()
            elif normalizer == "upper":
                v = v.upper()
            elif normalizer == "normalize":
                v = unicodedata.normalize("NFC", v)
        for check in self._checks:
            self._run_check(check, v, ctx)
        self._check_format(v, ctx)
        return v

    def _run_check(self, check: Check, v: str, ctx: ParseContext) -> None:
        kind, arg = check.kind, check.value
        if kind == "min" and len(v) < arg:
            ctx.add_issue(IssueCode.TOO_SMALL, check.message or f"String must contain at least {arg} character(s)")
        elif kind == "max" and len(v) > arg:
            ctx.add_issue(IssueCode.TOO_BIG, check.message or f"String must contain at most {arg} character(s)")
        elif kind == "length" and len(v) != arg:
            code = IssueCode.TOO_SMALL if len(v) < arg else IssueCode.TOO_BIG
            ctx.add_issue(code, check.message or f"String must contain exactly {arg} character(s)")
        elif kind == "regex" and not arg.search(v):
            ctx.add_issue(IssueCode.INVALID_STRING, check.message or f"Invalid: must match /{arg.pattern}/")
        elif kind == "starts_with" and not v.startswith(arg):
            ctx.add_issue(IssueCode.INVALID_STRING, check.message or f'Invalid input: must start with "{arg}"')
        elif kind == "ends_with" and not v.endswith(arg):
            ctx.add_issue(IssueCode.INVALID_STRING, check.message or f'Invalid input: must end with "{arg}"')
        elif kind == "includes" and arg not in v:
            ctx.add_issue(IssueCode.INVALID_STRING, check.message or f'Invalid input: must include "{arg}"')
        elif kind == "uppercase" and v != v.upper():
            ctx.add_issue(IssueCode.INVALID_STRING, check.message or "Expected string to be uppercase")
        elif kind == "lowercase" and v != v.lower():
            ctx.add_issue(IssueCode.INVALID_STRING, check.message or "Expected string to be lowercase")

    def _check_format(self, v: str, ctx: ParseContext) -> None:
        """Format hook for the string-format subclasses."""
        return None

    def min(self, n: int, message: Optional[str] = None) -> "StringSchema":
        return self._add_check("min", n, message)

    def max(self, n: int, message: Optional[str] = None) -> "StringSchema":
        return self._add_check("max", n, message)

    def length(self, n: int, message: Optional[str] = None) -> "StringSchema":
        return self._add_check("length", n, message)

    def nonempty(self, message: Optional[str] = None) -> "StringSchema":
        return self.min(1, message or "String must not be empty")

    def regex(self, pattern: Union[str, Pattern], message: Optional[str] = None) -> "StringSchema":
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        return self._add_check("regex", pattern, message)

    def starts_with(self, prefix: str, message: Optional[str] = None) -> "StringSchema":
        return self._add_check("starts_with", prefix, message)

    def ends_with(self, suffix: str, message: Optional[str] = None) -> "StringSchema":
        return self._add_check("ends_with", suffix, message)

    def includes(self, substring: str, message: Optional[str] = None) -> "StringSchema":
        return self._add_check("includes", substring, message)

    def uppercase(self, message: Optional[str] = None) -> "StringSchema":
        return self._add_check("uppercase", None, message)

    def lowercase(self, message: Optional[str] = None) -> "StringSchema":
        return self._add_check("lowercase", None, message)

    def trim(self) -> "StringSchema":
        return self._with(_normalizers=self._normalizers + ("trim",))

    def to_lower_case(self) -> "StringSchema":
        return self._with(_normalizers=self._normalizers + ("lower",))

    def to_upper_case(self) -> "StringSchema":
        return self._with(_normalizers=self._normalizers + ("upper",))

    def normalize(self) -> "StringSchema":
        return self._with(_normalizers=self._normalizers + ("normalize",))

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        schema: JSONSchema = {"type": "string"}
        for check in self._checks:
            if check.kind == "min":
                schema["minLength"] = check.value
            elif check.kind == "max":
                schema["maxLength"] = check.value
            elif check.kind == "length":
                schema["minLength"] = check.value
                schema["maxLength"] = check.value
            elif check.kind == "regex":
                schema["pattern"] = check.value.pattern
        if self.format_name:
            schema["format"] = self.format_name
        return schema


class NumberSchema(CheckedSchema):
    """int or float (never bool, never NaN) with comparison and step constraints."""

    schema_type = SchemaType.NUMBER

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not is_number(value):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected number, received {type_name(value)}",
                expected="number",
                received=type_name(value),
            )
            return value
        for check in self._checks:
            self._run_check(check, value, ctx)
        return value

    def _run_check(self, check: Check, v: Any, ctx: ParseContext) -> None:
        kind, arg = check.kind, check.value
        if kind == "gte" and v < arg:
            ctx.add_issue(IssueCode.TOO_SMALL, check.message or f"Number must be greater than or equal to {arg}")
        elif kind == "gt" and v <= arg:
            ctx.add_issue(IssueCode.TOO_SMALL, check.message or f"Number must be greater than {arg}")
        elif kind == "lte" and v > arg:
            ctx.add_issue(IssueCode.TOO_BIG, check.message or f"Number must be less than or equal to {arg}")
        elif kind == "lt" and v >= arg:
            ctx.add_issue(IssueCode.TOO_BIG, check.message or f"Number must be less than {arg}")
        elif kind == "int" and not (isinstance(v, int) or v.is_integer()):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                check.message or "Expected integer, received float",
                expected="integer",
                received="float",
            )
        elif kind == "positive" and v <= 0:
            ctx.add_issue(IssueCode.TOO_SMALL, check.message or "Number must be positive")
        elif kind == "negative" and v >= 0:
            ctx.add_issue(IssueCode.TOO_BIG, check.message or "Number must be negative")
        elif kind == "nonnegative" and v < 0:
            ctx.add_issue(IssueCode.TOO_SMALL, check.message or "Number must be nonnegative")
        elif kind == "nonpositive" and v > 0:
            ctx.add_issue(IssueCode.TOO_BIG, check.message or "Number must be nonpositive")
        elif kind == "multiple_of" and not is_multiple_of(v, arg):
            ctx.add_issue(IssueCode.NOT_MULTIPLE_OF, check.message or f"Number must be a multiple of {arg}")
        elif kind == "finite" and math.isinf(v):
            ctx.add_issue(IssueCode.NOT_FINITE, check.message or "Number must be finite")
        elif kind == "safe" and not (math.isfinite(v) and abs(v) <= MAX_SAFE_INTEGER):
            code = IssueCode.TOO_SMALL if v < 0 else IssueCode.TOO_BIG
            ctx.add_issue(code, check.message or "Number must be a safe integer")

    def gte(self, n: Union[int, float], message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("gte", n, message)

    min = gte

    def gt(self, n: Union[int, float], message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("gt", n, message)

    def lte(self, n: Union[int, float], message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("lte", n, message)

    max = lte

    def lt(self, n: Union[int, float], message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("lt", n, message)

    def int(self, message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("int", None, message)

    def positive(self, message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("positive", None, message)

    def negative(self, message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("negative", None, message)

    def nonnegative(self, message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("nonnegative", None, message)

    def nonpositive(self, message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("nonpositive", None, message)

    def multiple_of(self, n: Union[int, float], message: Optional[str] = None) -> "NumberSchema":
        if n == 0:
            raise SchemaDefinitionError("multiple_of() step must be non-zero")
        return self._add_check("multiple_of", n, message)

    step = multiple_of

    def finite(self, message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("finite", None, message)

    def safe(self, message: Optional[str] = None) -> "NumberSchema":
        return self._add_check("safe", None, message)

    @property
    def is_int(self) -> bool:
        return find_check(self._checks, "int") is not None

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        schema: JSONSchema = {"type": "integer" if self.is_int else "number"}
        for check in self._checks:
            if check.kind == "gte":
                schema["minimum"] = check.value
            elif check.kind == "gt":
                schema["exclusiveMinimum"] = check.value
            elif check.kind == "lte":
                schema["maximum"] = check.value
            elif check.kind == "lt":
                schema["exclusiveMaximum"] = check.value
            elif check.kind == "positive":
                schema["exclusiveMinimum"] = 0
            elif check.kind == "nonnegative":
                schema["minimum"] = 0
            elif check.kind == "negative":
                schema["exclusiveMaximum"] = 0
            elif check.kind == "nonpositive":
                schema["maximum"] = 0
            elif check.kind == "multiple_of":
                schema["multipleOf"] = check.value
            elif check.kind == "safe":
                schema["minimum"] = -MAX_SAFE_INTEGER
                schema["maximum"] = MAX_SAFE_INTEGER
        return schema


class BigIntSchema(CheckedSchema):
    """Arbitrary-precision ``int`` (never bool, never float)."""

    schema_type = SchemaType.BIGINT

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if isinstance(value, bool) or not isinstance(value, int):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected bigint, received {type_name(value)}",
                expected="bigint",
                received=type_name(value),
            )
            return value
        for check in self._checks:
            kind, arg = check.kind, check.value
            if kind == "gte" and value < arg:
                ctx.add_issue(IssueCode.TOO_SMALL, check.message or f"BigInt must be greater than or equal to {arg}")
            elif kind == "gt" and value <= arg:
                ctx.add_issue(IssueCode.TOO_SMALL, check.message or f"BigInt must be greater than {arg}")
            elif kind == "lte" and value > arg:
                ctx.add_issue(IssueCode.TOO_BIG, check.message or f"BigInt must be less than or equal to {arg}")
            elif kind == "lt" and value >= arg:
                ctx.add_issue(IssueCode.TOO_BIG, check.message or f"BigInt must be less than {arg}")
            elif kind == "multiple_of" and value % arg != 0:
                ctx.add_issue(IssueCode.NOT_MULTIPLE_OF, check.message or f"BigInt must be a multiple of {arg}")
        return value

    def gte(self, n: int, message: Optional[str] = None) -> "BigIntSchema":
        return self._add_check("gte", n, message)

    min = gte

    def gt(self, n: int, message: Optional[str] = None) -> "BigIntSchema":
        return self._add_check("gt", n, message)

    def lte(self, n: int, message: Optional[str] = None) -> "BigIntSchema":
        return self._add_check("lte", n, message)

    max = lte

    def lt(self, n: int, message: Optional[str] = None) -> "BigIntSchema":
        return self._add_check("lt", n, message)

    def positive(self, message: Optional[str] = None) -> "BigIntSchema":
        return self.gt(0, message or "BigInt must be positive")

    def negative(self, message: Optional[str] = None) -> "BigIntSchema":
        return self.lt(0, message or "BigInt must be negative")

    def nonnegative(self, message: Optional[str] = None) -> "BigIntSchema":
        return self.gte(0, message or "BigInt must be nonnegative")

    def nonpositive(self, message: Optional[str] = None) -> "BigIntSchema":
        return self.lte(0, message or "BigInt must be nonpositive")

    def multiple_of(self, n: int, message: Optional[str] = None) -> "BigIntSchema":
        if n == 0:
            raise SchemaDefinitionError("multiple_of() step must be non-zero")
        return self._add_check("multiple_of", n, message)

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        schema: JSONSchema = {"type": "integer"}
        keywords = {"gte": "minimum", "gt": "exclusiveMinimum", "lte": "maximum",
                    "lt": "exclusiveMaximum", "multiple_of": "multipleOf"}
        for check in self._checks:
            schema[keywords[check.kind]] = check.value
        return schema


class BooleanSchema(Schema):
    schema_type = SchemaType.BOOLEAN

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, bool):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected boolean, received {type_name(value)}",
                expected="boolean",
                received=type_name(value),
            )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"type": "boolean"}


class DateSchema(CheckedSchema):
    """``datetime.datetime`` with inclusive min/max bounds."""

    schema_type = SchemaType.DATE

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, datetime):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected date, received {type_name(value)}",
                expected="date",
                received=type_name(value),
            )
            return value
        for check in self._checks:
            try:
                too_small = check.kind == "min" and value < check.value
                too_big = check.kind == "max" and value > check.value
            except TypeError:
                # naive vs aware datetimes cannot be ordered
                ctx.add_issue(IssueCode.INVALID_DATE, "Cannot compare naive and timezone-aware dates")
                continue
            if too_small:
                ctx.add_issue(
                    IssueCode.TOO_SMALL,
                    check.message or f"Date must be greater than or equal to {check.value.isoformat()}",
                )
            elif too_big:
                ctx.add_issue(
                    IssueCode.TOO_BIG,
                    check.message or f"Date must be smaller than or equal to {check.value.isoformat()}",
                )
        return value

    def min(self, bound: datetime, message: Optional[str] = None) -> "DateSchema":
        return self._add_check("min", bound, message)

    def max(self, bound: datetime, message: Optional[str] = None) -> "DateSchema":
        return self._add_check("max", bound, message)

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"type": "string", "format": "date-time"}


class SymbolSchema(Schema):
    """``Symbol`` identity tokens; not representable on the wire."""

    schema_type = SchemaType.SYMBOL

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, Symbol):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected symbol, received {type_name(value)}",
                expected="symbol",
                received=type_name(value),
            )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"not": {}}


class LiteralSchema(Schema):
    """Exactly one value (compared with ``same_literal``)."""

    schema_type = SchemaType.LITERAL

    def __init__(self, value: Any):
        super().__init__()
        self._value = value

    @property
    def value(self) -> Any:
        return self._value

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not same_literal(value, self._value):
            ctx.add_issue(
                IssueCode.INVALID_LITERAL,
                f"Invalid literal value, expected {self._value!r}",
                expected=repr(self._value),
                received=type_name(value),
            )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        json_type = literal_json_type(self._value)
        if json_type is None:
            return {"not": {}}
        return {"type": json_type, "const": self._value}


class EnumSchema(Schema):
    """One of a fixed, ordered set of string values."""

    schema_type = SchemaType.ENUM

    def __init__(self, values: Sequence[str]):
        super().__init__()
        values = tuple(values)
        if not values:
            raise SchemaDefinitionError("enum() requires at least one value")
        if len(set(values)) != len(values):
            raise SchemaDefinitionError(f"Duplicate enum values: {list(values)}")
        self._values = values

    @property
    def options(self) -> Tuple[str, ...]:
        return self._values

    @property
    def enum(self) -> dict:
        return {value: value for value in self._values}

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not any(same_literal(value, option) for option in self._values):
            expected = " | ".join(repr(option) for option in self._values)
            ctx.add_issue(
                IssueCode.INVALID_ENUM_VALUE,
                f"Invalid enum value. Expected {expected}, received {value!r}",
                expected=expected,
                received=type_name(value),
            )
        return value

    def extract(self, *values: str) -> "EnumSchema":
        unknown = [v for v in values if v not in self._values]
        if unknown:
            raise SchemaDefinitionError(f"Cannot extract unknown enum values: {unknown}")
        return EnumSchema([v for v in self._values if v in values])

    def exclude(self, *values: str) -> "EnumSchema":
        return EnumSchema([v for v in self._values if v not in values])

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"type": "string", "enum": list(self._values)}


class NativeEnumSchema(Schema):
    """Members of a Python ``enum.Enum`` class, given as members or raw values."""

    schema_type = SchemaType.NATIVE_ENUM

    def __init__(self, enum_cls: Type[enum.Enum]):
        super().__init__()
        if not (isinstance(enum_cls, type) and issubclass(enum_cls, enum.Enum)):
            raise SchemaDefinitionError(f"native_enum() expects an Enum class, got {enum_cls!r}")
        self._enum_cls = enum_cls

    @property
    def enum(self) -> Type[enum.Enum]:
        return self._enum_cls

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if isinstance(value, self._enum_cls):
            return value
        for member in self._enum_cls:
            if same_literal(value, member.value):
                return member
        expected = " | ".join(repr(member.value) for member in self._enum_cls)
        ctx.add_issue(
            IssueCode.INVALID_ENUM_VALUE,
            f"Invalid enum value. Expected {expected}, received {value!r}",
            expected=expected,
            received=type_name(value),
        )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        values = [member.value for member in self._enum_cls]
        schema: JSONSchema = {"enum": values}
        types = {literal_json_type(v) for v in values}
        if len(types) == 1 and None not in types:
            schema["type"] = types.pop()
        return schema


def literal_values(schema: Schema) -> Iterable[Any]:
    """Values a literal-like schema admits (used for discriminator lookup)."""
    if isinstance(schema, LiteralSchema):
        return (schema.value,)
    if isinstance(schema, EnumSchema):
        return schema.options
    if isinstance(schema, NativeEnumSchema):
        return tuple(member.value for member in schema.enum)
    return ()
