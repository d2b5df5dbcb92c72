"""Coercive variants: best-effort conversion, then the strict pipeline.

A conversion that cannot be made leaves the raw value untouched, so the
strict type check reports it; constraint violations on a converted value
surface exactly as they would for the strict primitive.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from schemata.codes import IssueCode
from schemata.kernel.context import MISSING, ParseContext
from schemata.schemas.primitives import BigIntSchema, BooleanSchema, DateSchema, NumberSchema, StringSchema


_JSON_SPELLINGS = {None: "null", True: "true", False: "false"}


def to_string(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return _JSON_SPELLINGS[value]
    return str(value)


class CoercedStringSchema(StringSchema):
    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is not MISSING and not isinstance(value, str):
            value = to_string(value)
        return super()._parse(value, ctx)


def _integral(number: float) -> Any:
    return int(number) if number.is_integer() else number


def to_number(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Decimal):
        return _integral(float(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return value
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return _integral(float(text))
        except ValueError:
            return value
    return value


class CoercedNumberSchema(NumberSchema):
    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        return super()._parse(to_number(value), ctx)


class CoercedBooleanSchema(BooleanSchema):
    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            value = False
        return super()._parse(bool(value), ctx)


def to_bigint(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            return value
    return value


class CoercedBigIntSchema(BigIntSchema):
    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        return super()._parse(to_bigint(value), ctx)


def to_datetime(value: Any) -> Any:
    """ISO-8601 strings, POSIX timestamps and dates to ``datetime``; None when impossible."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    return None


class CoercedDateSchema(DateSchema):
    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        converted = to_datetime(value)
        if converted is None:
            ctx.add_issue(IssueCode.INVALID_DATE, "Invalid date", expected="date")
            return value
        return super()._parse(converted, ctx)
