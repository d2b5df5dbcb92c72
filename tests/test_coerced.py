"""Tests for coercive primitive variants."""

from datetime import date, datetime, timezone
from decimal import Decimal

from schemata import IssueCode, s


def test_coerce_string():
    assert s.coerce.string().parse(12) == "12"
    assert s.coerce.string().parse(None) == "null"
    assert s.coerce.string().parse(True) == "true"
    assert not s.coerce.string().is_valid()


def test_coerce_number():
    assert s.coerce.number().parse("42") == 42
    assert s.coerce.number().parse(" 2.5 ") == 2.5
    assert s.coerce.number().parse(True) == 1
    assert s.coerce.number().parse(Decimal("1.5")) == 1.5


def test_coerce_number_integral_floats_become_int():
    parsed = s.coerce.number().parse("3.0")
    assert parsed == 3 and isinstance(parsed, int)
    assert isinstance(s.coerce.number().parse(Decimal("2")), int)
    assert s.coerce.number().parse("3.5") == 3.5


def test_coerce_number_failure_is_invalid_type():
    result = s.coerce.number().safe_parse("abc")
    assert result.error.issues[0].code == IssueCode.INVALID_TYPE


def test_coerced_value_still_runs_constraints():
    result = s.coerce.number().gt(100).safe_parse("42")
    assert result.error.issues[0].code == IssueCode.TOO_SMALL


def test_coerce_boolean_uses_truthiness():
    assert s.coerce.boolean().parse("yes") is True
    assert s.coerce.boolean().parse("") is False
    assert s.coerce.boolean().parse() is False


def test_coerce_bigint():
    assert s.coerce.bigint().parse("12345678901234567890") == 12345678901234567890
    assert s.coerce.bigint().parse(3.0) == 3
    assert not s.coerce.bigint().is_valid(3.5)


def test_coerce_date():
    parsed = s.coerce.date().parse("2024-01-02T03:04:05Z")
    assert parsed == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert s.coerce.date().parse(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert s.coerce.date().parse(date(2024, 1, 2)) == datetime(2024, 1, 2)
    result = s.coerce.date().safe_parse("not a date")
    assert result.error.issues[0].code == IssueCode.INVALID_DATE
