"""Test public API surface - ensure imports work correctly and no side effects.

This test verifies:
- schemata exposes the builder namespace and the error/result types
- Every builder returns a Schema
- Importing the package registers nothing
"""

import schemata
from schemata import Schema, s


def test_package_exports():
    for name in schemata.__all__:
        assert hasattr(schemata, name), name


def test_version_is_a_string():
    assert isinstance(schemata.__version__, str)


def test_every_builder_returns_a_schema():
    zero_arg = [
        "string", "number", "int", "bigint", "boolean", "date", "symbol", "any",
        "unknown", "never", "undefined", "void", "null", "nan", "email", "uuid",
        "url", "hostname", "ipv4", "ipv6", "base64", "hex", "jwt", "cuid", "cuid2",
        "ulid", "nanoid", "custom", "file",
    ]
    for name in zero_arg:
        assert isinstance(getattr(s, name)(), Schema), name
    for name in ("date", "time", "datetime", "duration"):
        assert isinstance(getattr(s.iso, name)(), Schema), name
    for name in ("string", "number", "boolean", "bigint", "date"):
        assert isinstance(getattr(s.coerce, name)(), Schema), name


def test_import_has_no_registry_side_effects():
    assert schemata.list_named_schemas() == []
