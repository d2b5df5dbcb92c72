"""Issue code constants for schemata validation.

These constants prevent stringly-typed issue codes and give callers a
stable key to branch on (messages are free text and may change).
"""

from enum import Enum


class IssueCode(str, Enum):
    """Stable validation issue codes."""

    # Type and shape
    INVALID_TYPE = "invalid_type"
    INVALID_LITERAL = "invalid_literal"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_DATE = "invalid_date"
    MISSING_PROPERTY = "missing_property"
    UNRECOGNIZED_KEYS = "unrecognized_keys"

    # Constraints
    TOO_SMALL = "too_small"
    TOO_BIG = "too_big"
    INVALID_STRING = "invalid_string"  # pattern, prefix, suffix, substring, case, format
    NOT_MULTIPLE_OF = "not_multiple_of"
    NOT_FINITE = "not_finite"

    # Composites
    INVALID_UNION = "invalid_union"
    INVALID_INTERSECTION = "invalid_intersection"

    # User supplied (refine / super_refine / custom)
    CUSTOM = "custom"


class SchemaType(str, Enum):
    """Kind tag reported by ``Schema.schema_type`` and ``Schema.metadata``."""

    STRING = "string"
    NUMBER = "number"
    BIGINT = "bigint"
    BOOLEAN = "boolean"
    DATE = "date"
    SYMBOL = "symbol"
    LITERAL = "literal"
    ENUM = "enum"
    NATIVE_ENUM = "native_enum"
    NAN = "nan"
    ANY = "any"
    UNKNOWN = "unknown"
    NEVER = "never"
    VOID = "void"
    NULL = "null"
    UNDEFINED = "undefined"
    OBJECT = "object"
    ARRAY = "array"
    TUPLE = "tuple"
    RECORD = "record"
    MAP = "map"
    SET = "set"
    UNION = "union"
    DISCRIMINATED_UNION = "discriminated_union"
    INTERSECTION = "intersection"
    LAZY = "lazy"
    CUSTOM = "custom"
    INSTANCE_OF = "instance_of"
    FILE = "file"
