"""Factory functions for every schema type.

Meant to be imported as a namespace::

    from schemata import s

    User = s.object({"name": s.string().min(1), "age": s.number().int().optional()})
"""

import enum
from types import SimpleNamespace
from typing import Any, Callable, Mapping, Optional, Sequence, Type

from schemata.kernel.schema import Schema, preprocess
from schemata.schemas.coerced import (
    CoercedBigIntSchema,
    CoercedBooleanSchema,
    CoercedDateSchema,
    CoercedNumberSchema,
    CoercedStringSchema,
)
from schemata.schemas.containers import ArraySchema, MapSchema, RecordSchema, SetSchema, TupleSchema
from schemata.schemas.custom import CustomSchema, InstanceOfSchema
from schemata.schemas.file import FileSchema
from schemata.schemas.formats import (
    Base64Schema,
    Cuid2Schema,
    CuidSchema,
    EmailSchema,
    HexSchema,
    HostnameSchema,
    Ipv4Schema,
    Ipv6Schema,
    IsoDateSchema,
    IsoDateTimeSchema,
    IsoDurationSchema,
    IsoTimeSchema,
    JwtSchema,
    NanoidSchema,
    UlidSchema,
    UrlSchema,
    UuidSchema,
)
from schemata.schemas.lazy import LazySchema
from schemata.schemas.object import ObjectSchema
from schemata.schemas.primitives import (
    BigIntSchema,
    BooleanSchema,
    DateSchema,
    EnumSchema,
    LiteralSchema,
    NativeEnumSchema,
    NumberSchema,
    StringSchema,
    SymbolSchema,
)
from schemata.schemas.special import (
    AnySchema,
    NanSchema,
    NeverSchema,
    NullSchema,
    UndefinedSchema,
    UnknownSchema,
    VoidSchema,
)
from schemata.schemas.unions import DiscriminatedUnionSchema, IntersectionSchema, UnionSchema


# primitives

def string() -> StringSchema:
    return StringSchema()


def number() -> NumberSchema:
    return NumberSchema()


def int_() -> NumberSchema:
    """Number restricted to integral values."""
    return NumberSchema().int()


def bigint() -> BigIntSchema:
    return BigIntSchema()


def boolean() -> BooleanSchema:
    return BooleanSchema()


def date() -> DateSchema:
    return DateSchema()


def symbol() -> SymbolSchema:
    return SymbolSchema()


def literal(value: Any) -> LiteralSchema:
    return LiteralSchema(value)


def enum_(values: Sequence[str]) -> EnumSchema:
    return EnumSchema(values)


def native_enum(enum_cls: Type[enum.Enum]) -> NativeEnumSchema:
    return NativeEnumSchema(enum_cls)


# special

def any_() -> AnySchema:
    return AnySchema()


def unknown() -> UnknownSchema:
    return UnknownSchema()


def never() -> NeverSchema:
    return NeverSchema()


def undefined() -> UndefinedSchema:
    return UndefinedSchema()


def void() -> VoidSchema:
    return VoidSchema()


def null() -> NullSchema:
    return NullSchema()


def nan() -> NanSchema:
    return NanSchema()


# composites

def object_(shape: Mapping[str, Schema]) -> ObjectSchema:
    return ObjectSchema(shape)


def array(element: Schema) -> ArraySchema:
    return ArraySchema(element)


def tuple_(items: Sequence[Schema], rest: Optional[Schema] = None) -> TupleSchema:
    return TupleSchema(items, rest)


def record(key_or_value: Schema, value: Optional[Schema] = None) -> RecordSchema:
    return RecordSchema(key_or_value, value)


def map_(key: Schema, value: Schema) -> MapSchema:
    return MapSchema(key, value)


def set_(element: Schema) -> SetSchema:
    return SetSchema(element)


def union(options: Sequence[Schema]) -> UnionSchema:
    return UnionSchema(options)


def discriminated_union(discriminator: str, options: Sequence[Schema], strict: bool = True) -> DiscriminatedUnionSchema:
    return DiscriminatedUnionSchema(discriminator, options, strict=strict)


def intersection(left: Schema, right: Schema) -> IntersectionSchema:
    return IntersectionSchema(left, right)


def lazy(getter: Callable[[], Schema]) -> LazySchema:
    return LazySchema(getter)


def custom(check: Optional[Callable[[Any], bool]] = None, message: Optional[str] = None) -> CustomSchema:
    return CustomSchema(check, message)


def instanceof(cls: type) -> InstanceOfSchema:
    return InstanceOfSchema(cls)


def file() -> FileSchema:
    return FileSchema()


# string formats

def email() -> EmailSchema:
    return EmailSchema()


def uuid() -> UuidSchema:
    return UuidSchema()


def url() -> UrlSchema:
    return UrlSchema()


def hostname() -> HostnameSchema:
    return HostnameSchema()


def ipv4() -> Ipv4Schema:
    return Ipv4Schema()


def ipv6() -> Ipv6Schema:
    return Ipv6Schema()


def base64() -> Base64Schema:
    return Base64Schema()


def hex_() -> HexSchema:
    return HexSchema()


def jwt() -> JwtSchema:
    return JwtSchema()


def cuid() -> CuidSchema:
    return CuidSchema()


def cuid2() -> Cuid2Schema:
    return Cuid2Schema()


def ulid() -> UlidSchema:
    return UlidSchema()


def nanoid() -> NanoidSchema:
    return NanoidSchema()


iso = SimpleNamespace(
    date=IsoDateSchema,
    time=IsoTimeSchema,
    datetime=IsoDateTimeSchema,
    duration=IsoDurationSchema,
)

coerce = SimpleNamespace(
    string=CoercedStringSchema,
    number=CoercedNumberSchema,
    boolean=CoercedBooleanSchema,
    bigint=CoercedBigIntSchema,
    date=CoercedDateSchema,
)


# Builtin-shadowing names are exported without the trailing underscore.
s = SimpleNamespace(
    string=string,
    number=number,
    int=int_,
    bigint=bigint,
    boolean=boolean,
    date=date,
    symbol=symbol,
    literal=literal,
    enum=enum_,
    native_enum=native_enum,
    any=any_,
    unknown=unknown,
    never=never,
    undefined=undefined,
    void=void,
    null=null,
    nan=nan,
    object=object_,
    array=array,
    tuple=tuple_,
    record=record,
    map=map_,
    set=set_,
    union=union,
    discriminated_union=discriminated_union,
    intersection=intersection,
    lazy=lazy,
    custom=custom,
    instanceof=instanceof,
    file=file,
    preprocess=preprocess,
    email=email,
    uuid=uuid,
    url=url,
    hostname=hostname,
    ipv4=ipv4,
    ipv6=ipv6,
    base64=base64,
    hex=hex_,
    jwt=jwt,
    cuid=cuid,
    cuid2=cuid2,
    ulid=ulid,
    nanoid=nanoid,
    iso=iso,
    coerce=coerce,
)
