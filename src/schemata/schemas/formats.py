"""String-format schemas.

Each format is a ``StringSchema`` subclass, so every string constraint and
normalizer stays available (``email().trim().to_lower_case()``). The format
check runs on the normalized value, after the other constraints.
"""

import base64
import binascii
import ipaddress
import json
import re
from datetime import date, datetime, time
from typing import Optional, Pattern
from urllib.parse import urlparse

from schemata.codes import IssueCode
from schemata.kernel.context import ParseContext
from schemata.schemas.primitives import StringSchema


class FormatSchema(StringSchema):
    """Base for formats checked by a single regular expression."""

    label: str = "string"
    pattern: Optional[Pattern] = None

    def _matches(self, v: str) -> bool:
        return bool(self.pattern.fullmatch(v))

    def _check_format(self, v: str, ctx: ParseContext) -> None:
        if not self._matches(v):
            ctx.add_issue(IssueCode.INVALID_STRING, f"Invalid {self.label}", expected=self.format_name)


class EmailSchema(FormatSchema):
    format_name = "email"
    label = "email"
    pattern = re.compile(
        r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
        r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+[A-Za-z]{2,}"
    )


class UuidSchema(FormatSchema):
    format_name = "uuid"
    label = "uuid"
    pattern = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")


class UrlSchema(FormatSchema):
    format_name = "uri"
    label = "url"

    def _matches(self, v: str) -> bool:
        try:
            parsed = urlparse(v)
        except ValueError:
            return False
        return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


HOSTNAME_LABEL = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?")


class HostnameSchema(FormatSchema):
    format_name = "hostname"
    label = "hostname"

    def _matches(self, v: str) -> bool:
        if not v or len(v) > 253:
            return False
        return all(HOSTNAME_LABEL.fullmatch(part) for part in v.rstrip(".").split("."))


class Ipv4Schema(FormatSchema):
    format_name = "ipv4"
    label = "IPv4 address"

    def _matches(self, v: str) -> bool:
        try:
            ipaddress.IPv4Address(v)
        except ValueError:
            return False
        return True


class Ipv6Schema(FormatSchema):
    format_name = "ipv6"
    label = "IPv6 address"

    def _matches(self, v: str) -> bool:
        try:
            ipaddress.IPv6Address(v)
        except ValueError:
            return False
        return True


class Base64Schema(FormatSchema):
    format_name = "byte"
    label = "base64"

    def _matches(self, v: str) -> bool:
        if len(v) % 4:
            return False
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            return False
        return True


class HexSchema(FormatSchema):
    format_name = "hex"
    label = "hex string"
    pattern = re.compile(r"[0-9a-fA-F]*")


BASE64URL = re.compile(r"[A-Za-z0-9_-]+")


def _b64url_json(segment: str) -> bool:
    try:
        decoded = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
        return isinstance(json.loads(decoded), dict)
    except (binascii.Error, ValueError):
        return False


class JwtSchema(FormatSchema):
    """Three base64url segments; header and payload must decode to JSON objects."""

    format_name = "jwt"
    label = "JWT"

    def _matches(self, v: str) -> bool:
        parts = v.split(".")
        if len(parts) != 3 or not all(BASE64URL.fullmatch(p) for p in parts[:2]):
            return False
        if parts[2] and not BASE64URL.fullmatch(parts[2]):
            return False
        return _b64url_json(parts[0]) and _b64url_json(parts[1])


class CuidSchema(FormatSchema):
    format_name = "cuid"
    label = "cuid"
    pattern = re.compile(r"c[a-z0-9]{24}")


class Cuid2Schema(FormatSchema):
    format_name = "cuid2"
    label = "cuid2"
    pattern = re.compile(r"[a-z][a-z0-9]{1,31}")


class UlidSchema(FormatSchema):
    format_name = "ulid"
    label = "ulid"
    pattern = re.compile(r"[0-7][0-9A-HJKMNP-TV-Za-hjkmnp-tv-z]{25}")


class NanoidSchema(FormatSchema):
    format_name = "nanoid"
    label = "nanoid"
    pattern = re.compile(r"[A-Za-z0-9_-]{21}")


class IsoDateSchema(FormatSchema):
    format_name = "date"
    label = "ISO date"
    pattern = re.compile(r"\d{4}-\d{2}-\d{2}")

    def _matches(self, v: str) -> bool:
        if not self.pattern.fullmatch(v):
            return False
        try:
            date.fromisoformat(v)
        except ValueError:
            return False
        return True


class IsoTimeSchema(FormatSchema):
    format_name = "time"
    label = "ISO time"
    pattern = re.compile(r"\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?")

    def _matches(self, v: str) -> bool:
        if not self.pattern.fullmatch(v):
            return False
        try:
            time.fromisoformat(v)
        except ValueError:
            return False
        return True


class IsoDateTimeSchema(FormatSchema):
    format_name = "date-time"
    label = "ISO datetime"
    pattern = re.compile(
        r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:\d{2})?"
    )

    def _matches(self, v: str) -> bool:
        if not self.pattern.fullmatch(v):
            return False
        text = v[:-1] + "+00:00" if v.endswith("Z") else v
        try:
            datetime.fromisoformat(text)
        except ValueError:
            return False
        return True


class IsoDurationSchema(FormatSchema):
    format_name = "duration"
    label = "ISO duration"
    pattern = re.compile(
        r"P(?!$)(?:\d+(?:\.\d+)?Y)?(?:\d+(?:\.\d+)?M)?(?:\d+(?:\.\d+)?W)?(?:\d+(?:\.\d+)?D)?"
        r"(?:T(?=\d)(?:\d+(?:\.\d+)?H)?(?:\d+(?:\.\d+)?M)?(?:\d+(?:\.\d+)?S)?)?"
    )
