"""Binary payloads: raw bytes or a binary file object, with size limits."""

import io
import os
from typing import Any, Optional

from schemata.codes import IssueCode, SchemaType
from schemata.kernel.context import ParseContext, type_name
from schemata.kernel.reflection import JSONSchema, RefTracker
from schemata.schemas.primitives import CheckedSchema


def payload_size(value: Any) -> Optional[int]:
    """Size in bytes, or None when a stream cannot report it.

    Seekable streams are measured from their current position and left
    where they were.
    """
    if isinstance(value, (bytes, bytearray)):
        return len(value)
    if isinstance(value, memoryview):
        return value.nbytes
    if not value.seekable():
        return None
    position = value.tell()
    try:
        return value.seek(0, os.SEEK_END) - position
    finally:
        value.seek(position)


def is_binary_file(value: Any) -> bool:
    return isinstance(value, io.IOBase) and not isinstance(value, io.TextIOBase) and value.readable()


class FileSchema(CheckedSchema):
    """``bytes``/``bytearray``/``memoryview`` or a readable binary stream.

    The value is returned unchanged; streams are never consumed.
    """

    schema_type = SchemaType.FILE

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, (bytes, bytearray, memoryview)) and not is_binary_file(value):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Expected file, received {type_name(value)}",
                expected="file",
                received=type_name(value),
            )
            return value
        if not self._checks:
            return value
        size = payload_size(value)
        if size is None:
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                "File size cannot be determined for a non-seekable stream",
                expected="seekable file",
                received=type_name(value),
            )
            return value
        for check in self._checks:
            if check.kind == "min" and size < check.value:
                ctx.add_issue(IssueCode.TOO_SMALL, check.message or f"File must be at least {check.value} byte(s)")
            elif check.kind == "max" and size > check.value:
                ctx.add_issue(IssueCode.TOO_BIG, check.message or f"File must be at most {check.value} byte(s)")
        return value

    def min(self, n: int, message: Optional[str] = None) -> "FileSchema":
        return self._add_check("min", n, message)

    def max(self, n: int, message: Optional[str] = None) -> "FileSchema":
        return self._add_check("max", n, message)

    def nonempty(self, message: Optional[str] = None) -> "FileSchema":
        return self.min(1, message or "File must not be empty")

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {"type": "string", "format": "binary"}
