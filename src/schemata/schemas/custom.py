"""Escape hatches: arbitrary predicates and ``isinstance`` checks."""

from typing import Any, Callable, Optional

from schemata.codes import IssueCode, SchemaType
from schemata.errors import SchemaDefinitionError
from schemata.kernel.context import ParseContext, type_name
from schemata.kernel.reflection import JSONSchema, RefTracker
from schemata.kernel.schema import Schema


class CustomSchema(Schema):
    """Accepts whatever ``check`` approves (everything when no check is given)."""

    schema_type = SchemaType.CUSTOM

    def __init__(self, check: Optional[Callable[[Any], bool]] = None, message: Optional[str] = None):
        super().__init__()
        self._check = check
        self._message = message or "Invalid input"

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if self._check is not None and not self._check(value):
            ctx.add_issue(IssueCode.CUSTOM, self._message, received=type_name(value))
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {}


class InstanceOfSchema(Schema):
    schema_type = SchemaType.INSTANCE_OF

    def __init__(self, cls: type):
        super().__init__()
        if not isinstance(cls, type):
            raise SchemaDefinitionError(f"instanceof() expects a class, got {cls!r}")
        self._cls = cls

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, self._cls):
            ctx.add_issue(
                IssueCode.INVALID_TYPE,
                f"Input not instance of {self._cls.__name__}",
                expected=self._cls.__name__,
                received=type_name(value),
            )
        return value

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return {}
