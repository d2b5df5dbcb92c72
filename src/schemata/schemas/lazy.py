"""Deferred schemas for self-referential definitions."""

import threading
from typing import Any, Callable, Optional

from schemata.codes import SchemaType
from schemata.errors import SchemaDefinitionError
from schemata.kernel.context import ParseContext
from schemata.kernel.reflection import JSONSchema, RefTracker
from schemata.kernel.schema import Schema


class LazySchema(Schema):
    """Resolves its inner schema on first use and memoises it.

    A truly recursive lazy schema must be reachable through a named schema
    (``.id()``) for reflection: the walk cuts cycles only at named nodes, so
    reflecting an unnamed recursive definition never terminates.
    """

    schema_type = SchemaType.LAZY

    def __init__(self, getter: Callable[[], Schema]):
        super().__init__()
        if not callable(getter):
            raise SchemaDefinitionError("lazy() expects a zero-argument callable")
        self._getter = getter
        self._resolved: Optional[Schema] = None
        self._lock = threading.Lock()

    def _clone(self) -> "LazySchema":
        clone = super()._clone()
        clone._lock = threading.Lock()
        return clone

    @property
    def schema(self) -> Schema:
        """The resolved inner schema."""
        resolved = self._resolved
        if resolved is None:
            with self._lock:
                if self._resolved is None:
                    inner = self._getter()
                    if not isinstance(inner, Schema):
                        raise SchemaDefinitionError(
                            f"lazy() getter must return a Schema, got {type(inner).__name__}"
                        )
                    self._resolved = inner
                resolved = self._resolved
        return resolved

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        return self.schema._run_pipeline(value, ctx)

    def _structural(self, tracker: RefTracker) -> JSONSchema:
        return self.schema._reflect(tracker)
