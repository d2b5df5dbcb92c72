"""Reflection engine: schema graph -> JSON-Schema (2020-12 / OpenAPI 3.1) description.

Each schema type knows how to describe itself (``Schema._structural``); this
module orchestrates the walk. Named schemas are expanded once per call into
the shared definitions map and referenced everywhere else, which both
deduplicates shared definitions and cuts cycles.

Usage constraint: a truly recursive ``lazy`` schema must be named with
``.id()``. Reflecting an unnamed recursive lazy schema recurses without end.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional, Set

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from schemata.kernel.schema import Schema


JSONSchema = Dict[str, Any]


class ReflectionOptions(BaseModel):
    """Per-call reflection configuration."""
    ref_template: str = "#/$defs/{name}"
    defs_key: str = "$defs"

    model_config = ConfigDict(frozen=True, extra="forbid")


DEFAULT_OPTIONS = ReflectionOptions()


class RefTracker:
    """Call-scoped visited set plus the definitions collected so far.

    Never shared across reflection calls, so cycle state from one call cannot
    leak into another call on the same schema.
    """

    def __init__(self, options: Optional[ReflectionOptions] = None):
        self.options = options or DEFAULT_OPTIONS
        self._seen: Set[str] = set()
        self._defs: Dict[str, JSONSchema] = {}

    def has_seen(self, name: str) -> bool:
        return name in self._seen

    def mark_seen(self, name: str) -> None:
        self._seen.add(name)

    def add_def(self, name: str, schema: JSONSchema) -> None:
        self._defs[name] = schema

    def get_defs(self) -> Dict[str, JSONSchema]:
        return dict(self._defs)

    def ref(self, name: str) -> JSONSchema:
        return {"$ref": self.options.ref_template.format(name=name)}


def reflect(schema: "Schema", tracker: RefTracker) -> JSONSchema:
    """Describe ``schema`` inside an ongoing walk.

    Unnamed schemas are inlined. A named schema seen for the first time is
    marked, expanded, stored as a definition and replaced by a reference; a
    named schema already marked is just referenced.
    """
    name = schema.name
    if name is None:
        return _apply_metadata(schema, schema._structural(tracker))
    if tracker.has_seen(name):
        return tracker.ref(name)
    tracker.mark_seen(name)
    tracker.add_def(name, _apply_metadata(schema, schema._structural(tracker)))
    return tracker.ref(name)


def _apply_metadata(schema: "Schema", description: JSONSchema) -> JSONSchema:
    description = dict(description)
    if schema.description is not None:
        description["description"] = schema.description
    if schema.examples:
        description["examples"] = list(schema.examples)
    return description


def to_structural_schema(schema: "Schema", options: Optional[ReflectionOptions] = None) -> JSONSchema:
    """Top-level reflection: one fresh tracker per call.

    Args:
        schema: Root schema
        options: Reference template / definitions key overrides

    Returns:
        JSON-Schema dict; the definitions map is attached when non-empty
    """
    tracker = RefTracker(options)
    root = reflect(schema, tracker)
    defs = tracker.get_defs()
    if defs:
        return {tracker.options.defs_key: defs, **root}
    return root
