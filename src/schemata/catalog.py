"""Catalog export: every named schema as one OpenAPI 3.1 components document."""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from schemata._internal.canonical_json import canonical_dumps
from schemata.kernel.registry import SchemaRegistry, get_registry
from schemata.kernel.reflection import JSONSchema, RefTracker, ReflectionOptions, reflect


logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.1.0"
COMPONENTS_REF_TEMPLATE = "#/components/schemas/{name}"


class CatalogOptions(BaseModel):
    """Catalog document configuration."""
    title: str = "Schema catalog"
    version: str = "0.0.0"
    ref_template: str = COMPONENTS_REF_TEMPLATE

    model_config = ConfigDict(frozen=True, extra="forbid")


def build_catalog(
    registry: Optional[SchemaRegistry] = None,
    options: Optional[CatalogOptions] = None,
) -> Dict[str, Any]:
    """Reflect every registered schema into ``components.schemas``.

    All named schemas share one reflection walk, so a schema referenced from
    several others is expanded exactly once and every occurrence becomes a
    ``$ref`` into the components section.

    Args:
        registry: Registry to export (the default registry when omitted)
        options: Document title/version and reference template

    Returns:
        OpenAPI 3.1 document with ``openapi``, ``info`` and ``components``
    """
    registry = registry if registry is not None else get_registry()
    options = options or CatalogOptions()
    tracker = RefTracker(ReflectionOptions(ref_template=options.ref_template, defs_key="schemas"))
    named = registry.list_named_schemas()
    for _, schema in named:
        reflect(schema, tracker)

    defs = tracker.get_defs()
    # Registration order first, then anything only reachable by reference
    components: Dict[str, JSONSchema] = {name: defs[name] for name, _ in named if name in defs}
    for name, description in defs.items():
        components.setdefault(name, description)

    logger.info(f"Built schema catalog with {len(components)} component(s)")
    return {
        "openapi": OPENAPI_VERSION,
        "info": {"title": options.title, "version": options.version},
        "components": {"schemas": components},
    }


def catalog_json(
    registry: Optional[SchemaRegistry] = None,
    options: Optional[CatalogOptions] = None,
    indent: Optional[int] = None,
) -> str:
    """``build_catalog`` rendered as canonical JSON."""
    return canonical_dumps(build_catalog(registry, options), indent=indent)
