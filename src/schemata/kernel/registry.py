"""Schema registry: process-wide table of named schemas.

Lifecycle: construct -> register on ``Schema.id(name)`` -> read during
reflection and catalog export -> optional explicit ``clear()`` for test
isolation. Entries are never removed automatically.
"""

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

if TYPE_CHECKING:
    from schemata.kernel.schema import Schema


logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Named schema table with serialised writes and snapshot reads."""

    def __init__(self):
        self._schemas: Dict[str, "Schema"] = {}  # insertion order == registration order
        self._lock = threading.Lock()

    def register(self, name: str, schema: "Schema") -> None:
        """Register (or replace) a schema under ``name``."""
        if not name:
            raise ValueError("Schema name must be a non-empty string")
        with self._lock:
            replaced = name in self._schemas
            self._schemas[name] = schema
        if replaced:
            logger.debug(f"Replaced registered schema: {name}")
        else:
            logger.debug(f"Registered schema: {name}")

    def get(self, name: str) -> Optional["Schema"]:
        return self._schemas.get(name)

    def has(self, name: str) -> bool:
        return name in self._schemas

    def list_named_schemas(self) -> List[Tuple[str, "Schema"]]:
        """Ordered ``(name, schema)`` pairs, in registration order."""
        with self._lock:
            return list(self._schemas.items())

    def names(self) -> List[str]:
        return [name for name, _ in self.list_named_schemas()]

    def clear(self) -> None:
        with self._lock:
            count = len(self._schemas)
            self._schemas.clear()
        logger.debug(f"Cleared schema registry ({count} entries)")

    def __len__(self) -> int:
        return len(self._schemas)

    def __contains__(self, name: object) -> bool:
        return name in self._schemas


_default_registry = SchemaRegistry()
_default_lock = threading.Lock()


def get_registry() -> SchemaRegistry:
    """Return the registry that ``Schema.id()`` currently writes into."""
    return _default_registry


def set_registry(registry: SchemaRegistry) -> SchemaRegistry:
    """Install ``registry`` as the default and return the previous one."""
    global _default_registry
    with _default_lock:
        previous = _default_registry
        _default_registry = registry
    return previous


@contextmanager
def use_registry(registry: Optional[SchemaRegistry] = None) -> Iterator[SchemaRegistry]:
    """Swap the default registry for the duration of a block.

    Args:
        registry: Registry to install (a fresh one when omitted)

    Yields:
        The installed registry
    """
    registry = registry if registry is not None else SchemaRegistry()
    previous = set_registry(registry)
    try:
        yield registry
    finally:
        set_registry(previous)


def list_named_schemas() -> List[Tuple[str, "Schema"]]:
    """Ordered ``(name, schema)`` pairs from the default registry."""
    return get_registry().list_named_schemas()
