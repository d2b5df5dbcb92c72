"""Canonical JSON rendering for exported schema documents.

Catalog and CLI output go through this one function so that exporting the
same registry twice yields byte-identical text.
"""

import json
from typing import Any, Optional


def canonical_dumps(obj: Any, indent: Optional[int] = None) -> str:
    """
    Canonical JSON serialization.

    Rules:
    - Sorted keys
    - Stable separators ("," and ":" when compact)
    - UTF-8 text, no ASCII escaping
    - List order is preserved (``prefixItems``, ``required`` and ``enum`` are ordered)

    Args:
        obj: JSON-compatible object
        indent: Pretty-print indentation; compact when None

    Returns:
        JSON string
    """
    return json.dumps(
        obj,
        sort_keys=True,
        indent=indent,
        separators=(",", ":") if indent is None else (",", ": "),
        ensure_ascii=False,
    )
