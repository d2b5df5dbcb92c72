"""Named constraint records shared by the primitive and container schemas."""

import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple


# Relative tolerance for multiple_of on floats (0.3 is a multiple of 0.1).
MULTIPLE_OF_EPSILON = 1e-9


@dataclass(frozen=True)
class Check:
    """One constraint: ``kind`` names it, ``value`` parameterises it."""
    kind: str
    value: Any = None
    message: Optional[str] = None


Checks = Tuple[Check, ...]


def find_check(checks: Checks, kind: str) -> Optional[Check]:
    """Last check of ``kind`` (later calls win for reflection)."""
    found = None
    for check in checks:
        if check.kind == kind:
            found = check
    return found


def is_multiple_of(value: Any, step: Any) -> bool:
    """Epsilon-tolerant multiple-of test.

    Exact for ints; for floats the quotient is compared to its nearest
    integer with a relative tolerance, so binary rounding (``0.3 / 0.1``)
    does not produce false negatives.
    """
    if step == 0:
        return False
    if isinstance(value, int) and isinstance(step, int):
        return value % step == 0
    if not math.isfinite(value):
        return False
    quotient = value / step
    return abs(quotient - round(quotient)) <= MULTIPLE_OF_EPSILON * max(1.0, abs(quotient))
