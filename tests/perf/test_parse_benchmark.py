"""Performance sentinels (gated)."""

import pytest

from schemata import s


MAX_WIDE_OBJECT_MS = 50.0
MAX_LONG_ARRAY_MS = 100.0

ITEM = s.object({
    "id": s.int().positive(),
    "name": s.string().min(1).max(64),
    "tags": s.array(s.string()).max(8),
    "kind": s.enum(["a", "b", "c"]),
})


def _assert_budget(benchmark, max_ms: float) -> None:
    mean_ms = benchmark.stats.stats.mean * 1000.0
    assert mean_ms < max_ms, f"Mean {mean_ms:.2f} ms exceeded budget {max_ms:.2f} ms"


@pytest.mark.perf
def test_wide_object_sentinel(benchmark):
    schema = s.object({f"field_{i}": s.number() for i in range(500)})
    value = {f"field_{i}": i for i in range(500)}
    result = benchmark.pedantic(lambda: schema.safe_parse(value), rounds=5, iterations=1)
    assert result.ok
    _assert_budget(benchmark, MAX_WIDE_OBJECT_MS)


@pytest.mark.perf
def test_long_array_sentinel(benchmark):
    schema = s.array(ITEM)
    value = [{"id": i + 1, "name": f"item {i}", "tags": ["x"], "kind": "a"} for i in range(2000)]
    result = benchmark.pedantic(lambda: schema.safe_parse(value), rounds=3, iterations=1)
    assert result.ok
    _assert_budget(benchmark, MAX_LONG_ARRAY_MS)
