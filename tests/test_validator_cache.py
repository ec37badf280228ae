import json
import threading

import pytest

from oiml.core.errors import SchemaCompileError
from oiml.core.observability.metrics import snapshot_named
from oiml.core.schemas.validator_cache import CacheKey, ValidatorCache

SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {"a": {"type": "string"}, "b": {"type": "integer"}},
    "additionalProperties": False,
}


def _bytes(schema=SCHEMA) -> bytes:
    return json.dumps(schema).encode("utf-8")


def test_identical_bytes_hit_the_cache():
    cache = ValidatorCache()
    first = cache.compile(_bytes(), schema_name="t", version="1.0.0")
    second = cache.compile(_bytes(), schema_name="t", version="1.0.0")

    assert second is first
    assert cache.stats() == {"hits": 1, "misses": 1, "size": 1}
    assert cache.get(first.key) is first

    counters = snapshot_named()
    assert counters["validator_cache_miss"] == 1
    assert counters["validator_cache_hit"] == 1


def test_key_is_composite_of_name_version_and_content():
    cache = ValidatorCache()
    key = cache.key_for(_bytes(), schema_name="t", version="1.0.0")
    assert isinstance(key, CacheKey)
    assert key.schema_name == "t"
    assert key.version == "1.0.0"
    assert len(key.content_hash) == 64
    assert key.label().startswith("t@1.0.0#")


def test_changed_bytes_compile_a_new_validator():
    cache = ValidatorCache()
    a = cache.compile(_bytes(), schema_name="t", version="1.0.0")
    edited = dict(SCHEMA, required=["a"])
    b = cache.compile(_bytes(edited), schema_name="t", version="1.0.0")

    assert a is not b
    assert a.key.content_hash != b.key.content_hash
    assert cache.stats()["size"] == 2
    assert cache.misses == 2


def test_same_bytes_under_another_version_is_a_distinct_entry():
    cache = ValidatorCache()
    a = cache.compile(_bytes(), schema_name="t", version="1.0.0")
    b = cache.compile(_bytes(), schema_name="t", version="1.0.1")
    assert a is not b
    assert len(cache.keys()) == 2


@pytest.mark.parametrize(
    "raw",
    [
        b"{not json",
        b"[1, 2]",
        json.dumps({"type": 5}).encode("utf-8"),
    ],
)
def test_compile_failures_raise_and_are_not_cached(raw):
    cache = ValidatorCache()
    with pytest.raises(SchemaCompileError):
        cache.compile(raw, schema_name="bad", version="0.0.1")
    assert cache.stats()["size"] == 0

    with pytest.raises(SchemaCompileError):
        cache.compile(raw, schema_name="bad", version="0.0.1")
    assert cache.misses == 2


def test_collects_every_violation():
    cache = ValidatorCache()
    compiled = cache.compile(_bytes(), schema_name="t", version="1.0.0")

    violations = compiled.violations({"a": 1, "b": "x", "c": True})
    pointers = [v.pointer for v in violations]

    assert len(violations) == 3
    assert pointers == ["/", "/a", "/b"]
    assert violations[0].render().startswith("/: ")
    assert "'c' was unexpected" in violations[0].message


def test_valid_document_has_no_violations():
    compiled = ValidatorCache().compile(_bytes(), schema_name="t", version="1.0.0")
    assert compiled.violations({"a": "x", "b": 2}) == []
    assert compiled.is_valid({"a": "x"})


def test_concurrent_population_compiles_once():
    cache = ValidatorCache()
    results = []

    def worker():
        results.append(cache.compile(_bytes(), schema_name="t", version="1.0.0"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({id(r) for r in results}) == 1
    assert cache.misses == 1
    assert cache.stats()["size"] == 1
