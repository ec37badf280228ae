from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from oiml.core.errors import SchemaCompileError
from oiml.core.hashing import sha256_hex
from oiml.core.observability.metrics import record_cache_lookup

_log = logging.getLogger("oiml.schemas")


@dataclass(frozen=True)
class CacheKey:
    schema_name: str
    version: str
    content_hash: str

    def label(self) -> str:
        return f"{self.schema_name}@{self.version}#{self.content_hash[:8]}"


@dataclass(frozen=True)
class SchemaViolation:
    pointer: str
    message: str

    def render(self) -> str:
        return f"{self.pointer}: {self.message}"


def _path_sort_key(path) -> tuple:
    return tuple((0, p, "") if isinstance(p, int) else (1, 0, str(p)) for p in path)


def _pointer(path) -> str:
    parts = [str(p).replace("~", "~0").replace("/", "~1") for p in path]
    return "/" + "/".join(parts) if parts else "/"


class CompiledValidator:
    """A compiled schema. Collects every violation in a run; never fails fast."""

    def __init__(self, key: CacheKey, validator: Draft202012Validator):
        self.key = key
        self._validator = validator

    def violations(self, document: Any) -> List[SchemaViolation]:
        errors = sorted(
            self._validator.iter_errors(document),
            key=lambda e: (_path_sort_key(e.absolute_path), e.message),
        )
        return [SchemaViolation(pointer=_pointer(e.absolute_path), message=e.message) for e in errors]

    def is_valid(self, document: Any) -> bool:
        return self._validator.is_valid(document)


class ValidatorCache:
    """
    Content-addressed validator cache.

    Key = (schema name, version, sha256 of the schema bytes). Editing a schema
    file yields a new key; identical bytes always hit. Entries live for the
    lifetime of the cache object (schema count is small and static).
    Compile failures are raised and never stored.
    """

    def __init__(self) -> None:
        self._store: Dict[CacheKey, CompiledValidator] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key_for(schema_bytes: bytes, *, schema_name: str, version: str) -> CacheKey:
        return CacheKey(schema_name=schema_name, version=version, content_hash=sha256_hex(schema_bytes))

    def get(self, key: CacheKey) -> Optional[CompiledValidator]:
        return self._store.get(key)

    def compile(self, schema_bytes: bytes, *, schema_name: str, version: str) -> CompiledValidator:
        key = self.key_for(schema_bytes, schema_name=schema_name, version=version)

        cached = self._store.get(key)
        if cached is not None:
            self._hit(key)
            return cached

        with self._lock:
            # another thread may have populated the key while we waited
            cached = self._store.get(key)
            if cached is not None:
                self._hit(key)
                return cached

            self.misses += 1
            record_cache_lookup(hit=False)
            _log.info("Compiling validator for %s", key.label())

            compiled = CompiledValidator(key, self._build(schema_bytes, key))
            self._store[key] = compiled
            return compiled

    def stats(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "size": len(self._store)}

    def keys(self) -> Tuple[CacheKey, ...]:
        return tuple(self._store.keys())

    def _hit(self, key: CacheKey) -> None:
        self.hits += 1
        record_cache_lookup(hit=True)
        _log.debug("Using cached validator %s", key.label())

    def _build(self, schema_bytes: bytes, key: CacheKey) -> Draft202012Validator:
        try:
            schema = json.loads(schema_bytes.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SchemaCompileError(cache_key=key.label(), reason=f"invalid JSON: {exc}") from exc

        if not isinstance(schema, dict):
            raise SchemaCompileError(cache_key=key.label(), reason="schema root must be an object")

        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as exc:
            raise SchemaCompileError(cache_key=key.label(), reason=exc.message) from exc

        return Draft202012Validator(schema)
