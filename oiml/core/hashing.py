from __future__ import annotations

import dataclasses
import hashlib
import json
from typing import Any


def _to_jsonable(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_jsonable(x) for x in obj]
    if dataclasses.is_dataclass(obj):
        return _to_jsonable(dataclasses.asdict(obj))
    if hasattr(obj, "model_dump"):
        return _to_jsonable(obj.model_dump(mode="json", exclude_none=True))
    return str(obj)


def canonical_json_bytes(obj: Any) -> bytes:
    jsonable = _to_jsonable(obj)
    return json.dumps(jsonable, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def content_id(obj: Any, *, length: int = 16) -> str:
    """Identity token for a parsed document: ``sha256:<first 16 hex chars>``."""
    return f"sha256:{sha256_hex(canonical_json_bytes(obj))[:length]}"
