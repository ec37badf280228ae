from __future__ import annotations

import re
from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter
from prometheus_client import Histogram

# Named counters (in-process, test friendly)
_NAMED = Counter()


def normalize_path(path: str) -> str:
    """Reduce high-cardinality paths for metrics labels."""
    p = path or "/"
    p = re.sub(r"/[0-9a-fA-F]{16,}", "/:hex", p)
    p = re.sub(r"/\d+", "/:id", p)
    return p


HTTP_REQUESTS_TOTAL = PromCounter(
    "oiml_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "oiml_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

VALIDATIONS_TOTAL = PromCounter(
    "oiml_validations_total",
    "Document validations",
    ["schema", "outcome"],
)

VALIDATOR_CACHE_TOTAL = PromCounter(
    "oiml_validator_cache_total",
    "Validator cache lookups",
    ["result"],
)

TEMPLATE_RESOLUTIONS_TOTAL = PromCounter(
    "oiml_template_resolutions_total",
    "Template pack resolutions",
    ["framework", "outcome"],
)


def reset_metrics() -> None:
    """
    Test helper: clears named counters to avoid cross-test leakage.
    Prometheus collectors are process-wide and are not reset.
    """
    _NAMED.clear()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)


def record_validation(schema_name: str, outcome: str) -> None:
    VALIDATIONS_TOTAL.labels(schema=schema_name, outcome=outcome).inc()
    inc_named(f"validate_{schema_name}_{outcome}")


def record_cache_lookup(hit: bool) -> None:
    result = "hit" if hit else "miss"
    VALIDATOR_CACHE_TOTAL.labels(result=result).inc()
    inc_named(f"validator_cache_{result}")


def record_resolution(framework: str, outcome: str) -> None:
    TEMPLATE_RESOLUTIONS_TOTAL.labels(framework=framework or "unknown", outcome=outcome).inc()
    inc_named(f"resolve_{outcome}")
