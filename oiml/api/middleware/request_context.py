from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from oiml.core.observability.metrics import (
    HTTP_REQUEST_DURATION_SECONDS,
    HTTP_REQUESTS_TOTAL,
    normalize_path,
)

log = logging.getLogger("oiml.request")

REQUEST_ID_HEADER = "X-Request-Id"
API_ROOT = "/api/"


def api_surface(path: str) -> tuple:
    """
    /api/v1/intents/transform -> ("v1", "intents", "transform").
    Missing parts come back as None.
    """
    parts = [p for p in path[len(API_ROOT):].split("/") if p] if path.startswith(API_ROOT) else []
    parts += [None] * (3 - len(parts))
    return parts[0], parts[1], parts[2]


def _json_log(event: str, **fields):
    # single-line structured record; document bodies are never logged
    msg = {"event": event, **fields}
    log.info("%s", msg)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds:
      request.state.request_id
      response header: X-Request-Id
    and records per-request Prometheus metrics on a low-cardinality path.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = rid

        start = time.time()
        resp = await call_next(request)
        dur_ms = int((time.time() - start) * 1000)

        resp.headers[REQUEST_ID_HEADER] = rid

        p = normalize_path(request.url.path)
        m = request.method.upper()
        s = str(getattr(resp, "status_code", 0))
        HTTP_REQUESTS_TOTAL.labels(method=m, path=p, status=s).inc()
        HTTP_REQUEST_DURATION_SECONDS.labels(method=m, path=p).observe(dur_ms / 1000.0)

        if request.url.path.startswith(API_ROOT):
            api_version, surface, operation = api_surface(request.url.path)
            _json_log(
                "request",
                request_id=rid,
                api_version=api_version,
                surface=surface,
                operation=operation,
                method=request.method,
                path=request.url.path,
                status_code=resp.status_code,
                duration_ms=dur_ms,
            )
        return resp
