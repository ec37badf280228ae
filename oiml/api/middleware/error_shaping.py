from __future__ import annotations

import logging
import traceback
from typing import Any, Callable, Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from oiml.core.errors import OimlError

log = logging.getLogger("oiml.errors")


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Last line of defence for the HTTP surface.

    Engine faults (OimlError: missing schema, unreadable matrix, bad range in
    the matrix) are deployment problems and come back as 503 with the error
    class; anything else is a 500. Tracebacks stay in the server log.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            rid = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
            log.error(
                "Unhandled error: %s rid=%s path=%s\n%s",
                str(e),
                rid,
                request.url.path,
                traceback.format_exc(),
            )
            if isinstance(e, OimlError):
                status = 503
                payload: Dict[str, Any] = {"detail": "Engine unavailable", "error": type(e).__name__}
            else:
                status = 500
                payload = {"detail": "Internal Server Error"}
            if rid:
                payload["request_id"] = rid
            return JSONResponse(status_code=status, content=payload)
