from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from oiml import __version__
from oiml.api.endpoints import documents, guide, health, intents, metrics_export, templates
from oiml.api.middleware.error_shaping import SafeErrorMiddleware
from oiml.api.middleware.request_context import RequestContextMiddleware

API_PREFIX = "/api/v1"

logging.getLogger("oiml").setLevel((os.getenv("OIML_LOG_LEVEL") or "INFO").strip().upper())

app = FastAPI(
    title="OIML Intent Engine API",
    version=__version__,
)

# ------------------------------------------------------------
# Middleware stack (ORDER MATTERS)
# Starlette reverses add_middleware order: the LAST call is the OUTERMOST wrapper.
# Runtime order (outermost -> innermost):
#   SafeErrorMiddleware -> CORSMiddleware -> RequestContext -> handler
# ------------------------------------------------------------

app.add_middleware(RequestContextMiddleware)

_cors_origins_raw = os.getenv("OIML_CORS_ORIGINS", "").strip()
_cors_origins = [o.strip() for o in _cors_origins_raw.split(",") if o.strip()] if _cors_origins_raw else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(SafeErrorMiddleware)


# ------------------------------------------------------------
# Probes and scrape (unversioned)
# ------------------------------------------------------------
app.include_router(health.router)
app.include_router(metrics_export.router)

# ------------------------------------------------------------
# Versioned API
# ------------------------------------------------------------
app.include_router(intents.router, prefix=API_PREFIX)
app.include_router(documents.router, prefix=API_PREFIX)
app.include_router(templates.router, prefix=API_PREFIX)
app.include_router(guide.router, prefix=API_PREFIX)
