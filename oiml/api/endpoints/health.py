from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from oiml.api.deps import get_engine
from oiml.core.engine import Engine
from oiml.core.observability.metrics import inc_named
from oiml.core.validation.validator import INTENT_SCHEMA

router = APIRouter()


@router.get("/health/live")
def live():
    inc_named("health_live")
    return {"status": "ok"}


@router.get("/health/ready")
def ready(engine: Engine = Depends(get_engine)):
    """
    Ready once at least one intent schema version is discoverable and the
    compatibility matrix is non-empty.
    """
    inc_named("health_ready")
    problems: list[str] = []

    versions = engine.registry.available_versions(INTENT_SCHEMA)
    if not versions:
        problems.append(f"no_schema:{INTENT_SCHEMA}")

    if not engine.resolver.matrix:
        problems.append("empty_compatibility_matrix")

    if problems:
        return JSONResponse(status_code=503, content={"status": "not_ready", "problems": problems})

    return {
        "status": "ready",
        "intent_schema_versions": versions,
        "frameworks": engine.resolver.frameworks(),
        "validator_cache": engine.cache_stats(),
    }

