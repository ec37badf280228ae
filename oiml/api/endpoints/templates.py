from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from oiml.api.deps import get_engine
from oiml.api.schemas import ResolveTemplateRequest
from oiml.core.engine import Engine
from oiml.core.errors import OimlError
from oiml.core.observability.metrics import inc_named

router = APIRouter(prefix="/templates", tags=["templates"])


@router.post("/resolve")
def resolve_template(req: ResolveTemplateRequest, engine: Engine = Depends(get_engine)):
    inc_named("api_resolve_template")
    result = engine.resolve_template(
        req.intent_schema_version,
        req.framework,
        req.framework_version,
        req.category,
    )
    return result.to_dict()


@router.get("/frameworks")
def list_frameworks(engine: Engine = Depends(get_engine)):
    return {"frameworks": engine.resolver.frameworks()}


@router.post("/reload")
def reload_matrix(engine: Engine = Depends(get_engine)):
    try:
        count = engine.reload_matrix()
    except OimlError as e:
        return JSONResponse(status_code=400, content={"status": "error", "error": str(e)})
    return {"status": "reloaded", "entries": count}
