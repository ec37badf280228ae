from __future__ import annotations

import logging

from fastapi import APIRouter
from starlette.responses import JSONResponse

from oiml.core.errors import GuideUnavailable
from oiml.core.guide import load_guide
from oiml.core.observability.metrics import inc_named

log = logging.getLogger("oiml.guide")

router = APIRouter(tags=["guide"])


@router.get("/guide")
def agents_guide():
    """Implementation guide for agents applying intents (AGENTS.md)."""
    inc_named("api_agents_guide")
    try:
        guide = load_guide()
    except GuideUnavailable as e:
        log.warning("%s", e)
        return JSONResponse(
            status_code=404,
            content={"success": False, "error": str(e), "searched_paths": e.searched},
        )
    return guide.to_dict()
