from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from oiml.api.deps import get_engine
from oiml.api.endpoints.documents import run_validation
from oiml.api.schemas import DocumentRequest, TransformRequest
from oiml.core.engine import Engine
from oiml.core.errors import DocumentParseError, OimlError
from oiml.core.ir.transform import TransformContext, supported_kinds
from oiml.core.observability.metrics import inc_named
from oiml.core.validation.parser import parse

log = logging.getLogger("oiml.transform")

router = APIRouter(prefix="/intents", tags=["intents"])


@router.post("/validate")
def validate_intent(req: DocumentRequest, engine: Engine = Depends(get_engine)):
    inc_named("api_validate_intent")
    return run_validation(req, engine.validate_intent)


@router.post("/transform")
def transform_intent(req: TransformRequest, engine: Engine = Depends(get_engine)) -> Dict[str, Any]:
    """
    Validate, then lower to IR in the same pass. Lowering assumes a
    schema-valid document, so an invalid one is reported with its violations
    and never reaches the transformer.
    """
    inc_named("api_transform_intent")
    try:
        document = parse(req.content, req.format)
    except DocumentParseError as e:
        return {"success": False, "error": str(e)}

    context = TransformContext(
        project_id=req.project_id or "unknown",
        intent_id=req.intent_id,
        model=req.model,
    )
    try:
        validation = engine.validate_intent(document, context)
    except OimlError as e:
        log.warning("Transform aborted: %s", e)
        return {"success": False, "error": f"Transformation error: {e}"}

    if not validation.valid:
        return {"success": False, "error": "Document failed schema validation", "errors": validation.errors}

    report = validation.transform_report
    skipped = [d.to_wire() for d in report.skipped]

    if not report.available:
        return {
            "success": False,
            "error": "No IR transformation available for the given intent(s)",
            "version": document.get("version"),
            "intentKinds": [i.get("kind") for i in document.get("intents") or []],
            "supportedKinds": supported_kinds(),
            "skipped": skipped,
        }

    return {
        "success": True,
        "ir": report.ir_wire(),
        "skipped": skipped,
        "metadata": {
            "version": document.get("version"),
            "projectId": context.project_id,
            "intentId": req.intent_id or validation.intent_id,
            "transformedIntents": len(report.ir or []),
        },
    }
