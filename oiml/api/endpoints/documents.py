"""Project and plan document validation."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends

from oiml.api.deps import get_engine
from oiml.api.schemas import DocumentRequest
from oiml.core.engine import Engine
from oiml.core.errors import DocumentParseError, OimlError
from oiml.core.observability.metrics import inc_named
from oiml.core.validation.parser import parse
from oiml.core.validation.validator import ValidationResult

log = logging.getLogger("oiml.validation")

router = APIRouter(tags=["documents"])


def run_validation(req: DocumentRequest, validate: Callable[[Any], ValidationResult]) -> Dict[str, Any]:
    """
    Parse then validate. Parse problems and schema infrastructure faults are
    reported in the `valid: false` body, never as HTTP errors.
    """
    try:
        document = parse(req.content, req.format)
    except DocumentParseError as e:
        return {"valid": False, "errors": [str(e)]}

    try:
        return validate(document).to_dict()
    except OimlError as e:
        log.warning("Validation aborted: %s", e)
        return {"valid": False, "errors": [f"Error: {e}"]}


@router.post("/projects/validate")
def validate_project(req: DocumentRequest, engine: Engine = Depends(get_engine)):
    inc_named("api_validate_project")
    return run_validation(req, engine.validate_project)


@router.post("/plans/validate")
def validate_plan(req: DocumentRequest, engine: Engine = Depends(get_engine)):
    inc_named("api_validate_plan")
    return run_validation(req, engine.validate_plan)
