from __future__ import annotations

from typing import Any, Dict

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import RenameEntityIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize
from oiml.core.ir.transform.utils import is_reserved_keyword


def transform_rename_entity(intent: Dict[str, Any], context: TransformContext) -> RenameEntityIR:
    diagnostics = DiagnosticCollector()
    old, new = intent["from"], intent["to"]

    if not context.knows_entity(old):
        diagnostics.error("IR030", f"Entity '{old}' does not exist", "$.from")
    if context.existing_entities is not None and new in context.existing_entities:
        diagnostics.error("IR031", f"Entity '{new}' already exists", "$.to")
    if is_reserved_keyword(new):
        diagnostics.warn("IR011", f"New entity name '{new}' is a reserved SQL keyword", "$.to")

    diagnostics.info("IR050", f"Renaming entity '{old}' to '{new}' - references will be updated automatically", "$")

    payload = envelope(
        "RenameEntity",
        context,
        diagnostics,
        fromName=old,
        toName=new,
        updateReferences=True,
    )
    return finalize(RenameEntityIR, payload, diagnostics)
