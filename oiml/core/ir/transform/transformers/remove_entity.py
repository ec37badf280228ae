from __future__ import annotations

from typing import Any, Dict

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import RemoveEntityIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize


def transform_remove_entity(intent: Dict[str, Any], context: TransformContext) -> RemoveEntityIR:
    diagnostics = DiagnosticCollector()
    entity = intent["entity"]
    cascade = intent.get("cascade") is True

    if not context.knows_entity(entity):
        diagnostics.error("IR030", f"Entity '{entity}' does not exist", "$.entity")

    if cascade:
        diagnostics.warn(
            "IR041",
            f"Cascade delete is enabled for entity '{entity}' - related data will be deleted",
            "$.cascade",
        )

    payload = envelope("RemoveEntity", context, diagnostics, entityName=entity, cascade=cascade)
    return finalize(RemoveEntityIR, payload, diagnostics)
