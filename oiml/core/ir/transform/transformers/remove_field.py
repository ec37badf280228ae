from __future__ import annotations

from typing import Any, Dict

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import RemoveFieldIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize


def transform_remove_field(intent: Dict[str, Any], context: TransformContext) -> RemoveFieldIR:
    diagnostics = DiagnosticCollector()
    entity = intent["entity"]
    names = list(intent["fields"])

    if not context.knows_entity(entity):
        diagnostics.error("IR030", f"Entity '{entity}' does not exist", "$.entity")

    if len(set(names)) != len(names):
        diagnostics.warn("IR040", "Duplicate field names in remove list", "$.fields")

    payload = envelope("RemoveField", context, diagnostics, entityName=entity, fieldNames=names)
    return finalize(RemoveFieldIR, payload, diagnostics)
