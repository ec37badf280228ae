from __future__ import annotations

from typing import Any, Dict

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import AddFieldIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize
from oiml.core.ir.transform.fields import lower_fields


def transform_add_field(intent: Dict[str, Any], context: TransformContext) -> AddFieldIR:
    diagnostics = DiagnosticCollector()
    entity = intent["entity"]

    if not context.knows_entity(entity):
        diagnostics.error("IR030", f"Entity '{entity}' does not exist", "$.entity")

    fields = lower_fields(intent["fields"], owner=entity, context=context, diagnostics=diagnostics)

    payload = envelope("AddField", context, diagnostics, entityName=entity, fields=fields)
    return finalize(AddFieldIR, payload, diagnostics)
