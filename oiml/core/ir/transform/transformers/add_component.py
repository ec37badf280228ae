from __future__ import annotations

from typing import Any, Dict

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import AddComponentIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize


def transform_add_component(intent: Dict[str, Any], context: TransformContext) -> AddComponentIR:
    diagnostics = DiagnosticCollector()
    entity = intent.get("entity")

    if entity and not context.knows_entity(entity):
        diagnostics.warn("IR030", f"Entity '{entity}' does not exist", "$.entity")

    component: Dict[str, Any] = {
        "name": intent["component"],
        "template": intent.get("template") or "Custom",
    }
    if entity:
        component["entity"] = entity
    if intent.get("display_fields") is not None:
        component["displayFields"] = list(intent["display_fields"])
    if intent.get("route"):
        component["route"] = intent["route"]

    return finalize(AddComponentIR, envelope("AddComponent", context, diagnostics, component=component), diagnostics)
