from __future__ import annotations

from typing import Any, Dict, Optional

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import UpdateEndpointIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize


def _source(source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    kind = source.get("type")
    if kind == "relation":
        out = {"type": "relation", "relation": source.get("relation")}
        if source.get("field"):
            out["field"] = source["field"]
        return out
    if kind == "field":
        return {"type": "field", "entity": source.get("entity"), "field": source.get("field")}
    if kind == "computed":
        return {"type": "computed", "expression": source.get("expression")}
    if kind == "join" and source.get("join"):
        join = source["join"]
        return {
            "type": "join",
            "foreignKey": join.get("foreign_key"),
            "targetEntity": join.get("target_entity"),
            "targetField": join.get("target_field"),
        }
    return None


def transform_update_endpoint(intent: Dict[str, Any], context: TransformContext) -> UpdateEndpointIR:
    diagnostics = DiagnosticCollector()
    requested = intent.get("updates") or {}
    updates: Dict[str, Any] = {}

    add_fields = []
    for i, item in enumerate(requested.get("add_field") or []):
        source = _source(item.get("source") or {})
        if source is None:
            diagnostics.warn("IR060", f"Field '{item.get('name')}' has no usable source", f"$.updates.add_field[{i}].source")
            continue
        add_fields.append({"name": item["name"], "source": source})
    if add_fields:
        updates["addFields"] = add_fields

    if requested.get("remove_field"):
        updates["removeFields"] = list(requested["remove_field"])

    if not updates:
        diagnostics.info("IR061", "Endpoint update contains no changes", "$.updates")

    payload = envelope(
        "UpdateEndpoint",
        context,
        diagnostics,
        method=intent["method"],
        path=intent["path"],
        updates=updates,
    )
    return finalize(UpdateEndpointIR, payload, diagnostics)
