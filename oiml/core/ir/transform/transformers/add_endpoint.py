from __future__ import annotations

from typing import Any, Dict

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import AddEndpointIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize
from oiml.core.ir.transform.fields import lower_fields


def transform_add_endpoint(intent: Dict[str, Any], context: TransformContext) -> AddEndpointIR:
    diagnostics = DiagnosticCollector()
    entity = intent.get("entity")

    if entity and not context.knows_entity(entity):
        diagnostics.warn("IR030", f"Entity '{entity}' does not exist", "$.entity")

    endpoint: Dict[str, Any] = {"method": intent["method"], "path": intent["path"]}

    if intent.get("description"):
        endpoint["description"] = intent["description"]
    if entity:
        endpoint["entity"] = entity

    if intent.get("fields"):
        fields = lower_fields(
            intent["fields"],
            owner=entity or "Response",
            context=context,
            diagnostics=diagnostics,
        )
        if fields:
            endpoint["responseFields"] = fields

    auth = intent.get("auth")
    if auth is not None:
        endpoint["auth"] = {"required": auth.get("required") is True}
        if auth.get("roles") is not None:
            endpoint["auth"]["roles"] = list(auth["roles"])

    return finalize(AddEndpointIR, envelope("AddEndpoint", context, diagnostics, endpoint=endpoint), diagnostics)
