from __future__ import annotations

from typing import Any, Dict

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import RenameFieldIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize
from oiml.core.ir.transform.utils import is_reserved_keyword


def transform_rename_field(intent: Dict[str, Any], context: TransformContext) -> RenameFieldIR:
    diagnostics = DiagnosticCollector()
    entity, old, new = intent["entity"], intent["from"], intent["to"]

    if not context.knows_entity(entity):
        diagnostics.error("IR030", f"Entity '{entity}' does not exist", "$.entity")
    if is_reserved_keyword(new):
        diagnostics.warn("IR011", f"New field name '{new}' is a reserved SQL keyword", "$.to")

    diagnostics.info(
        "IR051",
        f"Renaming field '{old}' to '{new}' in entity '{entity}' - references will be updated automatically",
        "$",
    )

    payload = envelope(
        "RenameField",
        context,
        diagnostics,
        entityName=entity,
        fromName=old,
        toName=new,
        updateReferences=True,
    )
    return finalize(RenameFieldIR, payload, diagnostics)
