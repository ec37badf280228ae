from __future__ import annotations

from typing import Any, Dict

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import AddRelationIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize
from oiml.core.ir.transform.fields import lower_reference

_NULLABLE_ATTRIBUTES = ("nullable", "optional")


def transform_add_relation(intent: Dict[str, Any], context: TransformContext) -> AddRelationIR:
    diagnostics = DiagnosticCollector()
    rel = intent["relation"]

    for side in ("source_entity", "target_entity"):
        if not context.knows_entity(rel[side]):
            label = "Source" if side == "source_entity" else "Target"
            diagnostics.error("IR030", f"{label} entity '{rel[side]}' does not exist", f"$.relation.{side}")

    nullable = any(a.get("name") in _NULLABLE_ATTRIBUTES for a in rel.get("attributes") or [])
    reference = lower_reference(
        rel,
        relation_name=rel["field_name"],
        nullable=nullable,
        diagnostics=diagnostics,
        path="$.relation",
    )

    relation_ir = {
        "sourceEntity": rel["source_entity"],
        "targetEntity": rel["target_entity"],
        "fieldName": rel["field_name"],
        "type": reference,
        "emitMigration": rel.get("emit_migration", True) is not False,
    }
    return finalize(AddRelationIR, envelope("AddRelation", context, diagnostics, relation=relation_ir), diagnostics)
