from __future__ import annotations

from typing import Any, Dict, List, Optional

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import AddEntityIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize
from oiml.core.ir.transform.fields import lower_fields
from oiml.core.ir.transform.utils import is_reserved_keyword, to_table_name


def _primary_key(fields: List[Dict[str, Any]]) -> Optional[str]:
    for f in fields:
        if f.get("isPrimary"):
            return f["name"]
    return None


def _auto_indexes(fields: List[Dict[str, Any]], diagnostics: DiagnosticCollector) -> List[Dict[str, Any]]:
    constraints: List[Dict[str, Any]] = []
    for f in fields:
        if f["type"]["kind"] != "Reference":
            continue
        constraints.append({"kind": "Index", "fields": [f["name"]]})
        diagnostics.info("IR003", f"Auto-added index for foreign key '{f['name']}'", "$.fields")
    return constraints


def transform_add_entity(intent: Dict[str, Any], context: TransformContext) -> AddEntityIR:
    diagnostics = DiagnosticCollector()
    entity = intent["entity"]

    if is_reserved_keyword(entity):
        diagnostics.warn("IR011", f"Entity name '{entity}' is a reserved SQL keyword", "$.entity")

    table_name = to_table_name(entity, context.options.table_naming)
    diagnostics.info("IR002", f"Inferred table name '{table_name}'", "$.entity")

    fields = lower_fields(
        intent["fields"],
        owner=entity,
        context=context,
        diagnostics=diagnostics,
        infer_primary_key=True,
    )

    pk = _primary_key(fields)
    if pk:
        diagnostics.info("IR001", f"Inferred primary key '{pk}'", "$.fields")
    else:
        diagnostics.error("IR020", "No primary key found or could be inferred", "$.fields")

    constraints = _auto_indexes(fields, diagnostics) if context.options.auto_index else []

    entity_ir: Dict[str, Any] = {
        "name": entity,
        "storage": {
            "kind": "RelationalTable",
            "tableName": table_name,
            "primaryKey": {"kind": "Single", "field": pk or "id"},
        },
        "fields": fields,
        "createdByIntent": context.intent_id or "unknown",
        "updatedByIntents": [],
    }
    if constraints:
        entity_ir["constraints"] = constraints

    return finalize(AddEntityIR, envelope("AddEntity", context, diagnostics, entity=entity_ir), diagnostics)
