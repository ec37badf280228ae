"""Lowering of authored field specs (and their relations) into FieldIR payloads."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.transform.base import TransformContext
from oiml.core.ir.transform.utils import generate_enum_name, is_reserved_keyword, resolve_field_type

INVERSE_RELATION = {
    "one_to_one": "one_to_one",
    "many_to_one": "one_to_many",
    "one_to_many": "many_to_one",
    "many_to_many": "many_to_many",
}

_ON_DELETE = {"restrict": "Restrict", "cascade": "Cascade", "setnull": "SetNull"}

_NOW_DEFAULTS = ("now", "current_timestamp")


def cardinality(relation_kind: str) -> str:
    return "One" if relation_kind.endswith("_to_one") else "Many"


def _on_delete(attributes: List[Dict[str, Any]], diagnostics: DiagnosticCollector, path: str) -> Optional[str]:
    for attr in attributes:
        args = attr.get("args") or {}
        if "on_delete" not in args:
            continue
        raw = str(args["on_delete"])
        action = _ON_DELETE.get(raw.replace("_", "").replace(" ", "").lower())
        if action is None:
            diagnostics.warn("IR012", f"Unsupported on_delete action '{raw}'", f"{path}.attributes")
        return action
    return None


def lower_reference(
    relation: Dict[str, Any],
    *,
    relation_name: str,
    nullable: bool,
    diagnostics: DiagnosticCollector,
    path: str,
) -> Dict[str, Any]:
    kind = relation["kind"]
    foreign_key = relation.get("foreign_key") or {}

    ref: Dict[str, Any] = {
        "kind": "Reference",
        "targetEntity": relation["target_entity"],
        "targetField": foreign_key.get("target_field") or "id",
        "cardinality": cardinality(kind),
        "nullable": nullable,
        "relationName": relation_name,
    }

    on_delete = _on_delete(relation.get("attributes") or [], diagnostics, path)
    if on_delete:
        ref["onDelete"] = on_delete

    reverse = relation.get("reverse")
    if reverse:
        reverse_kind = reverse.get("kind") or INVERSE_RELATION[kind]
        ref["reverse"] = {
            "enabled": reverse.get("enabled", True) is not False,
            "fieldName": reverse["field_name"],
            "cardinality": cardinality(reverse_kind),
        }
    return ref


def lower_default(value: Any, *, is_primary: bool, diagnostics: DiagnosticCollector, path: str) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if value == "autoincrement":
        # on a primary key this becomes Generated{AutoIncrement} instead
        return None if is_primary else {"kind": "AutoIncrement"}
    if isinstance(value, str) and value.lower() in _NOW_DEFAULTS:
        return {"kind": "Now"}
    if value == "uuid":
        return {"kind": "UUIDv4"}
    if isinstance(value, (str, bool, int, float)):
        return {"kind": "Literal", "value": value}

    diagnostics.warn("IR022", f"Default of type {type(value).__name__} is not supported and was ignored", f"{path}.default")
    return None


def _presence(default: Optional[Dict[str, Any]], *, required: bool) -> Dict[str, Any]:
    if default is not None:
        return {"kind": "OptionalWithDefault", "default": default}
    if required:
        return {"kind": "Required"}
    return {"kind": "Optional"}


def lower_field(
    spec: Dict[str, Any],
    *,
    owner: str,
    path: str,
    context: TransformContext,
    diagnostics: DiagnosticCollector,
    infer_primary_key: bool = False,
) -> Optional[Dict[str, Any]]:
    """
    Returns the FieldIR payload, or None when the field cannot be lowered
    (an IR021 error is recorded in that case).

    Primary keys (only when `infer_primary_key`): a field named `id` or with
    default `autoincrement`. Integer keys get Generated{AutoIncrement}, UUID
    keys without an explicit default get Generated{UUID}. Keys are never
    nullable.
    """
    name = spec["name"]
    authored_type = spec.get("type")

    if is_reserved_keyword(name):
        diagnostics.warn("IR011", f"Field name '{name}' is a reserved SQL keyword", f"{path}.name")

    try:
        field_type = resolve_field_type(authored_type, spec.get("enum_values"), spec.get("array_type"))
    except ValueError as exc:
        diagnostics.error("IR021", f"Invalid field type '{authored_type}' for field '{name}': {exc}", f"{path}.type")
        return None

    if field_type["kind"] == "Enum":
        field_type["name"] = generate_enum_name(owner, name)

    required = spec.get("required") is True
    default = spec.get("default")
    is_primary = infer_primary_key and (name == "id" or default == "autoincrement")

    relation = spec.get("relation")
    if relation:
        field_type = lower_reference(
            relation,
            relation_name=name,
            nullable=not required,
            diagnostics=diagnostics,
            path=f"{path}.relation",
        )
        target = relation["target_entity"]
        if target != owner and not context.knows_entity(target):
            diagnostics.warn("IR030", f"Referenced entity '{target}' does not exist", f"{path}.relation.target_entity")

    out: Dict[str, Any] = {"name": name, "type": field_type, "nullable": not required}

    if spec.get("unique"):
        out["unique"] = True

    if is_primary:
        out["isPrimary"] = True
        out["nullable"] = False
        if default == "autoincrement" or authored_type == "integer":
            out["generated"] = {"strategy": "AutoIncrement"}
        elif authored_type == "uuid" and default is None:
            out["generated"] = {"strategy": "UUID"}

    default_ir = lower_default(default, is_primary=is_primary, diagnostics=diagnostics, path=path)
    out["presence"] = _presence(default_ir, required=required or is_primary)

    if spec.get("max_length"):
        out["validations"] = [{"kind": "MaxLength", "max": spec["max_length"]}]

    api = spec.get("api")
    if api:
        out["api"] = {"include": api["include"]}
        if api.get("endpoints") is not None:
            out["api"]["endpoints"] = list(api["endpoints"])

    return out


def lower_fields(
    specs: List[Dict[str, Any]],
    *,
    owner: str,
    context: TransformContext,
    diagnostics: DiagnosticCollector,
    infer_primary_key: bool = False,
) -> List[Dict[str, Any]]:
    fields: List[Dict[str, Any]] = []
    seen = set()
    for i, spec in enumerate(specs):
        path = f"$.fields[{i}]"
        name = spec["name"]
        if name in seen:
            diagnostics.error("IR020", f"Duplicate field name '{name}'", f"{path}.name")
            continue
        seen.add(name)

        lowered = lower_field(
            spec,
            owner=owner,
            path=path,
            context=context,
            diagnostics=diagnostics,
            infer_primary_key=infer_primary_key,
        )
        if lowered is not None:
            fields.append(lowered)
    return fields
