"""
Intent -> IR lowering.

Dispatch is a table keyed by IntentKind; a kind without a routine fails at
import time rather than at request time. Kinds outside the enum (x- extension
kinds, or anything an older schema let through) are skipped with IR000.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel

from oiml.core.errors import IRTransformError
from oiml.core.hashing import content_id
from oiml.core.ir.common import Diagnostic
from oiml.core.ir.transform.base import TransformContext, TransformOptions
from oiml.core.ir.transform.transformers.add_capability import transform_add_capability
from oiml.core.ir.transform.transformers.add_component import transform_add_component
from oiml.core.ir.transform.transformers.add_endpoint import transform_add_endpoint
from oiml.core.ir.transform.transformers.add_entity import transform_add_entity
from oiml.core.ir.transform.transformers.add_field import transform_add_field
from oiml.core.ir.transform.transformers.add_relation import transform_add_relation
from oiml.core.ir.transform.transformers.remove_entity import transform_remove_entity
from oiml.core.ir.transform.transformers.remove_field import transform_remove_field
from oiml.core.ir.transform.transformers.rename_entity import transform_rename_entity
from oiml.core.ir.transform.transformers.rename_field import transform_rename_field
from oiml.core.ir.transform.transformers.update_endpoint import transform_update_endpoint

_log = logging.getLogger("oiml.transform")


class IntentKind(str, Enum):
    ADD_ENTITY = "add_entity"
    ADD_FIELD = "add_field"
    REMOVE_FIELD = "remove_field"
    ADD_ENDPOINT = "add_endpoint"
    ADD_COMPONENT = "add_component"
    ADD_RELATION = "add_relation"
    REMOVE_ENTITY = "remove_entity"
    RENAME_ENTITY = "rename_entity"
    RENAME_FIELD = "rename_field"
    UPDATE_ENDPOINT = "update_endpoint"
    ADD_CAPABILITY = "add_capability"


Transformer = Callable[[Dict[str, Any], TransformContext], BaseModel]

TRANSFORMERS: Mapping[IntentKind, Transformer] = {
    IntentKind.ADD_ENTITY: transform_add_entity,
    IntentKind.ADD_FIELD: transform_add_field,
    IntentKind.REMOVE_FIELD: transform_remove_field,
    IntentKind.ADD_ENDPOINT: transform_add_endpoint,
    IntentKind.ADD_COMPONENT: transform_add_component,
    IntentKind.ADD_RELATION: transform_add_relation,
    IntentKind.REMOVE_ENTITY: transform_remove_entity,
    IntentKind.RENAME_ENTITY: transform_rename_entity,
    IntentKind.RENAME_FIELD: transform_rename_field,
    IntentKind.UPDATE_ENDPOINT: transform_update_endpoint,
    IntentKind.ADD_CAPABILITY: transform_add_capability,
}

_unhandled = [k.value for k in IntentKind if k not in TRANSFORMERS]
if _unhandled:
    raise ImportError(f"No IR transformer registered for intent kinds: {', '.join(_unhandled)}")


def supported_kinds() -> List[str]:
    return [k.value for k in IntentKind]


@dataclass
class TransformReport:
    ir: Optional[List[BaseModel]]
    # diagnostics for intents that were skipped (unsupported kind or failed IR validation)
    skipped: List[Diagnostic] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.ir is not None

    def ir_wire(self) -> Optional[List[dict]]:
        if self.ir is None:
            return None
        return [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in self.ir]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ir": self.ir_wire(),
            "irAvailable": self.available,
            "skipped": [d.to_wire() for d in self.skipped],
        }


def _resolve_context(document: Mapping[str, Any], context: Optional[TransformContext]) -> TransformContext:
    if context is None:
        project = document.get("project")
        context = TransformContext(project_id=project if isinstance(project, str) and project else "unknown")
    ctx = context
    updates: Dict[str, Any] = {}
    if ctx.intent_id is None:
        updates["intent_id"] = content_id(document)
    if ctx.oiml_version is None and isinstance(document.get("version"), str):
        updates["oiml_version"] = document["version"]
    return dataclasses.replace(ctx, **updates) if updates else ctx


def _kind(raw: Any) -> Optional[IntentKind]:
    try:
        return IntentKind(raw)
    except ValueError:
        return None


def transform_document(document: Mapping[str, Any], context: Optional[TransformContext] = None) -> TransformReport:
    """
    Lower every intent of an already validated document.

    Pure: no clock, no I/O. `ir` is None when no intent could be lowered,
    which is distinct from "nothing requested" only by the skip list.
    """
    ctx = _resolve_context(document, context)
    results: List[BaseModel] = []
    skipped: List[Diagnostic] = []

    for i, intent in enumerate(document.get("intents") or []):
        raw_kind = intent.get("kind") if isinstance(intent, Mapping) else None
        path = f"$.intents[{i}]"
        kind = _kind(raw_kind)

        if kind is None:
            _log.info("No IR transformer available for intent kind %r", raw_kind)
            skipped.append(
                Diagnostic(
                    level="Warning",
                    code="IR000",
                    message=f"No IR transformer available for intent kind '{raw_kind}'",
                    path=path,
                )
            )
            continue

        try:
            results.append(TRANSFORMERS[kind](dict(intent), ctx))
        except IRTransformError as exc:
            _log.info("Skipping %s intent at %s: %s", kind.value, path, exc)
            skipped.extend(exc.diagnostics)

    return TransformReport(ir=results or None, skipped=skipped)


def transform(document: Mapping[str, Any], context: Optional[TransformContext] = None) -> Optional[List[BaseModel]]:
    return transform_document(document, context).ir


__all__ = [
    "IntentKind",
    "TRANSFORMERS",
    "TransformContext",
    "TransformOptions",
    "TransformReport",
    "supported_kinds",
    "transform",
    "transform_document",
]
