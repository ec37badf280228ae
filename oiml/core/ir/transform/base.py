from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from oiml.core.errors import IRTransformError
from oiml.core.ir.common import IR_VERSION, DiagnosticCollector

# generatedAt is taken from the context so identical input yields identical IR
DEFAULT_GENERATED_AT = "1970-01-01T00:00:00Z"
DEFAULT_OIML_VERSION = "0.1.0"
TABLE_NAMING_CONVENTIONS = ("snake_case", "camelCase", "PascalCase")

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class TransformOptions:
    auto_index: bool = True
    table_naming: str = "snake_case"


@dataclass(frozen=True)
class TransformContext:
    project_id: str = "unknown"
    intent_id: Optional[str] = None
    oiml_version: Optional[str] = None
    generated_at: str = DEFAULT_GENERATED_AT
    model: Optional[str] = None
    # None means "unknown project state": reference checks are skipped
    existing_entities: Optional[Tuple[str, ...]] = None
    existing_enums: Optional[Tuple[str, ...]] = None
    options: TransformOptions = field(default_factory=TransformOptions)

    def knows_entity(self, name: str) -> bool:
        return self.existing_entities is None or name in self.existing_entities

    def provenance(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "intentId": self.intent_id or "unknown",
            "projectId": self.project_id or "unknown",
            "generatedAt": self.generated_at,
            "sourceIntentVersion": self.oiml_version or DEFAULT_OIML_VERSION,
        }
        if self.model:
            out["model"] = self.model
        return out


def envelope(kind: str, context: TransformContext, diagnostics: DiagnosticCollector, **body: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "kind": kind,
        "irVersion": IR_VERSION,
        "provenance": context.provenance(),
    }
    payload.update(body)
    payload["diagnostics"] = diagnostics.to_wire()
    return payload


def finalize(model_cls: Type[M], payload: Dict[str, Any], diagnostics: DiagnosticCollector) -> M:
    """
    Validate a freshly built IR payload against its model.

    A payload that does not fit the model is a transformer bug or an input the
    schema let through but the IR cannot express; either way the intent is
    rejected with IR099 diagnostics attached to the raised error.
    """
    try:
        return model_cls.model_validate(payload)
    except ValidationError as exc:
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            diagnostics.error("IR099", f"IR validation failed: {err.get('msg')}", loc or None)
        raise IRTransformError(
            f"{payload.get('kind')} IR failed validation",
            diagnostics=diagnostics.to_list(),
        ) from exc
