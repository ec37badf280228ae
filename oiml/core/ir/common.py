from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

IR_VERSION = "1.0.0"

ISO_UTC_PATTERN = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{3})?Z$"
SEMVER_PATTERN = r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$"

DiagnosticLevel = Literal["Info", "Warning", "Error"]


class IRModel(BaseModel):
    """Base for every IR node: camelCase on the wire, unknown keys rejected."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Diagnostic(IRModel):
    level: DiagnosticLevel
    code: str = Field(min_length=1)
    message: str = Field(min_length=1)
    # JSONPath-like pointer into the source intent
    path: Optional[str] = None


class Provenance(IRModel):
    intent_id: str = Field(min_length=1)
    project_id: str = Field(min_length=1)
    generated_at: str = Field(pattern=ISO_UTC_PATTERN)
    model: Optional[str] = None
    source_intent_version: str = Field(pattern=SEMVER_PATTERN)


class DiagnosticCollector:
    def __init__(self) -> None:
        self._items: List[Diagnostic] = []

    def info(self, code: str, message: str, path: Optional[str] = None) -> None:
        self._items.append(Diagnostic(level="Info", code=code, message=message, path=path))

    def warn(self, code: str, message: str, path: Optional[str] = None) -> None:
        self._items.append(Diagnostic(level="Warning", code=code, message=message, path=path))

    def error(self, code: str, message: str, path: Optional[str] = None) -> None:
        self._items.append(Diagnostic(level="Error", code=code, message=message, path=path))

    def has_errors(self) -> bool:
        return any(d.level == "Error" for d in self._items)

    def codes(self) -> List[str]:
        return [d.code for d in self._items]

    def to_list(self) -> List[Diagnostic]:
        return list(self._items)

    def to_wire(self) -> List[dict]:
        return [d.to_wire() for d in self._items]
