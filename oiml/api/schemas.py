from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class DocumentRequest(BaseModel):
    # raw JSON/YAML text, or a message block list wrapping it
    content: str
    format: str = Field(default="yaml", description="json | yaml")


class TransformRequest(DocumentRequest):
    project_id: Optional[str] = None
    intent_id: Optional[str] = None
    model: Optional[str] = None


class ResolveTemplateRequest(BaseModel):
    intent_schema_version: str = Field(..., min_length=1)
    framework: str = Field(..., min_length=1)
    framework_version: str = Field(..., min_length=1)
    category: Optional[Literal["database", "api", "ui"]] = None
