from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from oiml.core.ir.common import IRModel
from oiml.core.ir.types import FieldTypeIR, Generated, Presence, ValidationIR


class FieldApiConfig(IRModel):
    include: bool
    endpoints: Optional[List[str]] = None


class FieldIR(IRModel):
    name: str = Field(min_length=1)
    type: FieldTypeIR
    # DB column nullability; primary keys are never nullable
    nullable: bool
    presence: Presence
    unique: Optional[bool] = None
    is_primary: Optional[bool] = None
    generated: Optional[Generated] = None
    validations: Optional[List[ValidationIR]] = None
    api: Optional[FieldApiConfig] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
