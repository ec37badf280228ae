"""
Resolved field types and value semantics.

Every field lowers to exactly one FieldTypeIR variant. Defaults (a value used
when none is supplied) and generated values (computed by a strategy regardless
of input) are kept apart: defaults live in the field's presence, generation in
its own `generated` slot.
"""
from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from oiml.core.ir.common import IRModel

ScalarName = Literal[
    "String", "Text", "Int", "BigInt", "Float", "Decimal", "Boolean",
    "DateTime", "Date", "Time", "UUID", "Bytes",
]
ArrayElementName = Literal["String", "Text", "Int", "BigInt", "Float", "Decimal", "Boolean", "UUID"]
Cardinality = Literal["One", "Many"]
OnDelete = Literal["Restrict", "Cascade", "SetNull"]


# ---------------------------------------------------------------------------
# Field types
# ---------------------------------------------------------------------------

class ScalarType(IRModel):
    kind: Literal["Scalar"] = "Scalar"
    scalar: ScalarName


class EnumType(IRModel):
    kind: Literal["Enum"] = "Enum"
    name: str = Field(min_length=1)
    values: List[Annotated[str, Field(min_length=1)]] = Field(min_length=1)
    source: Literal["Inline", "Shared"] = "Inline"


class ReverseRelation(IRModel):
    enabled: bool
    field_name: str = Field(min_length=1)
    cardinality: Cardinality


class ReferenceType(IRModel):
    kind: Literal["Reference"] = "Reference"
    target_entity: str = Field(min_length=1)
    target_field: Optional[str] = None
    cardinality: Cardinality
    nullable: bool
    relation_name: Optional[str] = None
    on_delete: Optional[OnDelete] = None
    reverse: Optional[ReverseRelation] = None


class JsonType(IRModel):
    kind: Literal["Json"] = "Json"
    schema_ref: Optional[str] = None


class ArrayType(IRModel):
    kind: Literal["Array"] = "Array"
    element_type: ArrayElementName


FieldTypeIR = Annotated[
    Union[ScalarType, EnumType, ReferenceType, JsonType, ArrayType],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Defaults / generated values
# ---------------------------------------------------------------------------

class LiteralDefault(IRModel):
    kind: Literal["Literal"] = "Literal"
    value: Union[bool, int, float, str]


class NowDefault(IRModel):
    kind: Literal["Now"] = "Now"


class UUIDv4Default(IRModel):
    kind: Literal["UUIDv4"] = "UUIDv4"


class AutoIncrementDefault(IRModel):
    kind: Literal["AutoIncrement"] = "AutoIncrement"


DefaultValueIR = Annotated[
    Union[LiteralDefault, NowDefault, UUIDv4Default, AutoIncrementDefault],
    Field(discriminator="kind"),
]


class Generated(IRModel):
    strategy: Literal["AutoIncrement", "UUID", "Timestamp", "Custom"]
    expr: Optional[str] = None


# ---------------------------------------------------------------------------
# Presence: Required | Optional | OptionalWithDefault(default)
# ---------------------------------------------------------------------------

class RequiredPresence(IRModel):
    kind: Literal["Required"] = "Required"


class OptionalPresence(IRModel):
    kind: Literal["Optional"] = "Optional"


class OptionalWithDefault(IRModel):
    kind: Literal["OptionalWithDefault"] = "OptionalWithDefault"
    default: DefaultValueIR


Presence = Annotated[
    Union[RequiredPresence, OptionalPresence, OptionalWithDefault],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Validation hints
# ---------------------------------------------------------------------------

class MinLength(IRModel):
    kind: Literal["MinLength"] = "MinLength"
    min: int = Field(ge=0)


class MaxLength(IRModel):
    kind: Literal["MaxLength"] = "MaxLength"
    max: int = Field(gt=0)


class PatternHint(IRModel):
    kind: Literal["Pattern"] = "Pattern"
    regex: str


class MinValue(IRModel):
    kind: Literal["Min"] = "Min"
    min: float


class MaxValue(IRModel):
    kind: Literal["Max"] = "Max"
    max: float


ValidationIR = Annotated[
    Union[MinLength, MaxLength, PatternHint, MinValue, MaxValue],
    Field(discriminator="kind"),
]
