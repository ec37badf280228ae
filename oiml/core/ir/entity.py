from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from oiml.core.ir.common import IRModel
from oiml.core.ir.field import FieldIR


class SinglePrimaryKey(IRModel):
    kind: Literal["Single"] = "Single"
    field: str = Field(min_length=1)


class CompositePrimaryKey(IRModel):
    kind: Literal["Composite"] = "Composite"
    fields: List[Annotated[str, Field(min_length=1)]] = Field(min_length=2)


PrimaryKey = Annotated[Union[SinglePrimaryKey, CompositePrimaryKey], Field(discriminator="kind")]


class RelationalTableStorage(IRModel):
    kind: Literal["RelationalTable"] = "RelationalTable"
    table_name: str = Field(min_length=1)
    primary_key: PrimaryKey


class UniqueConstraint(IRModel):
    kind: Literal["Unique"] = "Unique"
    name: Optional[str] = None
    fields: List[Annotated[str, Field(min_length=1)]] = Field(min_length=1)


class IndexConstraint(IRModel):
    kind: Literal["Index"] = "Index"
    name: Optional[str] = None
    fields: List[Annotated[str, Field(min_length=1)]] = Field(min_length=1)
    unique: Optional[bool] = None
    # index type hint: btree, hash, gin, ...
    type: Optional[str] = None


Constraint = Annotated[Union[UniqueConstraint, IndexConstraint], Field(discriminator="kind")]


class EntityIR(IRModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    storage: RelationalTableStorage
    fields: List[FieldIR] = Field(min_length=1)
    constraints: Optional[List[Constraint]] = None
    created_by_intent: str = Field(min_length=1)
    updated_by_intents: List[str] = Field(default_factory=list)
