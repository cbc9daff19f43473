"""Message-shape description of a contract.

A contract exposes two closed sets of tagged variants (queries and executes).
Each variant carries a list of fields; optionality (may be omitted) and
nullability (explicit null is meaningful) are recorded per field.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FieldKind(str, Enum):
    """Semantic type of a field value."""
    STRING = "string"
    DECIMAL = "decimal"  # Uint64/Uint128 etc., sent as a decimal string
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    ANY = "any"


class TypeSpec(BaseModel):
    """Type of a field, a sequence item or a response."""
    model_config = ConfigDict(extra="forbid")

    kind: FieldKind = FieldKind.ANY
    name: str | None = None  # definition name, e.g. "Uint128", "Coin", "InfoResponse"
    fields: list[FieldSpec] | None = None  # struct members
    items: TypeSpec | None = None  # sequence element


class FieldSpec(BaseModel):
    """A named field of a variant or struct, keyed by its wire name."""
    model_config = ConfigDict(extra="forbid")

    name: str
    type: TypeSpec = Field(default_factory=TypeSpec)
    optional: bool = False
    nullable: bool = False
    description: str | None = None

    @property
    def required(self) -> bool:
        """True when the caller must supply a value."""
        return not self.optional and not self.nullable


class VariantSpec(BaseModel):
    """One tagged message shape."""
    model_config = ConfigDict(extra="forbid")

    tag: str
    fields: list[FieldSpec] = Field(default_factory=list)
    response: TypeSpec | None = None
    description: str | None = None

    def field(self, name: str) -> FieldSpec | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


class ContractSchema(BaseModel):
    """Query and execute variants declared by one contract."""
    model_config = ConfigDict(extra="forbid")

    contract_name: str
    contract_version: str | None = None
    queries: list[VariantSpec] = Field(default_factory=list)
    executes: list[VariantSpec] = Field(default_factory=list)

    def query(self, tag: str) -> VariantSpec | None:
        """Find a query variant by wire tag."""
        return _find(self.queries, tag)

    def execute(self, tag: str) -> VariantSpec | None:
        """Find an execute variant by wire tag."""
        return _find(self.executes, tag)


def _find(variants: list[VariantSpec], tag: str) -> VariantSpec | None:
    for variant in variants:
        if variant.tag == tag:
            return variant
    return None


TypeSpec.model_rebuild()
FieldSpec.model_rebuild()
