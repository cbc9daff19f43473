"""Contract message-shape descriptions."""

from cwdclient.schema.loader import dump_schema, load_schema, parse_cosmwasm_schema, parse_schema_document
from cwdclient.schema.model import ContractSchema, FieldKind, FieldSpec, TypeSpec, VariantSpec

__all__ = [
    "ContractSchema",
    "FieldKind",
    "FieldSpec",
    "TypeSpec",
    "VariantSpec",
    "dump_schema",
    "load_schema",
    "parse_cosmwasm_schema",
    "parse_schema_document",
]
