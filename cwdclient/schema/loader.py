"""Schema loading utilities.

Two source formats are accepted:

- the ``cosmwasm-schema`` IDL document (``contract_name``, ``execute``,
  ``query``, ``responses`` ...) or a legacy ``schema/`` directory holding
  ``query_msg.json`` / ``execute_msg.json``;
- the native format, a JSON dump of :class:`ContractSchema`.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from cwdclient.schema.model import ContractSchema, FieldKind, FieldSpec, TypeSpec, VariantSpec
from cwdclient.utils.exceptions import SchemaError

# Uint64, Uint128, Int256 ... are serialized as decimal strings.
_DECIMAL_WRAPPER = re.compile(r"^U?[Ii]nt\d+$")

_PRIMITIVES = {
    "string": FieldKind.STRING,
    "integer": FieldKind.INTEGER,
    "number": FieldKind.NUMBER,
    "boolean": FieldKind.BOOLEAN,
}


def load_schema(path: Path | str) -> ContractSchema:
    """
    Load a contract schema from a file or a ``schema/`` directory.

    Args:
        path: IDL JSON file, native JSON file, or legacy schema directory.

    Returns:
        Parsed contract schema.
    """
    path = Path(path).expanduser()
    if path.is_dir():
        return _load_schema_dir(path)
    if not path.exists():
        raise SchemaError(f"Schema not found: {path}", source=str(path))
    data = _read_json(path)
    return parse_schema_document(data, source=str(path), default_name=path.stem)


def parse_schema_document(data: Any, *, source: str | None = None, default_name: str = "contract") -> ContractSchema:
    """Parse an already-decoded schema document in either supported format."""
    if not isinstance(data, dict):
        raise SchemaError("Schema document must be a JSON object", source=source)
    if "queries" in data or "executes" in data:
        try:
            return ContractSchema.model_validate(data)
        except ValidationError as e:
            raise SchemaError(f"Invalid contract schema: {e}", source=source) from e
    if "query" in data or "execute" in data:
        if "contract_name" not in data:
            data = {**data, "contract_name": default_name}
        return parse_cosmwasm_schema(data, source=source)
    raise SchemaError("Unrecognized schema format (expected 'query'/'execute' or 'queries'/'executes')", source=source)


def dump_schema(schema: ContractSchema, path: Path | str | None = None) -> str:
    """Serialize a schema in the native format; also write it when a path is given."""
    text = schema.model_dump_json(indent=2, exclude_none=True)
    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    return text


def parse_cosmwasm_schema(document: dict[str, Any], *, source: str | None = None) -> ContractSchema:
    """
    Build a ContractSchema from a cosmwasm-schema IDL document.

    Variants come from each message's ``oneOf``; a field is optional when it
    is missing from ``required`` and nullable when its type admits null.
    """
    name = document.get("contract_name")
    if not isinstance(name, str) or not name.strip():
        raise SchemaError("IDL document has no contract_name", source=source)
    responses = document.get("responses") or {}
    if not isinstance(responses, dict):
        raise SchemaError("'responses' must be an object", source=source)

    queries = _parse_message(document.get("query"), "query", source)
    for variant in queries:
        response_doc = responses.get(variant.tag)
        if isinstance(response_doc, dict):
            variant.response = _parse_response(response_doc, source)
    executes = _parse_message(document.get("execute"), "execute", source)

    schema = ContractSchema(
        contract_name=name.strip(),
        contract_version=document.get("contract_version"),
        queries=queries,
        executes=executes,
    )
    logger.debug(
        "Parsed schema {} ({} queries, {} executes)",
        schema.contract_name,
        len(schema.queries),
        len(schema.executes),
    )
    return schema


def _load_schema_dir(path: Path) -> ContractSchema:
    contract_name = path.parent.name if path.name == "schema" else path.name
    idl = path / f"{contract_name}.json"
    if idl.is_file():
        return load_schema(idl)
    document: dict[str, Any] = {"contract_name": contract_name}
    for key, filename in (("query", "query_msg.json"), ("execute", "execute_msg.json")):
        file = path / filename
        if file.is_file():
            document[key] = _read_json(file)
    if len(document) == 1:
        raise SchemaError(f"No query_msg.json or execute_msg.json in {path}", source=str(path))
    return parse_cosmwasm_schema(document, source=str(path))


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Failed to parse {path}: {e}", source=str(path)) from e


def _parse_message(doc: Any, kind: str, source: str | None) -> list[VariantSpec]:
    if doc is None:
        return []
    if not isinstance(doc, dict):
        raise SchemaError(f"'{kind}' message schema must be an object", source=source)
    definitions = doc.get("definitions") or {}
    if doc.get("type") == "string" and "enum" in doc:
        return [VariantSpec(tag=str(tag)) for tag in doc.get("enum") or []]
    entries = doc.get("oneOf") or doc.get("anyOf")
    if not isinstance(entries, list):
        raise SchemaError(f"'{kind}' message is not a tagged union (no oneOf)", source=source)

    variants: list[VariantSpec] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise SchemaError(f"Malformed '{kind}' variant: {entry!r}", source=source)
        if entry.get("type") == "string":
            # Unit variants serialize as bare strings in the IDL; sent as {tag: {}}.
            variants.extend(VariantSpec(tag=str(tag), description=entry.get("description")) for tag in entry.get("enum") or [])
            continue
        properties = entry.get("properties") or {}
        if len(properties) != 1:
            raise SchemaError(f"'{kind}' variant must have exactly one tag property: {sorted(properties)}", source=source)
        tag, body = next(iter(properties.items()))
        body_type, _ = _resolve_type(body, definitions, frozenset(), source)
        fields = body_type.fields if body_type.kind == FieldKind.STRUCT else None
        if fields is None:
            raise SchemaError(f"Variant '{tag}' body is not an object", source=source)
        variants.append(VariantSpec(tag=tag, fields=fields, description=entry.get("description")))
    return variants


def _parse_response(doc: dict[str, Any], source: str | None) -> TypeSpec:
    type_spec, _ = _resolve_type(doc, doc.get("definitions") or {}, frozenset(), source)
    title = doc.get("title")
    if isinstance(title, str) and title:
        type_spec.name = title
    return type_spec


def _struct_fields(node: dict[str, Any], definitions: dict[str, Any], seen: frozenset[str], source: str | None) -> list[FieldSpec]:
    required = set(node.get("required") or [])
    fields: list[FieldSpec] = []
    for field_name, prop in (node.get("properties") or {}).items():
        type_spec, nullable = _resolve_type(prop, definitions, seen, source)
        fields.append(
            FieldSpec(
                name=field_name,
                type=type_spec,
                optional=field_name not in required,
                nullable=nullable,
                description=prop.get("description") if isinstance(prop, dict) else None,
            )
        )
    return fields


def _resolve_type(
    node: Any,
    definitions: dict[str, Any],
    seen: frozenset[str],
    source: str | None,
) -> tuple[TypeSpec, bool]:
    """Return (type, nullable) for a JSON-schema node."""
    if not isinstance(node, dict):
        return TypeSpec(), False

    ref = node.get("$ref")
    if isinstance(ref, str):
        name = ref.rsplit("/", 1)[-1]
        if name in seen:
            return TypeSpec(name=name), False
        if name not in definitions:
            raise SchemaError(f"Unresolved reference {ref}", source=source)
        resolved, nullable = _resolve_type(definitions[name], definitions, seen | {name}, source)
        if resolved.kind == FieldKind.STRING and _DECIMAL_WRAPPER.match(name):
            resolved.kind = FieldKind.DECIMAL
        resolved.name = name
        return resolved, nullable

    for combinator in ("allOf", "anyOf", "oneOf"):
        options = node.get(combinator)
        if not isinstance(options, list):
            continue
        non_null = [o for o in options if not (isinstance(o, dict) and o.get("type") == "null")]
        nullable = len(non_null) != len(options)
        if len(non_null) == 1:
            resolved, inner_nullable = _resolve_type(non_null[0], definitions, seen, source)
            return resolved, nullable or inner_nullable
        # Enum-like unions (Duration, Expiration ...) are passed through as given.
        return TypeSpec(), nullable

    json_type = node.get("type")
    nullable = False
    if isinstance(json_type, list):
        nullable = "null" in json_type
        remaining = [t for t in json_type if t != "null"]
        json_type = remaining[0] if len(remaining) == 1 else None

    if json_type in _PRIMITIVES:
        return TypeSpec(kind=_PRIMITIVES[json_type]), nullable
    if json_type == "array":
        items = node.get("items")
        item_type = _resolve_type(items, definitions, seen, source)[0] if isinstance(items, dict) else TypeSpec()
        return TypeSpec(kind=FieldKind.SEQUENCE, items=item_type), nullable
    if json_type == "object" and ("properties" in node or not node.get("additionalProperties")):
        return TypeSpec(kind=FieldKind.STRUCT, fields=_struct_fields(node, definitions, seen, source)), nullable
    return TypeSpec(), nullable
