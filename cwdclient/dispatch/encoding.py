"""Tagged-variant encoding.

A message is a JSON object with exactly one key, the variant tag, whose value
holds the variant's fields. Field handling is driven by the schema:

- not supplied: omitted when optional, ``null`` when nullable, else an error;
- explicit ``None``: ``null`` when nullable, omitted when optional, else an error;
- decimal fields (Uint64/Uint128) are sent as decimal strings.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from cwdclient.naming import to_wire_name
from cwdclient.schema.model import FieldKind, FieldSpec, TypeSpec, VariantSpec
from cwdclient.utils.exceptions import EncodingError


class _Unset:
    """Marker for a field the caller did not supply (distinct from None)."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def encode_variant(
    tag: str,
    fields: Mapping[str, Any] | None = None,
    variant: VariantSpec | None = None,
) -> dict[str, dict[str, Any]]:
    """
    Encode one message as ``{tag: {field: value, ...}}``.

    Args:
        tag: Variant tag in any supported spelling.
        fields: Field values keyed by external or wire name.
        variant: Declared shape; when missing, the fields are sent as given
            (None/UNSET dropped) and the remote side judges the message.

    Raises:
        EncodingError: Missing required field, unknown field, non-nullable
            None, duplicate spelling, or a value that cannot be encoded.
    """
    wire_tag = variant.tag if variant is not None else to_wire_name(tag)
    supplied = _normalize_keys(fields or {}, wire_tag, "")
    if variant is None:
        body = {
            name: _encode_value(None, value, wire_tag, name)
            for name, value in supplied.items()
            if value is not None and value is not UNSET
        }
    else:
        body = _encode_fields(variant.fields, supplied, wire_tag, "")
    return {wire_tag: body}


def encode_value(type_spec: TypeSpec | None, value: Any, *, variant: str = "", field: str = "") -> Any:
    """Encode a single value according to its declared type."""
    return _encode_value(type_spec, value, variant, field)


def _normalize_keys(fields: Mapping[str, Any], variant: str, path: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in fields.items():
        if not isinstance(key, str):
            raise EncodingError(f"Field names must be strings, got {key!r}", variant=variant, field=path or None)
        wire = to_wire_name(key)
        if wire in out:
            raise EncodingError(
                f"Field '{path}{wire}' supplied more than once for '{variant}'",
                variant=variant,
                field=f"{path}{wire}",
            )
        out[wire] = value
    return out


def _encode_fields(
    specs: list[FieldSpec],
    supplied: dict[str, Any],
    variant: str,
    path: str,
) -> dict[str, Any]:
    known = {spec.name for spec in specs}
    unknown = sorted(set(supplied) - known)
    if unknown:
        raise EncodingError(
            f"Unknown field(s) for '{variant}': {', '.join(path + u for u in unknown)}",
            variant=variant,
            field=path + unknown[0],
        )

    body: dict[str, Any] = {}
    for spec in specs:
        qualified = path + spec.name
        value = supplied.get(spec.name, UNSET)
        if value is UNSET:
            if spec.optional:
                continue
            if spec.nullable:
                body[spec.name] = None
                continue
            raise EncodingError(f"Missing required field '{qualified}' for '{variant}'", variant=variant, field=qualified)
        if value is None:
            if spec.nullable:
                body[spec.name] = None
            elif not spec.optional:
                raise EncodingError(f"Field '{qualified}' of '{variant}' is not nullable", variant=variant, field=qualified)
            continue
        body[spec.name] = _encode_value(spec.type, value, variant, qualified)
    return body


def _encode_value(type_spec: TypeSpec | None, value: Any, variant: str, field: str) -> Any:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)

    kind = type_spec.kind if type_spec is not None else FieldKind.ANY

    if kind == FieldKind.DECIMAL:
        return _encode_decimal(value, variant, field)

    if kind == FieldKind.STRUCT and type_spec is not None and type_spec.fields is not None and isinstance(value, Mapping):
        nested = _normalize_keys(value, variant, f"{field}.")
        return _encode_fields(type_spec.fields, nested, variant, f"{field}.")

    if kind == FieldKind.SEQUENCE and isinstance(value, (list, tuple)):
        items = type_spec.items if type_spec is not None else None
        return [_encode_value(items, item, variant, f"{field}[{i}]") for i, item in enumerate(value)]

    if isinstance(value, Mapping):
        return {k: _encode_value(None, v, variant, f"{field}.{k}") for k, v in value.items() if v is not UNSET}
    if isinstance(value, (list, tuple)):
        return [_encode_value(None, item, variant, f"{field}[{i}]") for i, item in enumerate(value)]
    return value


def _encode_decimal(value: Any, variant: str, field: str) -> str:
    if isinstance(value, bool):
        raise EncodingError(f"Field '{field}' of '{variant}' expects an unsigned integer, got bool", variant=variant, field=field)
    if isinstance(value, int):
        if value < 0:
            raise EncodingError(f"Field '{field}' of '{variant}' must not be negative", variant=variant, field=field)
        return str(value)
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return value
    raise EncodingError(
        f"Field '{field}' of '{variant}' expects a decimal string or int, got {value!r}",
        variant=variant,
        field=field,
    )
