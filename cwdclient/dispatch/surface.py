"""Typed method surface derived from a contract schema.

Each variant becomes one async method whose keyword-only parameters mirror
the variant's fields:

- required field: no default;
- optional field: default ``UNSET`` (omitted from the message);
- nullable-only field: default ``None`` (sent as null).

Execute methods take ``fee``, ``memo`` and ``funds`` first, in that order.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel

from cwdclient.dispatch.encoding import UNSET
from cwdclient.dispatch.execute_client import ContractClient
from cwdclient.dispatch.query_client import ContractQueryClient
from cwdclient.naming import to_class_name, to_param_name, to_wire_name
from cwdclient.schema.model import ContractSchema, FieldKind, TypeSpec, VariantSpec
from cwdclient.tx import AUTO_FEE
from cwdclient.utils.exceptions import EncodingError, SchemaError

_EMPTY = inspect.Parameter.empty
_KEYWORD_ONLY = inspect.Parameter.KEYWORD_ONLY
_POSITIONAL = inspect.Parameter.POSITIONAL_OR_KEYWORD

TX_PARAM_NAMES = ("fee", "memo", "funds")

_SCALAR_ANNOTATIONS = {
    FieldKind.STRING: "str",
    FieldKind.DECIMAL: "int | str",
    FieldKind.INTEGER: "int",
    FieldKind.NUMBER: "float",
    FieldKind.BOOLEAN: "bool",
    FieldKind.STRUCT: "dict[str, Any]",
    FieldKind.ANY: "Any",
}


@dataclass(frozen=True)
class ParamSpec:
    """One parameter of a generated method."""
    name: str
    wire_name: str
    annotation: str
    default: Any = _EMPTY
    kind: Any = _KEYWORD_ONLY
    description: str | None = None

    @property
    def is_tx_metadata(self) -> bool:
        return self.kind == _POSITIONAL

    def to_parameter(self) -> inspect.Parameter:
        return inspect.Parameter(self.name, self.kind, default=self.default, annotation=self.annotation)


def annotation_for(type_spec: TypeSpec) -> str:
    """Python annotation (as source text) for a field type."""
    if type_spec.kind == FieldKind.SEQUENCE:
        item = annotation_for(type_spec.items) if type_spec.items is not None else "Any"
        return f"list[{item}]"
    return _SCALAR_ANNOTATIONS[type_spec.kind]


def method_params(variant: VariantSpec, *, execute: bool = False) -> list[ParamSpec]:
    """Parameters for the method of a variant, in signature order."""
    params: list[ParamSpec] = []
    if execute:
        params.extend(
            [
                ParamSpec("fee", "fee", "Fee", AUTO_FEE, _POSITIONAL),
                ParamSpec("memo", "memo", "str | None", None, _POSITIONAL),
                ParamSpec("funds", "funds", "list[Coin] | None", None, _POSITIONAL),
            ]
        )
    for field in variant.fields:
        name = to_param_name(field.name)
        if not name.isidentifier():
            raise SchemaError(f"Field '{field.name}' of '{variant.tag}' is not a valid parameter name")
        annotation = annotation_for(field.type)
        if (field.optional or field.nullable) and annotation != "Any":
            annotation += " | None"
        if field.required:
            default: Any = _EMPTY
        elif field.optional:
            default = UNSET
        else:
            default = None
        params.append(ParamSpec(name, field.name, annotation, default, _KEYWORD_ONLY, field.description))
    return params


def method_name(tag: str, base: type) -> str:
    """Method name for a variant tag; names taken by the base class get a trailing ``_``."""
    name = to_param_name(tag)
    if not name.isidentifier():
        raise SchemaError(f"Variant tag '{tag}' is not a valid method name")
    if hasattr(base, name):
        name += "_"
    return name


def response_annotation(variant: VariantSpec, response_types: Mapping[str, type[BaseModel]]) -> str:
    if variant.response is not None and variant.response.name in response_types:
        return variant.response.name
    return "Any"


def method_docstring(variant: VariantSpec, *, execute: bool = False) -> str:
    verb = "Execute" if execute else "Query"
    lines = [variant.description.strip() if variant.description else f"{verb} ``{variant.tag}``."]
    documented = [f for f in variant.fields if f.description]
    if documented:
        lines.append("")
        lines.append("Args:")
        for field in documented:
            lines.append(f"    {to_param_name(field.name)}: {field.description.strip()}")
    return "\n".join(lines)


def build_client_classes(
    schema: ContractSchema,
    response_types: Mapping[str, type[BaseModel]] | None = None,
    class_prefix: str | None = None,
) -> tuple[type[ContractQueryClient], type[ContractClient]]:
    """
    Create the read-only and read-write client classes for a schema.

    Returns:
        ``(QueryClient, Client)``; ``Client`` subclasses ``QueryClient`` and
        adds one method per execute variant.
    """
    prefix = class_prefix or to_class_name(schema.contract_name)
    types = dict(response_types or {})

    query_ns: dict[str, Any] = {
        "__module__": __name__,
        "__doc__": f"Read-only client for {schema.contract_name}.",
        "schema": schema,
        "response_types": types,
    }
    for variant in schema.queries:
        # query_cls precedes ContractClient in the read-write MRO
        name = method_name(variant.tag, ContractClient)
        query_ns[name] = _make_method(variant, name, f"{prefix}QueryClient", types, execute=False)
    query_cls = type(f"{prefix}QueryClient", (ContractQueryClient,), query_ns)

    exec_ns: dict[str, Any] = {
        "__module__": __name__,
        "__doc__": f"Read-write client for {schema.contract_name}.",
    }
    for variant in schema.executes:
        name = method_name(variant.tag, ContractClient)
        exec_ns[name] = _make_method(variant, name, f"{prefix}Client", types, execute=True)
    client_cls = type(f"{prefix}Client", (query_cls, ContractClient), exec_ns)
    return query_cls, client_cls


def _make_method(
    variant: VariantSpec,
    name: str,
    owner: str,
    response_types: Mapping[str, type[BaseModel]],
    *,
    execute: bool,
) -> Callable[..., Any]:
    params = method_params(variant, execute=execute)
    signature = inspect.Signature(
        [inspect.Parameter("self", _POSITIONAL)] + [p.to_parameter() for p in params],
        return_annotation=response_annotation(variant, response_types) if not execute else "Any",
    )
    wire_by_param = {p.name: p.wire_name for p in params if not p.is_tx_metadata}
    tag = variant.tag

    async def method(self: Any, *args: Any, **kwargs: Any) -> Any:
        bound = _bind(signature, tag, wire_by_param, self, args, kwargs)
        fields = {wire_by_param[k]: v for k, v in bound.arguments.items() if k in wire_by_param}
        if execute:
            return await self.execute(
                tag,
                fields,
                bound.arguments["fee"],
                bound.arguments["memo"],
                bound.arguments["funds"],
            )
        return await self.query(tag, fields)

    method.__name__ = name
    method.__qualname__ = f"{owner}.{name}"
    method.__doc__ = method_docstring(variant, execute=execute)
    method.__signature__ = signature  # type: ignore[attr-defined]
    method.__annotations__ = {p.name: p.annotation for p in params}
    method.__annotations__["return"] = signature.return_annotation
    return method


def _bind(
    signature: inspect.Signature,
    tag: str,
    wire_by_param: Mapping[str, str],
    self: Any,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> inspect.BoundArguments:
    normalized: dict[str, Any] = {}
    for key, value in kwargs.items():
        target = key
        if key not in signature.parameters:
            candidate = to_param_name(to_wire_name(key))
            if candidate in wire_by_param:
                target = candidate
        if target in normalized:
            raise EncodingError(f"Field '{target}' supplied more than once for '{tag}'", variant=tag, field=target)
        normalized[target] = value
    try:
        bound = signature.bind(self, *args, **normalized)
    except TypeError as e:
        raise EncodingError(f"Invalid arguments for '{tag}': {e}", variant=tag) from e
    bound.apply_defaults()
    return bound
