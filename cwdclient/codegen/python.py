"""Emit a typed Python client module from a contract schema.

The generated module holds the schema as data, two protocols
(``<Prefix>ReadOnlyInterface`` and ``<Prefix>Interface``) and two concrete
clients (``<Prefix>QueryClient`` and ``<Prefix>Client``) whose methods
delegate to :meth:`ContractQueryClient.query` and
:meth:`ContractClient.execute`.
"""

from __future__ import annotations

import pprint
from collections.abc import Mapping
from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from cwdclient import __version__
from cwdclient.dispatch.encoding import UNSET
from cwdclient.dispatch.execute_client import ContractClient
from cwdclient.dispatch.surface import (
    ParamSpec,
    method_docstring,
    method_name,
    method_params,
    response_annotation,
)
from cwdclient.naming import to_class_name
from cwdclient.schema.model import ContractSchema, VariantSpec
from cwdclient.tx import AUTO_FEE

_INDENT = "    "

_HEADER = '''"""
This file was automatically generated by cwdclient {version}.
DO NOT MODIFY IT BY HAND. Instead, modify the source schema file,
and run `cwdclient generate` to regenerate this file.
"""

from __future__ import annotations

from typing import Any, Protocol

from cwdclient.dispatch import UNSET, ContractClient, ContractQueryClient
from cwdclient.schema import ContractSchema
from cwdclient.tx import AUTO_FEE, Coin, Fee
'''


def emit_python_client(
    schema: ContractSchema,
    class_prefix: str | None = None,
    response_types: Mapping[str, type[BaseModel]] | None = None,
) -> str:
    """
    Render the client module source for a schema.

    Args:
        schema: Contract schema.
        class_prefix: Prefix for generated class names; derived from the
            contract name by default.
        response_types: Response models to import and decode replies into.

    Returns:
        Python source text.
    """
    prefix = class_prefix or to_class_name(schema.contract_name)
    types = {
        name: model
        for name, model in (response_types or {}).items()
        if any(v.response is not None and v.response.name == name for v in schema.queries)
    }

    out: list[str] = [_HEADER.format(version=__version__)]
    for module in sorted({m.__module__ for m in types.values()}):
        names = sorted(n for n, m in types.items() if m.__module__ == module and m.__name__ == n)
        if names:
            out.append(f"from {module} import {', '.join(names)}\n")
    out.append("\n")
    data = schema.model_dump(mode="json", exclude_none=True)
    out.append(f"SCHEMA = ContractSchema.model_validate(\n{_indent(pprint.pformat(data, indent=1, width=96, sort_dicts=False))}\n)\n")
    response_map = ", ".join(f"{n!r}: {n}" for n in sorted(types))
    out.append(f"RESPONSE_TYPES: dict[str, Any] = {{{response_map}}}\n")

    out.append(_emit_protocols(schema, prefix, types))
    out.append(_emit_query_client(schema, prefix, types))
    out.append(_emit_client(schema, prefix, types))
    source = "".join(out)
    logger.debug("Generated {} client module ({} chars)", schema.contract_name, len(source))
    return source


def write_python_client(
    schema: ContractSchema,
    path: Path | str,
    class_prefix: str | None = None,
    response_types: Mapping[str, type[BaseModel]] | None = None,
) -> Path:
    """Write the generated module to ``path`` and return it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(emit_python_client(schema, class_prefix, response_types), encoding="utf-8")
    return path


def _emit_protocols(schema: ContractSchema, prefix: str, types: Mapping[str, type[BaseModel]]) -> str:
    lines = ["", "", f"class {prefix}ReadOnlyInterface(Protocol):", f"{_INDENT}contract_address: str", ""]
    for variant in schema.queries:
        name = method_name(variant.tag, ContractClient)
        lines.append(f"{_INDENT}async def {name}{_signature(variant, False, types)}: ...")
    lines += ["", "", f"class {prefix}Interface({prefix}ReadOnlyInterface, Protocol):", f"{_INDENT}sender: str", ""]
    for variant in schema.executes:
        name = method_name(variant.tag, ContractClient)
        lines.append(f"{_INDENT}async def {name}{_signature(variant, True, types)}: ...")
    if not schema.executes:
        lines.pop()
    return "\n".join(lines) + "\n"


def _emit_query_client(schema: ContractSchema, prefix: str, types: Mapping[str, type[BaseModel]]) -> str:
    lines = [
        "",
        "",
        f"class {prefix}QueryClient(ContractQueryClient):",
        f"{_INDENT}schema = SCHEMA",
        f"{_INDENT}response_types = RESPONSE_TYPES",
    ]
    for variant in schema.queries:
        name = method_name(variant.tag, ContractClient)
        call = f"return await self.query({variant.tag!r}, {_fields_literal(method_params(variant))})"
        lines += _method(name, variant, False, types, call)
    return "\n".join(lines) + "\n"


def _emit_client(schema: ContractSchema, prefix: str, types: Mapping[str, type[BaseModel]]) -> str:
    lines = ["", "", f"class {prefix}Client({prefix}QueryClient, ContractClient):"]
    if not schema.executes:
        lines.append(f"{_INDENT}pass")
    for variant in schema.executes:
        name = method_name(variant.tag, ContractClient)
        fields = _fields_literal(method_params(variant, execute=True))
        call = f"return await self.execute({variant.tag!r}, {fields}, fee, memo, funds)"
        lines += _method(name, variant, True, types, call)
    return "\n".join(lines) + "\n"


def _method(name: str, variant: VariantSpec, execute: bool, types: Mapping[str, type[BaseModel]], call: str) -> list[str]:
    doc = method_docstring(variant, execute=execute).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    doc_lines = doc.splitlines()
    body = [f'{_INDENT * 2}"""{doc_lines[0]}']
    body += [f"{_INDENT * 2}{line}" if line else "" for line in doc_lines[1:]]
    if len(doc_lines) > 1:
        body.append(f'{_INDENT * 2}"""')
    else:
        body[0] += '"""'
    return ["", f"{_INDENT}async def {name}{_signature(variant, execute, types)}:", *body, f"{_INDENT * 2}{call}"]


def _signature(variant: VariantSpec, execute: bool, types: Mapping[str, type[BaseModel]]) -> str:
    params = method_params(variant, execute=execute)
    parts = ["self"]
    keyword_only_started = False
    for p in params:
        if not p.is_tx_metadata and not keyword_only_started:
            parts.append("*")
            keyword_only_started = True
        parts.append(_render_param(p))
    returns = "Any" if execute else response_annotation(variant, types)
    return f"({', '.join(parts)}) -> {returns}"


def _render_param(param: ParamSpec) -> str:
    text = f"{param.name}: {param.annotation}"
    if param.default is UNSET:
        return f"{text} = UNSET"
    if isinstance(param.default, str) and param.default == AUTO_FEE:
        return f"{text} = AUTO_FEE"
    if param.default is None:
        return f"{text} = None"
    return text


def _fields_literal(params: list[ParamSpec]) -> str:
    entries = [f"{p.wire_name!r}: {p.name}" for p in params if not p.is_tx_metadata]
    return "{" + ", ".join(entries) + "}"


def _indent(text: str) -> str:
    return "\n".join(_INDENT + line for line in text.splitlines())
