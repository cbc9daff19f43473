"""CLI commands for cwdclient.

Single entry point: inspect schemas, encode messages offline, run smart
queries over LCD, and generate typed client modules.
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cwdclient import __logo__, __version__
from cwdclient.cli.logging_utils import configure_cli_logging
from cwdclient.config import Config, get_config
from cwdclient.contracts import list_contracts, load_contract, response_types
from cwdclient.dispatch import ContractClient, ContractQueryClient
from cwdclient.dispatch.surface import method_params
from cwdclient.schema import ContractSchema, VariantSpec, dump_schema, load_schema
from cwdclient.transport import LcdQueryTransport
from cwdclient.tx import AUTO_FEE, parse_coins, parse_fee
from cwdclient.utils.exceptions import CwdClientError, SchemaError, classify_exception, sanitize_error_message

app = typer.Typer(
    name="cwdclient",
    help=f"{__logo__} cwdclient - typed CosmWasm contract clients",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file (default ~/.cwdclient/config.json)"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show cwdclient runtime logs"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Debug mode: print every encoded message and transport call"),
) -> None:
    """cwdclient command line."""
    try:
        config = get_config(config_path=config_path)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    configure_cli_logging(debug=debug, logs=logs, level=config.logging.level, to_file=config.logging.file)
    ctx.obj = config


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"{__logo__} cwdclient v{__version__}")


@app.command()
def contracts() -> None:
    """List bundled contract schemas."""
    table = Table(title="Bundled contracts")
    table.add_column("Contract", style="cyan")
    table.add_column("Version")
    table.add_column("Queries", justify="right")
    table.add_column("Executes", justify="right")
    for name in list_contracts():
        schema = load_contract(name)
        table.add_row(name, schema.contract_version or "-", str(len(schema.queries)), str(len(schema.executes)))
    console.print(table)


@app.command()
def inspect(
    ctx: typer.Context,
    schema_ref: str = typer.Argument(..., metavar="SCHEMA", help="Schema file, directory, or bundled contract name"),
    as_json: bool = typer.Option(False, "--json", help="Print the schema in native JSON format"),
) -> None:
    """Show the query and execute variants of a contract."""
    schema = _run(lambda: resolve_schema(schema_ref, ctx.obj))
    if as_json:
        typer.echo(dump_schema(schema))
        return
    console.print(f"[bold]{schema.contract_name}[/bold] {schema.contract_version or ''}")
    for title, variants, execute in (("Queries", schema.queries, False), ("Executes", schema.executes, True)):
        table = Table(title=title)
        table.add_column("Tag", style="cyan")
        table.add_column("Parameters")
        table.add_column("Response")
        for variant in variants:
            table.add_row(variant.tag, _describe_params(variant, execute), _describe_response(variant))
        console.print(table)


@app.command()
def encode(
    ctx: typer.Context,
    schema_ref: str = typer.Argument(..., metavar="SCHEMA", help="Schema file, directory, or bundled contract name"),
    tag: str = typer.Argument(..., help="Variant tag (snake_case or camelCase)"),
    field: list[str] = typer.Option(None, "--field", "-f", help="Field as key=value (value parsed as JSON when possible)"),
    execute: bool = typer.Option(False, "--execute", "-x", help="Encode an execute message instead of a query"),
    fee: str = typer.Option(AUTO_FEE, "--fee", help="auto, a gas multiplier, or <coins>@<gas> (execute only)"),
    memo: str = typer.Option(None, "--memo", help="Transaction memo (execute only)"),
    funds: str = typer.Option("", "--funds", help="Attached coins, e.g. 100ujuno,5uatom (execute only)"),
    sender: str = typer.Option(None, "--sender", help="Sender address (execute only; default from config)"),
) -> None:
    """Encode a message without sending it."""
    config: Config = ctx.obj
    schema = _run(lambda: resolve_schema(schema_ref, config))
    fields = _run(lambda: parse_field_options(field or []))
    if not execute:
        client = ContractQueryClient(None, "", schema)
        typer.echo(json.dumps(_run(lambda: client.encode_query(tag, fields)), indent=2))
        return
    client = ContractClient(None, sender or config.sender, "", schema)
    msg = _run(lambda: client.encode_execute(tag, fields))
    fee_value = _run(lambda: parse_fee(fee))
    coins = _run(lambda: parse_coins(funds))
    output = {
        "sender": client.sender,
        "msg": msg,
        "fee": fee_value if isinstance(fee_value, (str, float)) else fee_value.model_dump(exclude_none=True),
        "memo": memo,
        "funds": [c.model_dump() for c in coins],
    }
    typer.echo(json.dumps(output, indent=2))


@app.command()
def query(
    ctx: typer.Context,
    schema_ref: str = typer.Argument(..., metavar="SCHEMA", help="Schema file, directory, or bundled contract name"),
    address: str = typer.Argument(..., help="Contract address"),
    tag: str = typer.Argument(..., help="Query variant tag"),
    field: list[str] = typer.Option(None, "--field", "-f", help="Field as key=value (value parsed as JSON when possible)"),
    lcd: str = typer.Option(None, "--lcd", help="LCD base URL (default from config)"),
) -> None:
    """Run a smart query against a deployed contract."""
    config: Config = ctx.obj
    schema = _run(lambda: resolve_schema(schema_ref, config))
    fields = _run(lambda: parse_field_options(field or []))
    types = response_types() if schema_ref in list_contracts() else None

    async def run() -> Any:
        async with LcdQueryTransport(lcd or config.lcd.url, timeout=config.lcd.request_timeout) as transport:
            client = ContractQueryClient(transport, address, schema, types)
            return await client.query(tag, fields)

    result = _run(lambda: asyncio.run(run()))
    if hasattr(result, "model_dump"):
        result = result.model_dump(mode="json")
    typer.echo(json.dumps(result, indent=2))


@app.command()
def generate(
    ctx: typer.Context,
    schema_ref: str = typer.Argument(..., metavar="SCHEMA", help="Schema file, directory, or bundled contract name"),
    output: Path = typer.Option(..., "--output", "-o", help="Output .py file"),
    class_prefix: str = typer.Option(None, "--class-prefix", help="Class name prefix (default from contract name)"),
) -> None:
    """Generate a typed Python client module."""
    from cwdclient.codegen import write_python_client

    schema = _run(lambda: resolve_schema(schema_ref, ctx.obj))
    types = response_types() if schema_ref in list_contracts() else None
    path = write_python_client(schema, output, class_prefix, types)
    console.print(f"[green]✓[/green] Wrote {path}")


def resolve_schema(ref: str, config: Config | None = None) -> ContractSchema:
    """Resolve a schema argument: path, bundled contract name, or <name>.json in schema_paths."""
    path = Path(ref).expanduser()
    if path.exists():
        return load_schema(path)
    if ref in list_contracts():
        return load_contract(ref)
    for directory in (config.schema_paths if config else []):
        candidate = Path(directory).expanduser() / f"{ref}.json"
        if candidate.exists():
            return load_schema(candidate)
    raise SchemaError(f"Schema not found: {ref} (not a file, bundled contract, or in schema_paths)", source=ref)


def parse_field_options(items: list[str]) -> dict[str, Any]:
    """Parse ``key=value`` options; values are JSON when they parse, strings otherwise."""
    fields: dict[str, Any] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid field {item!r}; expected key=value")
        try:
            fields[key] = json.loads(raw)
        except json.JSONDecodeError:
            fields[key] = raw
    return fields


def format_error(exc: BaseException) -> tuple[str, str]:
    """Return (rich color, detail) for a failed command."""
    code, _, retryable = classify_exception(exc)
    message = exc.message if isinstance(exc, CwdClientError) else str(exc)
    detail = f"{code} ({'retryable' if retryable else 'non-retryable'}): {sanitize_error_message(message)}"
    return ("yellow" if retryable else "red"), detail


def _run(fn: Any) -> Any:
    try:
        return fn()
    except (CwdClientError, ValueError) as e:
        color, detail = format_error(e)
        console.print(f"[{color}]Error: {escape(detail)}[/{color}]")
        raise typer.Exit(1)


def _describe_params(variant: VariantSpec, execute: bool) -> str:
    parts = []
    for p in method_params(variant, execute=execute):
        if p.is_tx_metadata:
            continue
        spec = variant.field(p.wire_name)
        flags = []
        if spec is not None and spec.optional:
            flags.append("optional")
        if spec is not None and spec.nullable:
            flags.append("nullable")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        parts.append(f"{p.name}: {p.annotation}{suffix}")
    return "\n".join(parts) or "-"


def _describe_response(variant: VariantSpec) -> str:
    if variant.response is None:
        return "-"
    return variant.response.name or variant.response.kind.value
