"""
Bundled contract bindings.

Schemas of the DAO voting modules ship as JSON under ``schemas/``; clients
for them are built from the schema at import time:

    from cwdclient.contracts import CwdVotingNativeStakedClient

    client = CwdVotingNativeStakedClient(signing_client, sender, address)
    await client.unstake(amount="1000")
    power = await client.total_power_at_height(height=123)
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources

from pydantic import BaseModel

from cwdclient.contracts.types import RESPONSE_TYPES
from cwdclient.dispatch.execute_client import ContractClient
from cwdclient.dispatch.query_client import ContractQueryClient
from cwdclient.dispatch.surface import build_client_classes
from cwdclient.schema.loader import parse_schema_document
from cwdclient.schema.model import ContractSchema
from cwdclient.utils.exceptions import SchemaError

_SCHEMA_DIR = "schemas"


def list_contracts() -> list[str]:
    """Names of the bundled contract schemas."""
    root = resources.files(__name__) / _SCHEMA_DIR
    return sorted(entry.name[: -len(".json")] for entry in root.iterdir() if entry.name.endswith(".json"))


@lru_cache(maxsize=None)
def load_contract(name: str) -> ContractSchema:
    """Load a bundled schema by contract name (e.g. ``cwd-voting-cw4``)."""
    resource = resources.files(__name__) / _SCHEMA_DIR / f"{name}.json"
    if not resource.is_file():
        raise SchemaError(f"Unknown bundled contract: {name}", source=name)
    return parse_schema_document(json.loads(resource.read_text(encoding="utf-8")), source=name)


def response_types() -> dict[str, type[BaseModel]]:
    """Response models for the bundled contracts, keyed by response name."""
    return dict(RESPONSE_TYPES)


def contract_clients(name: str) -> tuple[type[ContractQueryClient], type[ContractClient]]:
    """Build ``(QueryClient, Client)`` classes for a bundled contract."""
    return build_client_classes(load_contract(name), RESPONSE_TYPES)


CwdVotingNativeStakedQueryClient, CwdVotingNativeStakedClient = contract_clients("cwd-voting-native-staked")
CwdVotingCw4QueryClient, CwdVotingCw4Client = contract_clients("cwd-voting-cw4")
CwdVotingStakingDenomStakedQueryClient, CwdVotingStakingDenomStakedClient = contract_clients(
    "cwd-voting-staking-denom-staked"
)
CwdVotingCw20BalanceQueryClient, CwdVotingCw20BalanceClient = contract_clients("cwd-voting-cw20-balance")

__all__ = [
    "list_contracts",
    "load_contract",
    "response_types",
    "contract_clients",
    "CwdVotingNativeStakedQueryClient",
    "CwdVotingNativeStakedClient",
    "CwdVotingCw4QueryClient",
    "CwdVotingCw4Client",
    "CwdVotingStakingDenomStakedQueryClient",
    "CwdVotingStakingDenomStakedClient",
    "CwdVotingCw20BalanceQueryClient",
    "CwdVotingCw20BalanceClient",
]
