"""Tests for the Python client generator."""

import inspect
from pathlib import Path
from typing import Any

import pytest

from cwdclient.codegen import emit_python_client, write_python_client
from cwdclient.contracts import CwdVotingNativeStakedClient, load_contract, response_types
from cwdclient.dispatch import ContractClient, ContractQueryClient
from cwdclient.schema import ContractSchema, VariantSpec
from cwdclient.contracts.types import TotalPowerAtHeightResponse
from cwdclient.tx import Coin


class RecordingTransport:
    def __init__(self, replies: dict[str, Any] | None = None):
        self.replies = replies or {}
        self.calls: list[Any] = []

    async def query_contract_smart(self, contract_address: str, query_msg: dict[str, Any]) -> Any:
        self.calls.append(("query", contract_address, query_msg))
        return self.replies.get(next(iter(query_msg)))

    async def execute(self, sender_address, contract_address, msg, fee, memo=None, funds=None) -> Any:
        self.calls.append(("execute", sender_address, contract_address, msg, fee, memo, funds))
        return {"transactionHash": "FF"}


def _load_generated(source: str) -> dict[str, Any]:
    namespace: dict[str, Any] = {"__name__": "generated_client"}
    exec(compile(source, "generated_client.py", "exec"), namespace)
    return namespace


def test_generated_module_shape() -> None:
    source = emit_python_client(load_contract("cwd-voting-native-staked"), response_types=response_types())
    assert "DO NOT MODIFY IT BY HAND" in source
    assert "class CwdVotingNativeStakedReadOnlyInterface(Protocol):" in source
    assert "class CwdVotingNativeStakedInterface(CwdVotingNativeStakedReadOnlyInterface, Protocol):" in source
    assert "class CwdVotingNativeStakedQueryClient(ContractQueryClient):" in source
    assert "class CwdVotingNativeStakedClient(CwdVotingNativeStakedQueryClient, ContractClient):" in source
    assert (
        "async def unstake(self, fee: Fee = AUTO_FEE, memo: str | None = None, "
        "funds: list[Coin] | None = None, *, amount: int | str) -> Any:"
    ) in source
    assert "async def list_stakers(self, *, limit: int | None = UNSET, start_after: str | None = UNSET)" in source
    assert "from cwdclient.contracts.types import " in source
    compile(source, "generated_client.py", "exec")


def test_generated_module_imports_only_used_response_types() -> None:
    source = emit_python_client(load_contract("cwd-voting-cw20-balance"), response_types=response_types())
    assert "ClaimsResponse" not in source
    assert "TotalPowerAtHeightResponse" in source


def test_generated_module_without_executes_or_response_types() -> None:
    source = emit_python_client(load_contract("cwd-voting-staking-denom-staked"), class_prefix="Denom")
    module = _load_generated(source)
    assert issubclass(module["DenomClient"], ContractClient)
    assert module["RESPONSE_TYPES"] == {}


def test_generated_signatures_match_runtime_surface() -> None:
    module = _load_generated(
        emit_python_client(load_contract("cwd-voting-native-staked"), response_types=response_types())
    )
    generated = module["CwdVotingNativeStakedClient"]
    assert issubclass(generated, ContractQueryClient)
    for name in ("unstake", "stake", "update_config", "claim", "list_stakers", "voting_power_at_height"):
        gen_params = inspect.signature(getattr(generated, name)).parameters
        run_params = inspect.signature(getattr(CwdVotingNativeStakedClient, name)).parameters
        assert list(gen_params) == list(run_params)
        for key in gen_params:
            assert gen_params[key].kind == run_params[key].kind
            assert gen_params[key].default == run_params[key].default


@pytest.mark.asyncio
async def test_generated_client_dispatches_like_runtime_client() -> None:
    module = _load_generated(
        emit_python_client(load_contract("cwd-voting-native-staked"), response_types=response_types())
    )
    replies = {"total_power_at_height": {"height": 5, "power": "77"}}
    gen_transport = RecordingTransport(replies)
    run_transport = RecordingTransport(replies)
    gen_client = module["CwdVotingNativeStakedClient"](gen_transport, "juno1sender", "juno1staking")
    run_client = CwdVotingNativeStakedClient(run_transport, "juno1sender", "juno1staking")
    funds = [Coin(denom="ujuno", amount="10")]

    for client in (gen_client, run_client):
        total = await client.total_power_at_height()
        assert isinstance(total, TotalPowerAtHeightResponse)
        await client.list_stakers(limit=3)
        await client.stake(funds=funds)
        await client.unstake(1.5, "bye", amount=250)
        await client.update_config(manager=None)

    assert gen_transport.calls == run_transport.calls
    assert gen_transport.calls[3] == (
        "execute",
        "juno1sender",
        "juno1staking",
        {"unstake": {"amount": "250"}},
        1.5,
        "bye",
        None,
    )


@pytest.mark.asyncio
async def test_generated_query_names_do_not_shadow_execute_members() -> None:
    schema = ContractSchema(
        contract_name="shadow",
        queries=[VariantSpec(tag="sender"), VariantSpec(tag="execute")],
        executes=[VariantSpec(tag="do_it")],
    )
    source = emit_python_client(schema)
    assert "async def sender_(self)" in source
    assert "async def execute_(self)" in source
    module = _load_generated(source)

    transport = RecordingTransport()
    client = module["ShadowClient"](transport, "juno1sender", "juno1shadow")
    assert client.sender == "juno1sender"
    await client.do_it()
    await client.sender_()
    await client.execute_()

    assert transport.calls == [
        ("execute", "juno1sender", "juno1shadow", {"do_it": {}}, "auto", None, None),
        ("query", "juno1shadow", {"sender": {}}),
        ("query", "juno1shadow", {"execute": {}}),
    ]


def test_write_python_client(tmp_path: Path) -> None:
    path = write_python_client(load_contract("cwd-voting-cw4"), tmp_path / "gen" / "cw4_client.py")
    text = path.read_text(encoding="utf-8")
    assert "class CwdVotingCw4Client(CwdVotingCw4QueryClient, ContractClient):" in text
    assert "async def member_changed_hook(" in text
