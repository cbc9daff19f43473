"""Tests for the cwdclient command line."""

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

import cwdclient.cli.commands as commands
from cwdclient.cli.commands import app, format_error, parse_field_options, resolve_schema
from cwdclient.config import Config
from cwdclient.utils.exceptions import EncodingError, SchemaError, TransportError

runner = CliRunner()


@pytest.fixture
def cli(tmp_path: Path):
    config_path = tmp_path / "config.json"

    def invoke(*args: str):
        return runner.invoke(app, ["--config", str(config_path), *args])

    return invoke


def test_version(cli) -> None:
    result = cli("version")
    assert result.exit_code == 0
    assert "cwdclient v0.1.0" in result.stdout


def test_contracts_lists_bundled_schemas(cli) -> None:
    result = cli("contracts")
    assert result.exit_code == 0
    assert "cwd-voting-cw4" in result.stdout


def test_inspect(cli) -> None:
    result = cli("inspect", "cwd-voting-native-staked")
    assert result.exit_code == 0
    assert "list_stakers" in result.stdout
    assert "unstake" in result.stdout


def test_inspect_json(cli) -> None:
    result = cli("inspect", "cwd-voting-cw4", "--json")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["contract_name"] == "cwd-voting-cw4"
    assert [q["tag"] for q in data["queries"]][0] == "group_contract"


def test_encode_query(cli) -> None:
    result = cli("encode", "cwd-voting-cw4", "totalPowerAtHeight", "-f", "height=5")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"total_power_at_height": {"height": 5}}

    result = cli("encode", "cwd-voting-cw4", "total_power_at_height")
    assert json.loads(result.stdout) == {"total_power_at_height": {}}


def test_encode_execute(cli) -> None:
    result = cli(
        "encode",
        "cwd-voting-native-staked",
        "unstake",
        "--execute",
        "-f",
        "amount=1000",
        "--fee",
        "5000ujuno@200000",
        "--memo",
        "bye",
        "--funds",
        "5ujuno",
        "--sender",
        "juno1sender",
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "sender": "juno1sender",
        "msg": {"unstake": {"amount": "1000"}},
        "fee": {"amount": [{"denom": "ujuno", "amount": "5000"}], "gas": "200000"},
        "memo": "bye",
        "funds": [{"denom": "ujuno", "amount": "5"}],
    }


def test_encode_execute_defaults(cli) -> None:
    result = cli("encode", "cwd-voting-native-staked", "claim", "-x")
    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["msg"] == {"claim": {}}
    assert output["fee"] == "auto"
    assert output["funds"] == []


def test_encode_errors_exit_nonzero(cli) -> None:
    result = cli("encode", "cwd-voting-cw4", "voting_power_at_height")
    assert result.exit_code == 1
    assert "ENCODING_ERROR" in result.stdout

    result = cli("encode", "cwd-voting-nope", "info")
    assert result.exit_code == 1
    assert "SCHEMA_ERROR" in result.stdout

    result = cli("encode", "cwd-voting-cw4", "info", "-f", "novalue")
    assert result.exit_code == 1
    assert "INVALID_VALUE" in result.stdout


def test_query_uses_lcd_transport(cli, monkeypatch) -> None:
    created: list[Any] = []

    class FakeLcd:
        def __init__(self, base_url: str, timeout: float = 20.0):
            self.base_url = base_url
            self.timeout = timeout
            self.calls: list[Any] = []
            created.append(self)

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc_info):
            return None

        async def query_contract_smart(self, contract_address, query_msg):
            self.calls.append((contract_address, query_msg))
            return {"height": 9, "power": "123"}

    monkeypatch.setattr(commands, "LcdQueryTransport", FakeLcd)
    result = cli(
        "query",
        "cwd-voting-cw4",
        "juno1voting",
        "voting_power_at_height",
        "-f",
        "address=juno1member",
        "--lcd",
        "https://lcd.example",
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"height": 9, "power": "123"}
    assert created[0].base_url == "https://lcd.example"
    assert created[0].calls == [("juno1voting", {"voting_power_at_height": {"address": "juno1member"}})]


def test_query_transport_error(cli, monkeypatch) -> None:
    class FailingLcd:
        def __init__(self, base_url: str, timeout: float = 20.0):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc_info):
            return None

        async def query_contract_smart(self, contract_address, query_msg):
            raise TransportError("lcd http error 503: unavailable", code="LCD_HTTP_ERROR", status_code=503, retryable=True)

    monkeypatch.setattr(commands, "LcdQueryTransport", FailingLcd)
    result = cli("query", "cwd-voting-cw4", "juno1voting", "info")
    assert result.exit_code == 1
    assert "LCD_HTTP_ERROR" in result.stdout
    assert "retryable" in result.stdout


def test_generate(cli, tmp_path: Path) -> None:
    output = tmp_path / "out" / "staked_client.py"
    result = cli("generate", "cwd-voting-native-staked", "-o", str(output), "--class-prefix", "Staked")
    assert result.exit_code == 0
    text = output.read_text(encoding="utf-8")
    assert "class StakedClient(StakedQueryClient, ContractClient):" in text
    assert "from cwdclient.contracts.types import" in text


def test_invalid_config_file_exits(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{broken")
    result = runner.invoke(app, ["--config", str(config_path), "version"])
    assert result.exit_code == 1
    assert "Failed to load config" in result.stdout


def test_parse_field_options() -> None:
    assert parse_field_options(["height=5", "address=juno1a", "diffs=[{\"key\": \"a\"}]", "memo="]) == {
        "height": 5,
        "address": "juno1a",
        "diffs": [{"key": "a"}],
        "memo": "",
    }
    with pytest.raises(ValueError):
        parse_field_options(["=5"])


def test_resolve_schema_search_order(tmp_path: Path) -> None:
    schema_dir = tmp_path / "schemas"
    schema_dir.mkdir()
    (schema_dir / "my-contract.json").write_text(json.dumps({"contract_name": "my-contract", "queries": [{"tag": "info"}]}))

    assert resolve_schema("cwd-voting-cw4").contract_name == "cwd-voting-cw4"
    assert resolve_schema(str(schema_dir / "my-contract.json")).contract_name == "my-contract"
    assert resolve_schema("my-contract", Config(schema_paths=[str(schema_dir)])).query("info") is not None
    with pytest.raises(SchemaError):
        resolve_schema("my-contract")


def test_format_error() -> None:
    color, detail = format_error(TransportError("down", code="LCD_TIMEOUT", retryable=True))
    assert color == "yellow"
    assert detail == "LCD_TIMEOUT (retryable): down"

    color, detail = format_error(EncodingError("Missing required field 'address' token=abc"))
    assert color == "red"
    assert detail.startswith("ENCODING_ERROR (non-retryable)")
    assert "abc" not in detail
