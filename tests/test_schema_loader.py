"""Tests for schema loading (cosmwasm-schema IDL, legacy directory, native format)."""

import json
from pathlib import Path

import pytest

from cwdclient.contracts import list_contracts, load_contract
from cwdclient.schema import (
    ContractSchema,
    FieldKind,
    dump_schema,
    load_schema,
    parse_cosmwasm_schema,
    parse_schema_document,
)
from cwdclient.utils.exceptions import SchemaError

QUERY_MSG = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "QueryMsg",
    "oneOf": [
        {
            "type": "object",
            "required": ["group_contract"],
            "properties": {"group_contract": {"type": "object"}},
            "additionalProperties": False,
        },
        {
            "type": "object",
            "required": ["voting_power_at_height"],
            "properties": {
                "voting_power_at_height": {
                    "type": "object",
                    "required": ["address"],
                    "properties": {
                        "address": {"type": "string"},
                        "height": {"type": ["integer", "null"], "format": "uint64", "minimum": 0.0},
                    },
                }
            },
            "additionalProperties": False,
        },
        {
            "type": "object",
            "required": ["total_power_at_height"],
            "properties": {
                "total_power_at_height": {
                    "type": "object",
                    "properties": {"height": {"type": ["integer", "null"], "format": "uint64"}},
                }
            },
            "additionalProperties": False,
        },
        {
            "type": "object",
            "required": ["info"],
            "properties": {"info": {"type": "object"}},
            "additionalProperties": False,
        },
    ],
}

EXECUTE_MSG = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "ExecuteMsg",
    "oneOf": [
        {
            "type": "object",
            "required": ["member_changed_hook"],
            "properties": {
                "member_changed_hook": {
                    "type": "object",
                    "required": ["diffs"],
                    "properties": {"diffs": {"type": "array", "items": {"$ref": "#/definitions/MemberDiff"}}},
                }
            },
            "additionalProperties": False,
        }
    ],
    "definitions": {
        "MemberDiff": {
            "description": "MemberDiff shows the old and new states for a given cw4 member.",
            "type": "object",
            "required": ["key"],
            "properties": {
                "key": {"type": "string"},
                "new": {"type": ["integer", "null"], "format": "uint64"},
                "old": {"type": ["integer", "null"], "format": "uint64"},
            },
        }
    },
}

IDL = {
    "contract_name": "cwd-voting-cw4",
    "contract_version": "0.2.0",
    "query": QUERY_MSG,
    "execute": EXECUTE_MSG,
    "responses": {
        "group_contract": {"title": "Addr", "type": "string"},
        "total_power_at_height": {
            "title": "TotalPowerAtHeightResponse",
            "type": "object",
            "required": ["height", "power"],
            "properties": {"height": {"type": "integer"}, "power": {"$ref": "#/definitions/Uint128"}},
            "definitions": {"Uint128": {"type": "string"}},
        },
    },
}

STAKING_EXECUTE = {
    "title": "ExecuteMsg",
    "oneOf": [
        {"type": "string", "enum": ["stake", "claim"]},
        {
            "type": "object",
            "required": ["unstake"],
            "properties": {
                "unstake": {
                    "type": "object",
                    "required": ["amount"],
                    "properties": {"amount": {"$ref": "#/definitions/Uint128"}},
                }
            },
        },
        {
            "type": "object",
            "required": ["update_config"],
            "properties": {
                "update_config": {
                    "type": "object",
                    "properties": {
                        "duration": {"anyOf": [{"$ref": "#/definitions/Duration"}, {"type": "null"}]},
                        "manager": {"type": ["string", "null"]},
                    },
                }
            },
        },
    ],
    "definitions": {
        "Uint128": {"description": "A thin wrapper around u128", "type": "string"},
        "Duration": {
            "oneOf": [
                {"type": "object", "required": ["height"], "properties": {"height": {"type": "integer"}}},
                {"type": "object", "required": ["time"], "properties": {"time": {"type": "integer"}}},
            ]
        },
    },
}


def test_parse_cosmwasm_idl_queries() -> None:
    schema = parse_cosmwasm_schema(IDL)
    assert schema.contract_name == "cwd-voting-cw4"
    assert schema.contract_version == "0.2.0"
    assert [q.tag for q in schema.queries] == [
        "group_contract",
        "voting_power_at_height",
        "total_power_at_height",
        "info",
    ]

    vp = schema.query("voting_power_at_height")
    address, height = vp.fields
    assert (address.name, address.type.kind, address.optional, address.nullable) == (
        "address",
        FieldKind.STRING,
        False,
        False,
    )
    assert (height.type.kind, height.optional, height.nullable) == (FieldKind.INTEGER, True, True)
    assert schema.query("info").fields == []


def test_parse_cosmwasm_idl_responses() -> None:
    schema = parse_cosmwasm_schema(IDL)
    assert schema.query("group_contract").response.name == "Addr"
    total = schema.query("total_power_at_height").response
    assert total.name == "TotalPowerAtHeightResponse"
    assert total.kind == FieldKind.STRUCT
    power = next(f for f in total.fields if f.name == "power")
    assert power.type.kind == FieldKind.DECIMAL
    assert schema.query("info").response is None


def test_parse_cosmwasm_idl_nested_struct_in_sequence() -> None:
    schema = parse_cosmwasm_schema(IDL)
    diffs = schema.execute("member_changed_hook").field("diffs")
    assert diffs.type.kind == FieldKind.SEQUENCE
    item = diffs.type.items
    assert item.kind == FieldKind.STRUCT
    assert item.name == "MemberDiff"
    assert {f.name: (f.optional, f.nullable) for f in item.fields} == {
        "key": (False, False),
        "new": (True, True),
        "old": (True, True),
    }


def test_parse_unit_variants_decimals_and_enum_unions() -> None:
    schema = parse_cosmwasm_schema({"contract_name": "staking", "execute": STAKING_EXECUTE})
    assert [e.tag for e in schema.executes] == ["stake", "claim", "unstake", "update_config"]
    assert schema.execute("stake").fields == []

    amount = schema.execute("unstake").field("amount")
    assert amount.type.kind == FieldKind.DECIMAL
    assert amount.type.name == "Uint128"
    assert amount.required

    duration = schema.execute("update_config").field("duration")
    assert duration.type.kind == FieldKind.ANY
    assert duration.type.name == "Duration"
    assert duration.optional and duration.nullable


def test_load_schema_idl_file(tmp_path: Path) -> None:
    path = tmp_path / "cwd-voting-cw4.json"
    path.write_text(json.dumps(IDL))
    schema = load_schema(path)
    assert schema.contract_name == "cwd-voting-cw4"
    assert len(schema.executes) == 1


def test_load_schema_legacy_directory(tmp_path: Path) -> None:
    schema_dir = tmp_path / "cwd-voting-cw4" / "schema"
    schema_dir.mkdir(parents=True)
    (schema_dir / "query_msg.json").write_text(json.dumps(QUERY_MSG))
    (schema_dir / "execute_msg.json").write_text(json.dumps(EXECUTE_MSG))
    schema = load_schema(schema_dir)
    assert schema.contract_name == "cwd-voting-cw4"
    assert schema.query("total_power_at_height") is not None
    assert schema.execute("member_changed_hook") is not None


def test_load_schema_directory_prefers_idl_file(tmp_path: Path) -> None:
    schema_dir = tmp_path / "cwd-voting-cw4" / "schema"
    schema_dir.mkdir(parents=True)
    (schema_dir / "cwd-voting-cw4.json").write_text(json.dumps(IDL))
    assert load_schema(schema_dir).contract_version == "0.2.0"


def test_idl_without_contract_name_uses_file_stem(tmp_path: Path) -> None:
    path = tmp_path / "my-contract.json"
    path.write_text(json.dumps({"query": QUERY_MSG}))
    assert load_schema(path).contract_name == "my-contract"


def test_native_format_round_trip(tmp_path: Path) -> None:
    original = load_contract("cwd-voting-native-staked")
    text = dump_schema(original, tmp_path / "out" / "native.json")
    assert parse_schema_document(json.loads(text)) == original
    assert load_schema(tmp_path / "out" / "native.json") == original


def test_bundled_contracts_load() -> None:
    names = list_contracts()
    assert names == [
        "cwd-voting-cw20-balance",
        "cwd-voting-cw4",
        "cwd-voting-native-staked",
        "cwd-voting-staking-denom-staked",
    ]
    for name in names:
        schema = load_contract(name)
        assert isinstance(schema, ContractSchema)
        assert schema.contract_name == name
        assert schema.query("info") is not None


def test_load_contract_unknown() -> None:
    with pytest.raises(SchemaError, match="Unknown bundled contract"):
        load_contract("cwd-voting-nope")


@pytest.mark.parametrize(
    "document, message",
    [
        ([], "must be a JSON object"),
        ({"foo": 1}, "Unrecognized schema format"),
        ({"contract_name": "x", "queries": [{"tag": "a", "bogus": 1}]}, "Invalid contract schema"),
        ({"contract_name": "x", "query": {"title": "QueryMsg"}}, "not a tagged union"),
        (
            {"contract_name": "x", "query": {"oneOf": [{"type": "object", "properties": {"a": {}, "b": {}}}]}},
            "exactly one tag property",
        ),
        (
            {
                "contract_name": "x",
                "query": {
                    "oneOf": [
                        {"type": "object", "properties": {"a": {"$ref": "#/definitions/Missing"}}},
                    ]
                },
            },
            "Unresolved reference",
        ),
    ],
)
def test_parse_schema_document_errors(document, message: str) -> None:
    with pytest.raises(SchemaError, match=message):
        parse_schema_document(document, source="test")


def test_load_schema_file_errors(tmp_path: Path) -> None:
    with pytest.raises(SchemaError, match="Schema not found"):
        load_schema(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(SchemaError, match="Failed to parse"):
        load_schema(broken)

    empty_dir = tmp_path / "empty"
    empty_dir.mkdir()
    with pytest.raises(SchemaError, match="No query_msg.json"):
        load_schema(empty_dir)
