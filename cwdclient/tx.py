"""Transaction metadata for execute calls: fee, memo and attached funds.

These values travel beside the execute message and are handed to the signing
transport untouched; they never appear inside the message payload.
"""

from __future__ import annotations

import re
from typing import Any, Literal, Union

from pydantic import BaseModel, Field, field_validator

AUTO_FEE: Literal["auto"] = "auto"

_COIN_RE = re.compile(r"^(\d+)([a-zA-Z][a-zA-Z0-9/:._-]{2,127})$", re.ASCII)


def _uint_string(value: Any, what: str) -> Any:
    # int >= 0 or ASCII digits only
    if isinstance(value, bool):
        raise ValueError(f"{what} must be an unsigned integer")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"{what} must be an unsigned integer")
        return str(value)
    if isinstance(value, str) and not (value.isascii() and value.isdigit()):
        raise ValueError(f"{what} must be a decimal string, got {value!r}")
    return value


class Coin(BaseModel):
    """An amount of one denomination; amount is a decimal string (Uint128)."""
    denom: str
    amount: str

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_to_decimal_string(cls, value: Any) -> Any:
        return _uint_string(value, "amount")


class StdFee(BaseModel):
    """Explicit fee: amounts paid and gas limit."""
    amount: list[Coin] = Field(default_factory=list)
    gas: str
    granter: str | None = None
    payer: str | None = None

    @field_validator("gas", mode="before")
    @classmethod
    def _gas_to_decimal_string(cls, value: Any) -> Any:
        return _uint_string(value, "gas")


# "auto" (estimate), a gas multiplier, or an explicit fee.
Fee = Union[Literal["auto"], float, StdFee]


def parse_coins(text: str) -> list[Coin]:
    """
    Parse a comma separated coin list such as ``"100ujuno,5uatom"``.

    Raises:
        ValueError: When an entry is not ``<amount><denom>``.
    """
    coins: list[Coin] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        match = _COIN_RE.match(part)
        if not match:
            raise ValueError(f"Invalid coin: {part!r}")
        coins.append(Coin(amount=match.group(1), denom=match.group(2)))
    return coins


def parse_fee(text: str) -> Fee:
    """
    Parse a fee option: ``auto``, a multiplier (``1.4``) or ``<coins>@<gas>``.

    Examples:
        parse_fee("auto") -> "auto"
        parse_fee("1.3") -> 1.3
        parse_fee("5000ujuno@200000") -> StdFee(amount=[5000ujuno], gas="200000")
    """
    value = text.strip()
    if not value or value.lower() == AUTO_FEE:
        return AUTO_FEE
    if "@" in value:
        coins, _, gas = value.rpartition("@")
        gas = gas.strip()
        if not (gas.isascii() and gas.isdigit()):
            raise ValueError(f"Invalid gas limit: {gas!r}")
        return StdFee(amount=parse_coins(coins), gas=gas)
    try:
        multiplier = float(value)
    except ValueError:
        raise ValueError(f"Invalid fee: {text!r} (expected 'auto', a multiplier or <coins>@<gas>)") from None
    if multiplier <= 0:
        raise ValueError(f"Fee multiplier must be positive, got {multiplier}")
    return multiplier
