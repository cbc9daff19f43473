"""Response types of the bundled DAO voting-module contracts."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

Addr = str
Uint128 = str
# {"height": n} | {"time": seconds}
Duration = dict[str, int]
# {"at_height": n} | {"at_time": "<nanos>"} | {"never": {}}
Expiration = dict[str, Any]


class ContractVersion(BaseModel):
    contract: str
    version: str


class InfoResponse(BaseModel):
    info: ContractVersion


class TotalPowerAtHeightResponse(BaseModel):
    height: int
    power: Uint128


class VotingPowerAtHeightResponse(BaseModel):
    height: int
    power: Uint128


class Claim(BaseModel):
    amount: Uint128
    release_at: Expiration


class ClaimsResponse(BaseModel):
    claims: list[Claim] = Field(default_factory=list)


class StakerBalanceResponse(BaseModel):
    address: Addr
    balance: Uint128


class ListStakersResponse(BaseModel):
    stakers: list[StakerBalanceResponse] = Field(default_factory=list)


class Config(BaseModel):
    """Staking configuration of cwd-voting-native-staked."""
    owner: Addr | None = None
    manager: Addr | None = None
    denom: str
    unstaking_duration: Duration | None = None


RESPONSE_TYPES: dict[str, type[BaseModel]] = {
    model.__name__: model
    for model in (
        InfoResponse,
        TotalPowerAtHeightResponse,
        VotingPowerAtHeightResponse,
        ClaimsResponse,
        ListStakersResponse,
        Config,
    )
}
