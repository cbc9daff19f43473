"""Execute dispatcher: state-mutating calls plus every query."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from loguru import logger
from pydantic import BaseModel

from cwdclient.dispatch.encoding import encode_variant
from cwdclient.dispatch.query_client import ContractQueryClient, merge_fields
from cwdclient.naming import to_wire_name
from cwdclient.schema.model import ContractSchema
from cwdclient.transport.protocol import SigningTransport
from cwdclient.tx import AUTO_FEE, Coin, Fee


class ContractClient(ContractQueryClient):
    """
    Read-write adapter: one sender, one contract address, one signing transport.

    ``execute`` hands the message to ``client.execute`` together with fee,
    memo and funds, which are passed through untouched. The receipt is
    returned as the transport produced it.
    """

    def __init__(
        self,
        client: SigningTransport,
        sender: str,
        contract_address: str,
        schema: ContractSchema | None = None,
        response_types: Mapping[str, type[BaseModel]] | None = None,
    ) -> None:
        super().__init__(client, contract_address, schema, response_types)
        self._sender = sender

    @property
    def sender(self) -> str:
        return self._sender

    def encode_execute(self, tag: str, fields: Mapping[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        """Build the wire message for an execute without sending it."""
        variant = self._schema.execute(to_wire_name(tag)) if self._schema else None
        return encode_variant(tag, merge_fields(tag, fields, kwargs), variant)

    async def execute(
        self,
        tag: str,
        fields: Mapping[str, Any] | None = None,
        fee: Fee = AUTO_FEE,
        memo: str | None = None,
        funds: Sequence[Coin | dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> Any:
        """
        Sign and broadcast an execute message.

        Args:
            tag: Execute variant, e.g. ``"unstake"``.
            fields: Field values; keyword arguments are merged in.
            fee: ``"auto"``, a gas multiplier, or an explicit StdFee.
            memo: Transaction memo.
            funds: Coins attached to the call.

        Returns:
            The transport's execution receipt.
        """
        msg = self.encode_execute(tag, fields, **kwargs)
        wire_tag = next(iter(msg))
        logger.debug("Execute {} on {} from {}: {} (fee={})", wire_tag, self._contract_address, self._sender, msg, fee)
        try:
            return await self._client.execute(self._sender, self._contract_address, msg, fee, memo, funds)
        except Exception as e:
            logger.warning("Execute {} on {} failed: {}", wire_tag, self._contract_address, e)
            raise
