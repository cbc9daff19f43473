"""Transport protocols: what the dispatchers need from the network client.

The concrete client (CosmWasm query client, signing client) is supplied by
the caller. Ordering, nonces and cancellation are its business.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class QueryTransport(Protocol):
    """Read-only evaluation of a smart query against a contract."""

    async def query_contract_smart(self, contract_address: str, query_msg: dict[str, Any]) -> Any:
        ...


@runtime_checkable
class SigningTransport(QueryTransport, Protocol):
    """Signs and broadcasts execute messages; returns the transaction receipt."""

    async def execute(
        self,
        sender_address: str,
        contract_address: str,
        msg: dict[str, Any],
        fee: Any,
        memo: str | None = None,
        funds: Any = None,
    ) -> Any:
        ...
