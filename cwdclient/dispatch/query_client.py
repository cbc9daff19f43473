"""Query dispatcher: read-only calls against one contract."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from cwdclient.dispatch.encoding import encode_variant
from cwdclient.naming import to_wire_name
from cwdclient.schema.model import ContractSchema
from cwdclient.transport.protocol import QueryTransport
from cwdclient.utils.exceptions import EncodingError


class ContractQueryClient:
    """
    Stateless adapter bound to one contract address and one transport.

    ``query(tag, fields)`` encodes the tagged variant, submits it through
    ``client.query_contract_smart`` and decodes the reply into the response
    model registered for the variant (if any). Transport and decoding
    failures reach the caller unchanged.

    Generated subclasses set ``schema`` and ``response_types`` at class level
    and add one method per query variant.
    """

    schema: ContractSchema | None = None
    response_types: Mapping[str, type[BaseModel]] = {}

    def __init__(
        self,
        client: QueryTransport,
        contract_address: str,
        schema: ContractSchema | None = None,
        response_types: Mapping[str, type[BaseModel]] | None = None,
    ) -> None:
        self._client = client
        self._contract_address = contract_address
        self._schema = schema if schema is not None else type(self).schema
        self._response_types = {**type(self).response_types, **(response_types or {})}

    @property
    def client(self) -> QueryTransport:
        return self._client

    @property
    def contract_address(self) -> str:
        return self._contract_address

    @property
    def contract_schema(self) -> ContractSchema | None:
        return self._schema

    def __repr__(self) -> str:
        name = self._schema.contract_name if self._schema else "?"
        return f"{type(self).__name__}(contract={name!r}, address={self._contract_address!r})"

    def __getattr__(self, name: str) -> Any:
        # camelCase spellings (votingPowerAtHeight) resolve to the snake_case method.
        if not name.startswith("_"):
            wire = to_wire_name(name)
            if wire != name:
                return getattr(self, wire)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def encode_query(self, tag: str, fields: Mapping[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        """Build the wire message for a query without sending it."""
        variant = self._schema.query(to_wire_name(tag)) if self._schema else None
        return encode_variant(tag, merge_fields(tag, fields, kwargs), variant)

    async def query(self, tag: str, fields: Mapping[str, Any] | None = None, **kwargs: Any) -> Any:
        """
        Run a smart query.

        Args:
            tag: Query variant, e.g. ``"total_power_at_height"``.
            fields: Field values; keyword arguments are merged in.

        Returns:
            The decoded reply (a response model when one is registered).
        """
        msg = self.encode_query(tag, fields, **kwargs)
        wire_tag = next(iter(msg))
        logger.debug("Query {} on {}: {}", wire_tag, self._contract_address, msg)
        try:
            reply = await self._client.query_contract_smart(self._contract_address, msg)
        except Exception as e:
            logger.warning("Query {} on {} failed: {}", wire_tag, self._contract_address, e)
            raise
        return self._decode_response(wire_tag, reply)

    def _decode_response(self, tag: str, reply: Any) -> Any:
        variant = self._schema.query(tag) if self._schema else None
        if variant is None or variant.response is None or not variant.response.name:
            return reply
        model = self._response_types.get(variant.response.name)
        if model is None:
            return reply
        try:
            return model.model_validate(reply)
        except ValidationError as e:
            logger.warning("Reply to {} on {} does not match {}: {}", tag, self._contract_address, model.__name__, e)
            raise


def merge_fields(tag: str, fields: Mapping[str, Any] | None, extra: Mapping[str, Any]) -> dict[str, Any]:
    """Combine a field mapping and keyword fields; the same key twice is an error."""
    merged = dict(fields or {})
    for key, value in extra.items():
        if key in merged:
            raise EncodingError(f"Field '{key}' supplied more than once for '{tag}'", variant=tag, field=key)
        merged[key] = value
    return merged
