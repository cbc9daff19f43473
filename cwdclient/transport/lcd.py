"""Read-only transport over the Cosmos REST (LCD) smart-query endpoint."""

from __future__ import annotations

import base64
import json
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from cwdclient.utils.exceptions import TransportError


class LcdQueryTransport:
    """
    Smart queries via ``GET /cosmwasm/wasm/v1/contract/{address}/smart/{query}``.

    The query message is compact JSON, base64 encoded into the path; the
    reply's ``data`` member is returned as decoded JSON.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 20.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> LcdQueryTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @staticmethod
    def smart_query_path(contract_address: str, query_msg: dict[str, Any]) -> str:
        raw = json.dumps(query_msg, separators=(",", ":")).encode("utf-8")
        encoded = quote(base64.b64encode(raw).decode("ascii"), safe="")
        return f"/cosmwasm/wasm/v1/contract/{quote(contract_address, safe='')}/smart/{encoded}"

    async def query_contract_smart(self, contract_address: str, query_msg: dict[str, Any]) -> Any:
        path = self.smart_query_path(contract_address, query_msg)
        client = await self._get_client()
        try:
            resp = await client.get(f"{self.base_url}{path}")
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"lcd timeout: smart query on {contract_address}",
                code="LCD_TIMEOUT",
                retryable=True,
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                f"lcd network error: smart query on {contract_address}: {exc}",
                code="LCD_NETWORK_ERROR",
                retryable=True,
            ) from exc

        status_code = int(getattr(resp, "status_code", 0) or 0)
        if status_code >= 400:
            body: Any = None
            try:
                body = resp.json()
            except Exception:
                body = None
            message = self._extract_error_message(body, str(getattr(resp, "text", "") or ""))
            logger.debug("LCD {} returned {}: {}", path, status_code, message)
            raise TransportError(
                f"lcd http error {status_code}: {message}",
                code="LCD_HTTP_ERROR",
                status_code=status_code,
                retryable=self._is_retryable_status(status_code),
            )

        try:
            body = resp.json()
        except Exception as exc:
            raise TransportError(
                f"lcd bad response: non-json body for smart query on {contract_address}",
                code="LCD_BAD_RESPONSE",
                status_code=status_code or None,
            ) from exc
        if not isinstance(body, dict) or "data" not in body:
            raise TransportError(
                f"lcd bad response: missing 'data' for smart query on {contract_address}",
                code="LCD_BAD_RESPONSE",
                status_code=status_code or None,
            )
        return body["data"]

    @staticmethod
    def _is_retryable_status(status_code: int) -> bool:
        return status_code >= 500 or status_code in {408, 425, 429}

    @staticmethod
    def _extract_error_message(body: Any, fallback_text: str) -> str:
        if isinstance(body, dict):
            for key in ("message", "error", "detail"):
                val = body.get(key)
                if isinstance(val, str) and val.strip():
                    return val.strip()
        text = (fallback_text or "").strip()
        if text:
            return text[:200]
        return "request failed"
