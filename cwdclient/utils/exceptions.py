"""
Exception hierarchy and error helpers for cwdclient.

Only errors raised locally by cwdclient live here: a call that cannot be
encoded, a schema that cannot be read, a failure inside a bundled transport.
Failures raised by a caller-supplied transport or by response decoding reach
the caller unchanged.
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Coarse error classes used by the CLI to pick a color and a hint."""
    ENCODING = "encoding"
    SCHEMA = "schema"
    TRANSPORT = "transport"
    RETRYABLE = "retryable"
    DECODING = "decoding"
    FATAL = "fatal"


class CwdClientError(Exception):
    """Base exception for all cwdclient errors."""

    default_code = "UNKNOWN_ERROR"
    default_category = ErrorCategory.FATAL

    def __init__(
        self,
        message: str,
        code: str | None = None,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.category = category or self.default_category
        self.details = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class EncodingError(CwdClientError):
    """A call could not be turned into a wire message (caller error)."""

    default_code = "ENCODING_ERROR"
    default_category = ErrorCategory.ENCODING

    def __init__(self, message: str, variant: str | None = None, field: str | None = None):
        details = {k: v for k, v in (("variant", variant), ("field", field)) if v}
        super().__init__(message, details=details)
        self.variant = variant
        self.field = field


class SchemaError(CwdClientError):
    """A message-shape description is malformed or unsupported."""

    default_code = "SCHEMA_ERROR"
    default_category = ErrorCategory.SCHEMA

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message, details={"source": source} if source else None)
        self.source = source


class TransportError(CwdClientError):
    """Failure inside a bundled transport (network, HTTP status, bad body)."""

    default_code = "TRANSPORT_ERROR"
    default_category = ErrorCategory.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        retryable: bool = False,
    ):
        super().__init__(
            message,
            code=code,
            category=ErrorCategory.RETRYABLE if retryable else None,
            details={"status_code": status_code, "retryable": retryable},
        )
        self.status_code = status_code
        self.retryable = retryable


# key=value secrets, bearer headers, raw 32-byte hex keys
_SECRET_PATTERNS = (
    re.compile(r"(api[_-]?key|token|secret|password|mnemonic|private[_-]?key)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"\b[0-9a-fA-F]{64}\b"),
)


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Mask secrets before an error message is printed."""
    for pattern in _SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def classify_exception(exc: BaseException) -> tuple[str, ErrorCategory, bool]:
    """
    Return (error_code, category, retryable) for display.

    Nothing in cwdclient retries; the flag only tells the user whether trying
    again may help.
    """
    if isinstance(exc, CwdClientError):
        return exc.code, exc.category, exc.category is ErrorCategory.RETRYABLE
    if isinstance(exc, (asyncio.TimeoutError, ConnectionError)):
        code = "TIMEOUT" if isinstance(exc, asyncio.TimeoutError) else "CONNECTION_ERROR"
        return code, ErrorCategory.RETRYABLE, True
    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.DECODING, False
    # pydantic.ValidationError subclasses ValueError
    if isinstance(exc, ValueError):
        return "INVALID_VALUE", ErrorCategory.DECODING, False
    return "INTERNAL_ERROR", ErrorCategory.FATAL, False
