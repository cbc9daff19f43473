"""Utility functions for cwdclient."""

from cwdclient.utils.exceptions import (
    CwdClientError,
    EncodingError,
    SchemaError,
    TransportError,
    ErrorCategory,
    classify_exception,
    sanitize_error_message,
)

__all__ = [
    "CwdClientError",
    "EncodingError",
    "SchemaError",
    "TransportError",
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
]
