"""
Normalized chat stream error codes (taxonomy).

Defines the `ErrorCode` enumeration used by the stream driver, the transport
layer and error classification helpers. Values are lowercase snake_case and
are considered a stable public contract for logging and notifications.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    PAYMENT_REQUIRED = "payment_required"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSPORT = "transport"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
