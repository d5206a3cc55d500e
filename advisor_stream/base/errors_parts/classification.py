"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction, status-to-code mapping, httpx exception
mapping and message-based heuristics as a fallback.
"""
from __future__ import annotations

from typing import Dict, Optional

import httpx

from ..cancellation_parts.cancelled_error import CancelledError
from .chat_stream_error import ChatStreamError
from .error_code import ErrorCode


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    402: ErrorCode.PAYMENT_REQUIRED,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.SERVER_ERROR,
    503: ErrorCode.SERVER_ERROR,
    504: ErrorCode.TIMEOUT,
}


def code_for_status(status: int) -> ErrorCode:
    """Map an HTTP status to an :class:`ErrorCode` (``UNKNOWN`` when unmapped)."""
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    return ErrorCode.SERVER_ERROR if status >= 500 else ErrorCode.UNKNOWN


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for exceptions without status information."""
    PATTERN_GROUPS = (
        (ErrorCode.TIMEOUT, ("timeout", "timed out")),
        (ErrorCode.AUTH, ("unauthorized", "forbidden", "api key")),
        (ErrorCode.PAYMENT_REQUIRED, ("payment required", "credits")),
        (ErrorCode.NOT_FOUND, ("not found",)),
        (ErrorCode.VALIDATION, ("invalid", "malformed")),
        (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
    )
    if "rate" in msg and "limit" in msg:
        return ErrorCode.RATE_LIMIT
    for code, patterns in PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ChatStreamError passthrough.
        2. Cooperative cancellation.
        3. Timeout exceptions (builtin and httpx).
        4. Other httpx transport failures.
        5. HTTP status mapping.
        6. Substring heuristics.
        7. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ChatStreamError):
        return exc.code
    if isinstance(exc, CancelledError):
        return ErrorCode.CANCELLED
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSPORT
    status = _extract_status(exc)
    if status is not None:
        return code_for_status(status)
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "code_for_status",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
