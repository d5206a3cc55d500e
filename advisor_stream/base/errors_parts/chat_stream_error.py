"""
Structured chat stream error exception type.

Wraps transport and decode failures with a normalized `ErrorCode` so the
stream driver can map them to user-facing notifications and log them
consistently.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ChatStreamError(Exception):
    """Represents a structured streaming failure with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable message; shown to the user in the synthetic
            error reply, so it carries the server text when one was provided.
        endpoint: Completion function name (e.g. ``"advisor-chat"``).
        status: HTTP status when the failure came from a non-2xx response.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    endpoint: str = "unknown"
    status: Optional[int] = None
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining endpoint, status, code, and message."""
        return f"{self.endpoint}:{self.status or '-'} {self.code.value}: {self.message}"


__all__ = ["ChatStreamError"]
