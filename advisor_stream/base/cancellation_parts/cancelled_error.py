"""Cancellation error type.

Defines the public ``CancelledError`` raised when a stream observes a
cancellation request between transport reads.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a chat stream is cancelled cooperatively.

    Distinguishes cooperative cancellation from transport or decode failures
    so the stream driver can settle with the ``cancelled`` error code.
    """

__all__ = ["CancelledError"]
