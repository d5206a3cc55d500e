"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` lets a caller stop an in-flight chat stream; the
driver raises ``CancelledError`` at the next chunk boundary and settles the
stream with the ``cancelled`` error code.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
