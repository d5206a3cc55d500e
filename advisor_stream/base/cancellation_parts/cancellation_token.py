"""Cooperative cancellation token implementation.

The stream driver polls the token before processing each transport chunk;
cancellation therefore takes effect at the next read boundary, never in the
middle of fragment processing.
"""

from __future__ import annotations

from threading import Lock
from typing import Optional

from .cancelled_error import CancelledError


class CancellationToken:
    """A cooperative cancellation token.

    Thread-safe for ``cancel`` from a UI/worker thread combined with
    ``raise_if_cancelled`` from the streaming loop.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._cancelled = False
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cooperative cancellation; later calls keep the first reason."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            self._reason = reason

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if the token is cancelled."""
        if self._cancelled:
            raise CancelledError(self._reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
