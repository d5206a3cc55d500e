"""
Stream driver lifecycle states.

``SUCCESS`` and ``ERROR`` are the two settled outcomes; a settled driver
accepts a new submission.
"""
from __future__ import annotations

from enum import Enum


class StreamState(str, Enum):
    """Lifecycle state of a :class:`StreamDriver`."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def active(self) -> bool:
        """True while a request is in flight (``SENDING`` or ``STREAMING``)."""
        return self in (StreamState.SENDING, StreamState.STREAMING)


__all__ = ["StreamState"]
