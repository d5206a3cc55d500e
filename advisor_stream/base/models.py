"""
Domain models public surface.

Re-exports the one-class-per-file implementations under
``advisor_stream.base.models_parts``.
"""

from .models_parts.message import ChatMessage, Role
from .models_parts.stream_state import StreamState
from .models_parts.stream_outcome import StreamOutcome

__all__ = [
    "ChatMessage",
    "Role",
    "StreamState",
    "StreamOutcome",
]
