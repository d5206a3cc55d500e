"""Models parts package public surface.

Re-exports individual models so callers can import from
`advisor_stream.base.models_parts` if needed, while `advisor_stream.base.models`
remains the primary stable import path.
"""

from .message import ChatMessage, Role
from .stream_state import StreamState
from .stream_outcome import StreamOutcome

__all__ = [
    "ChatMessage",
    "Role",
    "StreamState",
    "StreamOutcome",
]
