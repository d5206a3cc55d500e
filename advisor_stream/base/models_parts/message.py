"""
Chat message DTO shared by the accumulator, the stream driver and request
body builders.

Defines the `ChatMessage` dataclass and the `Role` literal. Only the two
conversational roles exist on this side of the wire; the completion function
adds its own system prompt server-side.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal


Role = Literal["user", "assistant"]


@dataclass
class ChatMessage:
    """One entry of the conversation.

    Attributes:
        role: ``"user"`` or ``"assistant"``.
        content: Message text. For the in-progress assistant message this
            grows while the stream is active and is frozen once it settles.
    """

    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        """Return the JSON shape sent to completion functions."""
        return {"role": self.role, "content": self.content}


__all__ = [
    "ChatMessage",
    "Role",
]
