"""Fold decoded fragments into the in-progress assistant message."""
from __future__ import annotations

from typing import Callable, List, Optional

from ..models_parts.message import ChatMessage

UpdateCallback = Callable[[str], None]


class Accumulator:
    """Grow a single assistant message inside a shared conversation list.

    The first non-empty fragment appends a new assistant ``ChatMessage`` to
    ``messages``; later fragments extend that same object in place. After each
    fragment ``on_update`` receives the full content so far, synchronously
    and in delivery order.
    """

    def __init__(self, messages: List[ChatMessage], on_update: Optional[UpdateCallback] = None) -> None:
        self._messages = messages
        self._on_update = on_update
        self._message: Optional[ChatMessage] = None
        self._parts: List[str] = []

    @property
    def content(self) -> str:
        return self._message.content if self._message is not None else ""

    @property
    def in_progress(self) -> bool:
        return self._message is not None

    def append(self, fragment: str) -> str:
        """Add ``fragment`` and return the cumulative content."""
        if not fragment:
            return self.content
        self._parts.append(fragment)
        content = "".join(self._parts)
        if self._message is None:
            self._message = ChatMessage(role="assistant", content=content)
            self._messages.append(self._message)
        else:
            self._message.content = content
        if self._on_update is not None:
            self._on_update(content)
        return content

    def discard(self) -> None:
        """Remove the in-progress message from the conversation, if any."""
        if self._message is None:
            return
        for idx in range(len(self._messages) - 1, -1, -1):
            if self._messages[idx] is self._message:
                del self._messages[idx]
                break
        self._message = None
        self._parts.clear()


__all__ = ["Accumulator", "UpdateCallback"]
