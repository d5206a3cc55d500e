"""
Pydantic DTOs for one streamed completion payload.

Purpose
-------
Describe the loose OpenAI-compatible chunk shape delivered in each
``data:`` event and expose the single field this client consumes,
``choices[0].delta.content``.

Design
------
- Models are permissive: unknown keys are ignored and fields this client
  never reads accept any value, so upstream additions never break decoding.
- Only the first choice is validated. Later choices may carry any shape.
- ``content`` is a strict string: a number or object there is treated as
  "no text" rather than coerced.

Failure semantics: a payload that does not match raises
``pydantic.ValidationError``; the payload decoder maps that to an ignorable
line, never an error.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ChunkDelta(BaseModel):
    """Incremental message delta carried by a choice."""

    model_config = ConfigDict(extra="ignore")

    role: Optional[Any] = None
    content: Optional[StrictStr] = None


class ChunkChoice(BaseModel):
    """One choice within a chunk; only ``delta`` is read."""

    model_config = ConfigDict(extra="ignore")

    index: Optional[Any] = None
    delta: Optional[ChunkDelta] = None
    finish_reason: Optional[Any] = None


class CompletionChunk(BaseModel):
    """Top-level streamed payload."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[Any] = None
    model: Optional[Any] = None
    choices: List[Any] = Field(default_factory=list)

    def first_delta_content(self) -> Optional[str]:
        """Return ``choices[0].delta.content`` or ``None`` when absent.

        Raises ``pydantic.ValidationError`` when the first choice is not an
        object of the expected shape.
        """
        if not self.choices:
            return None
        choice = ChunkChoice.model_validate(self.choices[0])
        if choice.delta is None:
            return None
        return choice.delta.content


__all__ = ["ChunkDelta", "ChunkChoice", "CompletionChunk"]
