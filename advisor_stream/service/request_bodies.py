"""
Request body DTOs for the completion functions.

Purpose
-------
Each completion function accepts the full conversation (history plus the new
user message) and a few routing identifiers. These pydantic models validate
that shape on the client side and serialize it with the camelCase keys the
functions expect.

Design
------
- Python attribute names are snake_case; wire names are set with aliases and
  models dump ``by_alias=True``.
- Optional identifiers are dropped from the body when unset.
- ``*_body`` factories return a ``BodyBuilder`` closure that the stream
  driver calls with the current conversation and the submitted text on
  every submission. The text is already the last user message, so the
  bodies below only use the conversation.

Failure semantics: invalid inputs raise ``pydantic.ValidationError`` at build
time (an empty conversation, a blank identifier).
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..base.models import ChatMessage
from ..config.defaults import ADVISOR_CHAT_FUNCTION, BOOK_CHAT_FUNCTION, PERSONA_CHAT_FUNCTION

BodyBuilder = Callable[[Sequence[ChatMessage], str], Dict[str, Any]]


class ChatMessageDTO(BaseModel):
    """Wire form of one conversation entry."""

    role: Literal["user", "assistant"]
    content: str


class _ChatBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: List[ChatMessageDTO] = Field(min_length=1)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class AdvisorChatBody(_ChatBody):
    """Body for ``advisor-chat``."""

    advisor_id: str = Field(alias="advisorId", min_length=1)
    user_id: Optional[str] = Field(default=None, alias="userId")


class PersonaChatBody(_ChatBody):
    """Body for ``persona-chat``.

    ``additional_context`` carries persona context fetched beforehand; it is
    sent as an empty string when none is available.
    """

    persona_id: str = Field(alias="personaId", min_length=1)
    additional_context: str = Field(default="", alias="additionalContext")
    user_id: Optional[str] = Field(default=None, alias="userId")


class BookChatBody(_ChatBody):
    """Body for ``book-chat``."""

    book_id: str = Field(alias="bookId", min_length=1)


def _wire_messages(messages: Sequence[ChatMessage]) -> List[Dict[str, str]]:
    return [m.to_dict() for m in messages]


def advisor_chat_body(advisor_id: str, user_id: Optional[str] = None) -> BodyBuilder:
    def build(messages: Sequence[ChatMessage], text: str = "") -> Dict[str, Any]:
        return AdvisorChatBody(
            messages=_wire_messages(messages), advisorId=advisor_id, userId=user_id
        ).to_payload()

    return build


def persona_chat_body(
    persona_id: str,
    additional_context: str = "",
    user_id: Optional[str] = None,
) -> BodyBuilder:
    def build(messages: Sequence[ChatMessage], text: str = "") -> Dict[str, Any]:
        return PersonaChatBody(
            messages=_wire_messages(messages),
            personaId=persona_id,
            additionalContext=additional_context,
            userId=user_id,
        ).to_payload()

    return build


def book_chat_body(book_id: str) -> BodyBuilder:
    def build(messages: Sequence[ChatMessage], text: str = "") -> Dict[str, Any]:
        return BookChatBody(messages=_wire_messages(messages), bookId=book_id).to_payload()

    return build


def body_builder_for(function: str, target_id: str, **kwargs: Any) -> BodyBuilder:
    """Return the builder matching a completion function name.

    ``target_id`` is the advisor, persona or book id depending on the
    function. Extra keyword arguments go to the specific factory.
    """
    if function == ADVISOR_CHAT_FUNCTION:
        return advisor_chat_body(target_id, **kwargs)
    if function == PERSONA_CHAT_FUNCTION:
        return persona_chat_body(target_id, **kwargs)
    if function == BOOK_CHAT_FUNCTION:
        return book_chat_body(target_id, **kwargs)
    raise ValueError(f"unknown completion function: {function!r}")


__all__ = [
    "BodyBuilder",
    "ChatMessageDTO",
    "AdvisorChatBody",
    "PersonaChatBody",
    "BookChatBody",
    "advisor_chat_body",
    "persona_chat_body",
    "book_chat_body",
    "body_builder_for",
]
