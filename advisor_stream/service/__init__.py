"""Service layer: the stream driver, request bodies and the CLI."""

from .request_bodies import (
    AdvisorChatBody,
    BodyBuilder,
    BookChatBody,
    PersonaChatBody,
    advisor_chat_body,
    body_builder_for,
    book_chat_body,
    persona_chat_body,
)
from .stream_driver import StreamDriver

__all__ = [
    "StreamDriver",
    "BodyBuilder",
    "AdvisorChatBody",
    "PersonaChatBody",
    "BookChatBody",
    "advisor_chat_body",
    "persona_chat_body",
    "book_chat_body",
    "body_builder_for",
]
