"""advisor_stream package

Streaming chat client for hosted "advisor" completion functions.

Purpose:
    Send a conversation to a completion function and decode the
    line-oriented event stream it returns into a growing assistant message.
    A secondary module validates structured skill payloads.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ChatStreamError`, :class:`ErrorCode`
    - Driver: :class:`StreamDriver` and the :func:`create` helper
    - Models: :class:`ChatMessage`, :class:`StreamState`, :class:`StreamOutcome`
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .base.errors import ChatStreamError, ErrorCode
from .base.models import ChatMessage, StreamOutcome, StreamState
from .config import get_chat_config
from .service.request_bodies import body_builder_for
from .service.stream_driver import StreamDriver

__version__ = "0.1.0"


def create(
    function: Optional[str],
    target_id: str,
    *,
    overrides: Optional[Dict[str, Any]] = None,
    body_options: Optional[Dict[str, Any]] = None,
    **driver_kwargs: Any,
) -> StreamDriver:
    """Return a configured :class:`StreamDriver` for a completion function.

    ``function`` falls back to the configured default when ``None``.
    ``target_id`` is the advisor, persona or book id. ``body_options`` go to
    the request body builder (``user_id``, ``additional_context``).
    """
    merged = dict(overrides or {})
    if function:
        merged["function"] = function
    name = get_chat_config(merged)["function"]
    build = body_builder_for(name, target_id, **(body_options or {}))
    return StreamDriver.from_config(build, overrides=merged, **driver_kwargs)


__all__ = [
    "__version__",
    "ChatStreamError",
    "ErrorCode",
    "ChatMessage",
    "StreamOutcome",
    "StreamState",
    "StreamDriver",
    "create",
]
