"""
Stream driver: the caller-facing chat session.

Purpose
-------
Own one conversation and submit it to a completion function, decoding the
streamed reply into a growing assistant message.

State machine
-------------
``IDLE -> SENDING -> STREAMING -> SUCCESS | ERROR``

- A submission with blank input, or while ``SENDING``/``STREAMING``, is
  rejected: no request, no change to ``messages``.
- The user message is appended before the request is sent.
- A non-2xx response settles ``ERROR`` with the server's ``error`` field (or
  ``HTTP <status>``); 429 and 402 also raise dedicated notifications.
- Any failure while streaming discards the partial assistant message and
  appends one synthetic ``❌ **Error:** <message>`` reply instead.
- An interrupt that is not an ``Exception`` (``KeyboardInterrupt``) still
  leaves the driver settled in ``ERROR`` before it propagates.
- After settling, a new submission is accepted.

Timeout strategy
----------------
No read timeout unless ``read_timeout_seconds`` is set (see
``advisor_stream.base.timeouts``). Cancellation is cooperative through a
``CancellationToken`` polled before each chunk.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from ..base.cancellation import CancellationToken
from ..base.errors import ChatStreamError, ErrorCode, classify_exception, code_for_status
from ..base.http import get_httpx_client
from ..base.logging import LogContext, get_logger, log_event, normalized_log_event
from ..base.models import ChatMessage, StreamOutcome, StreamState
from ..base.streaming import Accumulator, StreamDecoder
from ..base.timeouts import get_timeout_config
from ..config import get_chat_config
from ..config.defaults import (
    ERROR_MESSAGE_PREFIX,
    FUNCTIONS_PATH,
    PAYMENT_REQUIRED_NOTICE,
    RATE_LIMIT_NOTICE,
)
from .request_bodies import BodyBuilder

NotifyCallback = Callable[[str, str], None]
UpdateCallback = Callable[[str], None]

SUBMIT_KEY = "Enter"


def _error_text(exc: BaseException) -> str:
    if isinstance(exc, ChatStreamError):
        return exc.message
    return str(exc) or type(exc).__name__


def _server_error_message(response: httpx.Response) -> str:
    """Return the ``error`` field of a JSON error body, else ``HTTP <status>``."""
    try:
        data = response.json()
    except ValueError:
        data = None
    err = data.get("error") if isinstance(data, dict) else None
    if err:
        return err if isinstance(err, str) else json.dumps(err, ensure_ascii=False)
    return f"HTTP {response.status_code}"


class StreamDriver:
    """Submit a conversation to a completion function and stream the reply.

    Parameters:
        function_name: Completion function (``advisor-chat``, ...).
        base_url: Backend base URL; requests go to
            ``{base_url}/functions/v1/{function_name}``.
        api_key: Bearer credential; omitted from headers when ``None``.
        build_body: Called with ``(messages, text)`` to produce the JSON body.
        client: ``httpx.Client`` to use; defaults to the shared pool.
        on_update: Receives the full assistant content after each fragment.
        notify: Receives ``(category, text)`` user notifications; defaults to
            a WARNING log line.
        max_rebuffer_attempts: Optional ceiling for re-buffering a malformed
            line (``None`` keeps retrying until end of stream).
        read_timeout_seconds: Optional per-chunk read timeout.
        messages: Initial conversation.
    """

    def __init__(
        self,
        *,
        function_name: str,
        base_url: str,
        api_key: Optional[str],
        build_body: BodyBuilder,
        client: Optional[httpx.Client] = None,
        on_update: Optional[UpdateCallback] = None,
        notify: Optional[NotifyCallback] = None,
        max_rebuffer_attempts: Optional[int] = None,
        read_timeout_seconds: Optional[float] = None,
        messages: Optional[Sequence[ChatMessage]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.function_name = function_name
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._build_body = build_body
        self._client = client or get_httpx_client(self.base_url, "stream")
        self._on_update = on_update
        self._notify = notify or self._log_notification
        self._max_rebuffer = max_rebuffer_attempts
        self._read_timeout = read_timeout_seconds
        self._messages: List[ChatMessage] = list(messages or [])
        self._input = ""
        self._state = StreamState.IDLE
        self._logger = logger or get_logger("advisor_stream.driver")

    @classmethod
    def from_config(
        cls,
        build_body: BodyBuilder,
        *,
        overrides: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "StreamDriver":
        """Build a driver from :func:`advisor_stream.config.get_chat_config`."""
        cfg = get_chat_config(overrides)
        return cls(
            function_name=cfg["function"],
            base_url=cfg["base_url"],
            api_key=cfg.get("api_key"),
            build_body=build_body,
            max_rebuffer_attempts=cfg.get("max_rebuffer_attempts"),
            read_timeout_seconds=cfg.get("read_timeout_seconds"),
            **kwargs,
        )

    # ---- caller surface ----

    @property
    def url(self) -> str:
        return f"{self.base_url}{FUNCTIONS_PATH}/{self.function_name}"

    @property
    def messages(self) -> List[ChatMessage]:
        """Snapshot of the conversation in order."""
        return list(self._messages)

    @property
    def input(self) -> str:
        return self._input

    @input.setter
    def input(self, value: str) -> None:
        self._input = value

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state.active

    def handle_key(self, key: str, *, shift: bool = False) -> Optional[StreamOutcome]:
        """Submit on a plain Enter; anything else is left to the caller.

        Shift+Enter returns ``None`` so the caller can insert a newline.
        """
        if key == SUBMIT_KEY and not shift:
            return self.send_message()
        return None

    def send_message(
        self,
        text: Optional[str] = None,
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> StreamOutcome:
        """Submit ``text`` (default: the pending ``input``) and stream the reply.

        Never raises for transport or decode failures; they are reported in
        the returned outcome and as a synthetic assistant message.
        """
        raw = self._input if text is None else text
        ctx = LogContext(endpoint=self.function_name, base_url=self.base_url, request_id=uuid.uuid4().hex[:12])
        if self._state.active or not raw.strip():
            log_event(
                self._logger,
                "stream.rejected",
                ctx,
                level=logging.DEBUG,
                reason="busy" if self._state.active else "empty_input",
            )
            return StreamOutcome(state=self._state, rejected=True)

        content = raw.strip()
        decoder = StreamDecoder(max_rebuffer_attempts=self._max_rebuffer, logger=self._logger, ctx=ctx)
        accumulator = Accumulator(self._messages, self._on_update)
        self._messages.append(ChatMessage(role="user", content=content))
        if text is None:
            self._input = ""
        self._state = StreamState.SENDING
        normalized_log_event(self._logger, "stream.start", ctx, phase="start", attempt=1, emitted=False)

        try:
            self._stream(content, decoder, accumulator, cancellation_token)
            self._state = StreamState.SUCCESS
        except Exception as exc:  # every failure settles the stream as ERROR
            return self._settle_error(exc, ctx, decoder, accumulator)
        finally:
            if self._state.active:
                self._abandon(ctx, decoder, accumulator)

        normalized_log_event(
            self._logger,
            "stream.end",
            ctx,
            phase="finalize",
            attempt=1,
            emitted=decoder.metrics.emitted > 0,
            fragments=decoder.metrics.emitted,
            rebuffered=decoder.metrics.rebuffered,
            dropped=decoder.metrics.dropped,
            terminated=decoder.metrics.terminated,
            time_to_first_fragment_ms=decoder.metrics.time_to_first_fragment_ms,
            total_duration_ms=decoder.metrics.total_duration_ms,
        )
        return StreamOutcome(state=self._state, content=accumulator.content, metrics=decoder.metrics)

    # ---- internals ----

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _request_kwargs(self) -> Dict[str, Any]:
        if self._read_timeout is None:
            return {}
        cfg = dataclasses.replace(get_timeout_config(), read_timeout_seconds=self._read_timeout)
        return {"timeout": cfg.to_httpx()}

    def _stream(
        self,
        text: str,
        decoder: StreamDecoder,
        accumulator: Accumulator,
        token: Optional[CancellationToken],
    ) -> None:
        body = self._build_body(list(self._messages), text)
        with self._client.stream(
            "POST", self.url, json=body, headers=self._headers(), **self._request_kwargs()
        ) as response:
            if not response.is_success:
                response.read()
                raise ChatStreamError(
                    code=code_for_status(response.status_code),
                    message=_server_error_message(response),
                    endpoint=self.function_name,
                    status=response.status_code,
                )
            self._state = StreamState.STREAMING
            for chunk in response.iter_bytes():
                if token is not None:
                    token.raise_if_cancelled()
                for fragment in decoder.feed(chunk):
                    accumulator.append(fragment)
        for fragment in decoder.finish():
            accumulator.append(fragment)

    def _settle_error(
        self,
        exc: Exception,
        ctx: LogContext,
        decoder: StreamDecoder,
        accumulator: Accumulator,
    ) -> StreamOutcome:
        code = classify_exception(exc)
        status = exc.status if isinstance(exc, ChatStreamError) else None
        message = _error_text(exc)
        accumulator.discard()
        self._messages.append(ChatMessage(role="assistant", content=f"{ERROR_MESSAGE_PREFIX}{message}"))
        self._state = StreamState.ERROR
        normalized_log_event(
            self._logger,
            "stream.error",
            ctx,
            phase="finalize",
            attempt=1,
            error_code=code.value,
            emitted=decoder.metrics.emitted > 0,
            level=logging.WARNING,
            status=status,
            error=message,
        )
        self._notify_for(status, message)
        return StreamOutcome(
            state=self._state,
            error_code=code,
            error=message,
            status=status,
            metrics=decoder.metrics,
        )

    def _abandon(self, ctx: LogContext, decoder: StreamDecoder, accumulator: Accumulator) -> None:
        """Settle ``ERROR`` while a non-``Exception`` (e.g. KeyboardInterrupt) propagates."""
        accumulator.discard()
        self._state = StreamState.ERROR
        normalized_log_event(
            self._logger,
            "stream.error",
            ctx,
            phase="finalize",
            attempt=1,
            error_code=ErrorCode.CANCELLED.value,
            emitted=decoder.metrics.emitted > 0,
            level=logging.WARNING,
            error="interrupted",
        )

    def _notify_for(self, status: Optional[int], message: str) -> None:
        if status == 429:
            self._notify(ErrorCode.RATE_LIMIT.value, RATE_LIMIT_NOTICE)
        elif status == 402:
            self._notify(ErrorCode.PAYMENT_REQUIRED.value, PAYMENT_REQUIRED_NOTICE)
        else:
            self._notify("error", message)

    def _log_notification(self, category: str, text: str) -> None:
        log_event(self._logger, "notify", level=logging.WARNING, category=category, text=text)


__all__ = ["StreamDriver", "NotifyCallback", "UpdateCallback", "SUBMIT_KEY"]
