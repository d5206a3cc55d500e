"""Pytest configuration for the advisor_stream test suite.

Isolates every test from the developer's environment (config env vars, a
local ``.env`` file) and provides helpers for building event-stream bodies and
drivers backed by ``httpx.MockTransport``.
"""

from __future__ import annotations

import json
from typing import Callable, Iterable, Iterator, List, Tuple

import httpx
import pytest

from advisor_stream.config import reset_config_cache
from advisor_stream.service.request_bodies import advisor_chat_body
from advisor_stream.service.stream_driver import StreamDriver

BASE_URL = "https://backend.test"

_ISOLATED_ENV = (
    "ADVISOR_STREAM_BASE_URL",
    "ADVISOR_STREAM_API_KEY",
    "ADVISOR_STREAM_FUNCTION",
    "ADVISOR_STREAM_MAX_REBUFFER",
    "ADVISOR_STREAM_READ_TIMEOUT_SECONDS",
    "ADVISOR_STREAM_CONFIG_FILE",
    "ADVISOR_STREAM_LOG_LEVEL",
    "ADVISOR_STREAM_SKILL_INPUT_MAX_KB",
    "ADVISOR_STREAM_SKILL_OUTPUT_MAX_KB",
    "SUPABASE_URL",
    "VITE_SUPABASE_URL",
    "SUPABASE_PUBLISHABLE_KEY",
    "VITE_SUPABASE_PUBLISHABLE_KEY",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear config env vars and point the .env loader at an empty location."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


def delta_line(text: str) -> str:
    """Return one ``data:`` line carrying ``text`` as the first delta."""
    return "data: " + json.dumps({"choices": [{"delta": {"content": text}}]}) + "\n"


def sse_bytes(*deltas: str, done: bool = True) -> bytes:
    body = "".join(delta_line(d) for d in deltas)
    if done:
        body += "data: [DONE]\n"
    return body.encode("utf-8")


def split_every(data: bytes, size: int) -> List[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


@pytest.fixture()
def sse() -> Callable[..., bytes]:
    """Factory: ``sse("A", "B")`` -> encoded event stream ending in [DONE]."""
    return sse_bytes


@pytest.fixture()
def chunked() -> Callable[[bytes, int], List[bytes]]:
    return split_every


class Notices:
    """Records ``notify(category, text)`` calls."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []

    def __call__(self, category: str, text: str) -> None:
        self.calls.append((category, text))

    @property
    def categories(self) -> List[str]:
        return [c for c, _ in self.calls]


@pytest.fixture()
def notices() -> Notices:
    return Notices()


@pytest.fixture()
def make_driver(notices: Notices):
    """Build a ``StreamDriver`` whose transport is a mock handler.

    Usage: ``driver, requests = make_driver(handler, on_update=...)``; the
    returned list collects every request the transport received.
    """
    clients: List[httpx.Client] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        **kwargs,
    ) -> Tuple[StreamDriver, List[httpx.Request]]:
        seen: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(_record))
        clients.append(client)
        kwargs.setdefault("function_name", "advisor-chat")
        kwargs.setdefault("base_url", BASE_URL)
        kwargs.setdefault("api_key", "anon-key")
        kwargs.setdefault("build_body", advisor_chat_body("adv-1"))
        kwargs.setdefault("notify", notices)
        return StreamDriver(client=client, **kwargs), seen

    yield _make
    for c in clients:
        c.close()


def stream_response(chunks: Iterable[bytes], status: int = 200) -> httpx.Response:
    """A response whose body is delivered exactly in ``chunks``."""
    return httpx.Response(status, content=iter(list(chunks)), headers={"Content-Type": "text/event-stream"})


@pytest.fixture()
def respond() -> Callable[..., httpx.Response]:
    return stream_response


