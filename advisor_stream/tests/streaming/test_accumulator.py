"""Accumulator tests: message creation, in-place growth, discard."""
from __future__ import annotations

from advisor_stream.base.models import ChatMessage
from advisor_stream.base.streaming import Accumulator


def test_first_fragment_creates_assistant_message_then_grows_in_place():
    messages = [ChatMessage(role="user", content="hello")]
    updates = []
    acc = Accumulator(messages, updates.append)

    acc.append("Hel")
    created = messages[-1]
    acc.append("lo")

    assert len(messages) == 2  # nosec B101 - pytest assert in tests
    assert messages[-1] is created  # nosec B101
    assert created.role == "assistant" and created.content == "Hello"  # nosec B101
    assert updates == ["Hel", "Hello"]  # nosec B101


def test_empty_fragment_is_a_noop():
    messages = []
    updates = []
    acc = Accumulator(messages, updates.append)
    assert acc.append("") == ""  # nosec B101
    assert messages == [] and updates == []  # nosec B101
    assert acc.in_progress is False  # nosec B101


def test_discard_removes_only_the_in_progress_message():
    user = ChatMessage(role="user", content="q")
    messages = [user]
    acc = Accumulator(messages)
    acc.append("partial")
    acc.discard()
    assert messages == [user]  # nosec B101
    assert acc.content == "" and acc.in_progress is False  # nosec B101
    acc.discard()
    assert messages == [user]  # nosec B101
