"""Event filter classification tests."""
from __future__ import annotations

import pytest

from advisor_stream.base.streaming import FrameKind, classify_line


@pytest.mark.parametrize(
    "line",
    [
        "",
        "   ",
        ": keep-alive",
        ":",
        "event: message",
        "id: 7",
        "data:{\"no\":\"space\"}",
        "DATA: upper",
    ],
)
def test_non_data_lines_are_ignorable(line):
    assert classify_line(line).kind is FrameKind.IGNORABLE  # nosec B101 - pytest assert in tests


def test_data_line_payload_is_trimmed():
    framed = classify_line('data:   {"a": 1}  ')
    assert framed.kind is FrameKind.DATA  # nosec B101
    assert framed.payload == '{"a": 1}'  # nosec B101


def test_done_payload_is_terminator_even_with_padding():
    assert classify_line("data: [DONE]").kind is FrameKind.TERMINATOR  # nosec B101
    assert classify_line("data:  [DONE]  ").kind is FrameKind.TERMINATOR  # nosec B101


def test_done_outside_data_line_is_not_a_terminator():
    assert classify_line("[DONE]").kind is FrameKind.IGNORABLE  # nosec B101
