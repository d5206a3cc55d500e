"""Stream decoder tests.

Covers fragment ordering under arbitrary chunking, boundary split recovery,
terminator handling, ignored lines, the re-buffer policy (unbounded and with
a ceiling) and the final flush.
"""
from __future__ import annotations

import json

import pytest

from advisor_stream.base.streaming import StreamDecoder


def _line(text: str) -> bytes:
    return ("data: " + json.dumps({"choices": [{"delta": {"content": text}}]}) + "\n").encode("utf-8")


STREAM = b"".join([_line("A"), b": keep-alive\n", b"\n", _line("B"), _line("C"), b"data: [DONE]\n"])


def _run(chunks, **kwargs):
    decoder = StreamDecoder(**kwargs)
    out = []
    for chunk in chunks:
        out.extend(decoder.feed(chunk))
    out.extend(decoder.finish())
    return out, decoder


def test_fragments_are_ordered_for_every_two_way_split():
    for cut in range(len(STREAM) + 1):
        out, _ = _run([STREAM[:cut], STREAM[cut:]])
        assert "".join(out) == "ABC", f"cut at {cut}"  # nosec B101 - pytest assert in tests


def test_fragments_are_ordered_for_single_byte_chunks():
    out, decoder = _run([STREAM[i : i + 1] for i in range(len(STREAM))])
    assert out == ["A", "B", "C"]  # nosec B101
    assert decoder.metrics.emitted == 3  # nosec B101
    assert decoder.metrics.terminated is True  # nosec B101


def test_payload_split_mid_json_yields_exactly_one_fragment():
    decoder = StreamDecoder()
    assert decoder.feed(b'data: {"choices":[{"delta":{"conte') == []  # nosec B101
    assert decoder.feed(b'nt":"hi"}}]}\n') == ["hi"]  # nosec B101
    assert decoder.finish() == []  # nosec B101
    assert decoder.metrics.rebuffered == 0  # nosec B101


def test_comment_and_blank_lines_do_not_interrupt_accumulation():
    out, _ = _run([_line("A") + b": keep-alive\n\n" + _line("B")])
    assert "".join(out) == "AB"  # nosec B101


def test_terminator_stops_the_current_batch_only():
    decoder = StreamDecoder()
    assert decoder.feed(_line("A") + b"data: [DONE]\n" + _line("late")) == ["A"]  # nosec B101
    assert decoder.metrics.terminated is True  # nosec B101
    assert decoder.pending.startswith("data: ")  # nosec B101
    # Lines after the terminator are re-read with the next chunk.
    assert decoder.feed(_line("B")) == ["late", "B"]  # nosec B101


def test_terminator_produces_no_fragment():
    out, decoder = _run([b"data: [DONE]\n"])
    assert out == []  # nosec B101
    assert decoder.metrics.emitted == 0  # nosec B101


def test_malformed_line_blocks_the_batch_until_flush():
    decoder = StreamDecoder()
    assert decoder.feed(b"data: {not json\n" + _line("X")) == []  # nosec B101
    assert decoder.metrics.rebuffered == 1  # nosec B101
    assert decoder.feed(_line("Y")) == []  # nosec B101
    assert decoder.metrics.rebuffered == 2  # nosec B101
    assert decoder.finish() == ["X", "Y"]  # nosec B101
    assert decoder.metrics.dropped == 1  # nosec B101


def test_rebuffer_ceiling_drops_the_stalled_line():
    decoder = StreamDecoder(max_rebuffer_attempts=1)
    assert decoder.feed(b"data: {not json\n" + _line("X")) == []  # nosec B101
    assert decoder.feed(_line("Y")) == ["X", "Y"]  # nosec B101
    assert decoder.metrics.dropped == 1  # nosec B101
    assert decoder.metrics.rebuffered == 1  # nosec B101


def test_zero_ceiling_drops_immediately():
    decoder = StreamDecoder(max_rebuffer_attempts=0)
    assert decoder.feed(b"data: {not json\n" + _line("X")) == ["X"]  # nosec B101
    assert decoder.metrics.rebuffered == 0  # nosec B101


def test_negative_ceiling_is_rejected():
    with pytest.raises(ValueError):
        StreamDecoder(max_rebuffer_attempts=-1)


def test_flush_decodes_final_partial_line():
    decoder = StreamDecoder()
    assert decoder.feed(_line("Z").rstrip(b"\n")) == []  # nosec B101
    assert decoder.finish() == ["Z"]  # nosec B101


def test_flush_skips_terminator_and_keeps_going():
    decoder = StreamDecoder()
    decoder.feed(b"data: {broken\n")
    decoder.feed(b"data: [DONE]\n" + _line("tail").rstrip(b"\n"))
    assert decoder.finish() == ["tail"]  # nosec B101
    assert decoder.metrics.dropped == 1  # nosec B101


def test_finish_runs_once_and_blocks_further_input():
    decoder = StreamDecoder()
    decoder.feed(_line("only").rstrip(b"\n"))
    assert decoder.finish() == ["only"]  # nosec B101
    assert decoder.finish() == []  # nosec B101
    assert decoder.finished is True  # nosec B101
    with pytest.raises(RuntimeError):
        decoder.feed(b"more")


def test_metrics_timings_are_recorded():
    out, decoder = _run([STREAM])
    assert out  # nosec B101
    assert decoder.metrics.time_to_first_fragment_ms is not None  # nosec B101
    assert decoder.metrics.total_duration_ms >= decoder.metrics.time_to_first_fragment_ms  # nosec B101


def test_dropped_payload_is_logged_at_debug(monkeypatch, capsys):
    monkeypatch.setenv("ADVISOR_STREAM_LOG_LEVEL", "DEBUG")
    decoder = StreamDecoder()
    decoder.feed(b"data: {broken\n")
    decoder.finish()
    events = [json.loads(line)["event"] for line in capsys.readouterr().err.splitlines() if line.strip()]
    assert "stream.rebuffer" in events  # nosec B101
    assert "stream.decode_dropped" in events  # nosec B101


def test_deeply_nested_payload_is_dropped_not_raised():
    deep = b"data: " + b"[" * 100000 + b"\n"
    out, decoder = _run([deep, _line("fine"), b"data: [DONE]\n"])
    assert out == ["fine"]  # nosec B101
    assert decoder.metrics.dropped == 1  # nosec B101
