"""Stream driver tests against an ``httpx.MockTransport`` backend.

Covers the happy path, non-2xx mapping (429/402/500), network failures,
mid-stream failures, re-entrant submission, key handling, cancellation and
the outbound request shape.
"""
from __future__ import annotations

import json

import httpx
import pytest

from advisor_stream.base.cancellation import CancellationToken
from advisor_stream.base.errors import ErrorCode
from advisor_stream.base.models import ChatMessage, StreamState
from advisor_stream.service.stream_driver import StreamDriver


def test_successful_stream_builds_assistant_message(make_driver, respond, sse, chunked):
    updates = []
    driver, requests = make_driver(lambda req: respond(chunked(sse("Hel", "lo", "!"), 7)), on_update=updates.append)
    driver.input = "  hi there  "

    outcome = driver.send_message()

    assert outcome.ok and outcome.content == "Hello!"  # nosec B101 - pytest assert in tests
    assert driver.state is StreamState.SUCCESS and driver.is_loading is False  # nosec B101
    assert driver.input == ""  # nosec B101
    assert [(m.role, m.content) for m in driver.messages] == [  # nosec B101
        ("user", "hi there"),
        ("assistant", "Hello!"),
    ]
    assert updates == ["Hel", "Hello", "Hello!"]  # nosec B101
    assert outcome.metrics.emitted == 3 and outcome.metrics.terminated  # nosec B101
    assert len(requests) == 1  # nosec B101


def test_request_shape(make_driver, respond, sse):
    driver, requests = make_driver(lambda req: respond([sse("ok")]))
    driver.send_message("question")

    req = requests[0]
    assert req.method == "POST"  # nosec B101
    assert str(req.url) == "https://backend.test/functions/v1/advisor-chat"  # nosec B101
    assert req.headers["Authorization"] == "Bearer anon-key"  # nosec B101
    assert req.headers["Content-Type"] == "application/json"  # nosec B101
    body = json.loads(req.content)
    assert body == {"messages": [{"role": "user", "content": "question"}], "advisorId": "adv-1"}  # nosec B101


def test_history_is_sent_with_each_submission(make_driver, respond, sse):
    driver, requests = make_driver(lambda req: respond([sse("reply")]))
    driver.send_message("one")
    driver.send_message("two")
    sent = json.loads(requests[1].content)["messages"]
    assert [m["content"] for m in sent] == ["one", "reply", "two"]  # nosec B101


def test_missing_api_key_omits_authorization(make_driver, respond, sse):
    driver, requests = make_driver(lambda req: respond([sse("x")]), api_key=None)
    driver.send_message("hi")
    assert "Authorization" not in requests[0].headers  # nosec B101


def test_empty_input_is_rejected_without_request(make_driver, respond, sse):
    driver, requests = make_driver(lambda req: respond([sse("x")]))
    outcome = driver.send_message("   ")
    assert outcome.rejected and not outcome.ok  # nosec B101
    assert requests == [] and driver.messages == []  # nosec B101
    assert driver.state is StreamState.IDLE  # nosec B101


def test_rate_limit_response(make_driver, notices):
    driver, _ = make_driver(lambda req: httpx.Response(429, json={"error": "Rate limits exceeded"}))
    outcome = driver.send_message("hi")

    assert outcome.state is StreamState.ERROR  # nosec B101
    assert outcome.error_code is ErrorCode.RATE_LIMIT and outcome.status == 429  # nosec B101
    assert notices.calls == [("rate_limit", "Rate limit exceeded. Please try again later.")]  # nosec B101
    assert driver.messages[-1] == ChatMessage(role="assistant", content="❌ **Error:** Rate limits exceeded")  # nosec B101


def test_payment_required_response(make_driver, notices):
    driver, _ = make_driver(lambda req: httpx.Response(402, json={"error": "Payment required"}))
    outcome = driver.send_message("hi")
    assert outcome.error_code is ErrorCode.PAYMENT_REQUIRED  # nosec B101
    assert notices.categories == ["payment_required"]  # nosec B101


def test_error_without_json_body_uses_http_status(make_driver, notices):
    driver, _ = make_driver(lambda req: httpx.Response(500, text="<html>oops</html>"))
    outcome = driver.send_message("hi")
    assert outcome.error == "HTTP 500"  # nosec B101
    assert outcome.error_code is ErrorCode.SERVER_ERROR  # nosec B101
    assert driver.messages[-1].content == "❌ **Error:** HTTP 500"  # nosec B101
    assert notices.calls == [("error", "HTTP 500")]  # nosec B101


def test_network_failure_before_headers(make_driver):
    def handler(req):
        raise httpx.ConnectError("connection refused", request=req)

    driver, _ = make_driver(handler)
    outcome = driver.send_message("hi")
    assert outcome.error_code is ErrorCode.TRANSPORT  # nosec B101
    assert [m.content for m in driver.messages] == ["hi", "❌ **Error:** connection refused"]  # nosec B101
    assert driver.state is StreamState.ERROR  # nosec B101


def test_mid_stream_failure_replaces_partial_reply(make_driver, sse):
    def body():
        yield sse("partial ", "text", done=False)
        raise httpx.ReadError("connection reset")

    driver, _ = make_driver(lambda req: httpx.Response(200, content=body()))
    outcome = driver.send_message("hi")

    assert outcome.error_code is ErrorCode.TRANSPORT  # nosec B101
    assert [(m.role, m.content) for m in driver.messages] == [  # nosec B101
        ("user", "hi"),
        ("assistant", "❌ **Error:** connection reset"),
    ]


def test_settled_driver_accepts_new_submission(make_driver, respond, sse):
    responses = iter([httpx.Response(500, json={"error": "boom"}), respond([sse("fine")])])
    driver, requests = make_driver(lambda req: next(responses))
    assert driver.send_message("first").state is StreamState.ERROR  # nosec B101
    second = driver.send_message("second")
    assert second.ok and second.content == "fine"  # nosec B101
    assert len(requests) == 2  # nosec B101


def test_reentrant_submission_is_rejected(make_driver, respond, sse):
    nested = []
    holder = {}

    def on_update(_content):
        snapshot = len(holder["driver"].messages)
        nested.append(holder["driver"].send_message("again"))
        assert len(holder["driver"].messages) == snapshot  # nosec B101

    driver, requests = make_driver(lambda req: respond([sse("a"), sse("b")]), on_update=on_update)
    holder["driver"] = driver
    outcome = driver.send_message("first")

    assert outcome.ok  # nosec B101
    assert nested and all(o.rejected for o in nested)  # nosec B101
    assert all(o.state is StreamState.STREAMING for o in nested)  # nosec B101
    assert len(requests) == 1  # nosec B101
    assert [m.content for m in driver.messages] == ["first", "ab"]  # nosec B101


def test_enter_submits_and_shift_enter_does_not(make_driver, respond, sse):
    driver, requests = make_driver(lambda req: respond([sse("ok")]))
    driver.input = "line one"
    assert driver.handle_key("Enter", shift=True) is None  # nosec B101
    assert driver.handle_key("a") is None  # nosec B101
    assert requests == []  # nosec B101
    outcome = driver.handle_key("Enter")
    assert outcome is not None and outcome.ok  # nosec B101
    assert len(requests) == 1  # nosec B101


def test_cancellation_settles_with_cancelled_code(make_driver, respond, sse):
    token = CancellationToken()

    def on_update(_content):
        token.cancel("user stop")

    driver, _ = make_driver(lambda req: respond([sse("a", done=False), sse("b")]), on_update=on_update)
    outcome = driver.send_message("hi", cancellation_token=token)

    assert outcome.error_code is ErrorCode.CANCELLED  # nosec B101
    assert driver.messages[-1].content == "❌ **Error:** user stop"  # nosec B101
    assert len(driver.messages) == 2  # nosec B101


def test_malformed_payload_is_dropped_without_failing(make_driver, respond, sse):
    driver, _ = make_driver(lambda req: respond([b"data: {oops\n", sse("fine")]))
    outcome = driver.send_message("hi")
    assert outcome.ok and outcome.content == "fine"  # nosec B101
    assert outcome.metrics.dropped == 1  # nosec B101


def test_stream_without_fragments_succeeds_with_no_assistant_message(make_driver, respond):
    driver, _ = make_driver(lambda req: respond([b": ping\n\ndata: [DONE]\n"]))
    outcome = driver.send_message("hi")
    assert outcome.ok and outcome.content == ""  # nosec B101
    assert [m.role for m in driver.messages] == ["user"]  # nosec B101


def test_from_config_reads_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.example.co/")
    monkeypatch.setenv("ADVISOR_STREAM_API_KEY", "anon")
    monkeypatch.setenv("ADVISOR_STREAM_FUNCTION", "book-chat")
    monkeypatch.setenv("ADVISOR_STREAM_MAX_REBUFFER", "3")
    with httpx.Client() as client:
        driver = StreamDriver.from_config(lambda messages, text: {}, client=client)
    assert driver.url == "https://project.example.co/functions/v1/book-chat"  # nosec B101
    assert driver._max_rebuffer == 3  # nosec B101


def test_unparseable_lines_among_good_ones_still_succeed(make_driver, respond, sse):
    deep = b"data: " + b"[" * 100000 + b"\n"
    driver, _ = make_driver(lambda req: respond([sse("A", done=False), deep, sse("B")]))
    outcome = driver.send_message("hi")
    assert outcome.ok and outcome.content == "AB"  # nosec B101
    assert driver.state is StreamState.SUCCESS  # nosec B101
    assert [(m.role, m.content) for m in driver.messages] == [("user", "hi"), ("assistant", "AB")]  # nosec B101


class _Interrupted(BaseException):
    """Stands in for KeyboardInterrupt without disturbing the test runner."""


def test_interrupt_during_stream_leaves_driver_usable(make_driver, respond, sse):
    raised = []

    def on_update(_content):
        if not raised:
            raised.append(True)
            raise _Interrupted()

    driver, requests = make_driver(lambda req: respond([sse("partial")]), on_update=on_update)
    with pytest.raises(_Interrupted):
        driver.send_message("first")

    assert driver.state is StreamState.ERROR and driver.is_loading is False  # nosec B101
    assert [m.content for m in driver.messages] == ["first"]  # nosec B101

    second = driver.send_message("second")
    assert second.ok and not second.rejected  # nosec B101
    assert len(requests) == 2  # nosec B101
